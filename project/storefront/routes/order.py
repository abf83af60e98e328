# storefront/routes/order.py

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status

from storefront.config import settings
from storefront.exceptions import StorefrontError
from storefront.schemas.order import OrderCreate, OrderCreated, OrderEmail
from storefront.services.order import create_order_service
from storefront.utils.rate_limit import client_address

router = APIRouter()


async def order_rate_limit(request: Request):
    """Не больше RATE_LIMIT_MAX заказов с одного адреса за окно."""
    address = client_address(request, settings.TRUST_FORWARDED_FOR)
    try:
        await request.app.state.rate_limiter.check(address)
    except StorefrontError:
        await request.app.state.log.log_warning("rate_limit", "Превышен лимит заказов", {"address": address})
        raise


# ────────────── CREATE ──────────────
@router.post(
    "/order",
    response_model=OrderCreated,
    status_code=status.HTTP_200_OK,
    summary="Оформить заказ",
    response_description="Возвращает ID созданного заказа",
    responses={
        200: {"description": "Заказ принят"},
        400: {"description": "Неверные данные покупателя, позиций или суммы"},
        409: {"description": "Заказ с таким id уже есть"},
        429: {"description": "Слишком много заказов с одного адреса"},
        500: {"description": "Сервер не настроен или ошибка записи"},
    },
    dependencies=[Depends(order_rate_limit)],
)
async def create_order(
    request: Request,
    payload: OrderCreate,
    background_tasks: BackgroundTasks,
):
    try:
        order = await create_order_service(payload, request)
    except StorefrontError as e:
        await request.app.state.log.log_error("order", f"Заказ не принят: {e.message}",
                                              {"field": getattr(e, "field", None), "details": e.details})
        raise

    # письма после записи, ответ покупателю их не ждёт
    background_tasks.add_task(request.app.state.notifier.notify, order)
    return {"ok": True, "id": order.id}


# ────────────── EMAIL ──────────────
@router.post(
    "/order-email",
    status_code=status.HTTP_200_OK,
    summary="Отправить письма по заказу",
    responses={
        200: {"description": "Письма отправлены"},
        500: {"description": "Почта не настроена или провайдер вернул ошибку"},
    },
)
async def send_order_email(request: Request, order: Optional[OrderEmail] = None):
    await request.app.state.notifier.send(order or OrderEmail())
    return {"ok": True}
