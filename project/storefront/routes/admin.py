# storefront/routes/admin.py

from typing import List

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel

from storefront.exceptions import InvalidOrder
from storefront.schemas.order import Order, OrderStatusUpdate
from storefront.services.auth import require_admin
from storefront.services.order import read_orders_service, update_order_status_service

router = APIRouter()

ORDER_STATUSES = ("pending", "completed")


class OrdersResponse(BaseModel):
    data: List[Order]


class OrderUpdated(BaseModel):
    ok: bool = True
    data: Order


# ────────────── LOGIN ──────────────
@router.post(
    "/admin-auth",
    summary="Проверка пароля администратора",
    responses={
        200: {"description": "Пароль верный"},
        401: {"description": "Неверный пароль или пароль не задан на сервере"},
    },
)
async def admin_auth(request: Request, _: bool = Depends(require_admin)):
    """
    Пароль передаётся в заголовке `x-admin-password` и сравнивается с
    секретом сервера. Клиент после ответа 200 сам держит флаг сессии и
    шлёт тот же заголовок в `/admin-orders`.
    """
    await request.app.state.log.log_info("auth", "Администратор вошёл")
    return {"ok": True}


# ────────────── READ ALL ──────────────
@router.get(
    "/admin-orders",
    response_model=OrdersResponse,
    status_code=status.HTTP_200_OK,
    summary="Получить список заказов",
    response_description="Все заказы, новые первыми",
    responses={
        200: {"description": "Список заказов успешно получен"},
        401: {"description": "Неверный пароль администратора"},
        500: {"description": "Ошибка чтения заказов"},
    },
)
async def read_orders(request: Request, _: bool = Depends(require_admin)):
    try:
        orders = await read_orders_service(request)
        return {"data": orders}
    except Exception as e:
        await request.app.state.log.log_error("order", f"Ошибка при получении списка заказов: {str(e)}")
        raise


# ────────────── UPDATE STATUS ──────────────
@router.patch(
    "/admin-orders",
    response_model=OrderUpdated,
    status_code=status.HTTP_200_OK,
    summary="Изменить статус заказа",
    response_description="Заказ после записи",
    responses={
        200: {"description": "Статус обновлён"},
        400: {"description": "Нет id или недопустимый статус"},
        401: {"description": "Неверный пароль администратора"},
        404: {"description": "Заказ не найден"},
        500: {"description": "Ошибка записи"},
    },
)
async def update_order_status(
    request: Request,
    payload: OrderStatusUpdate,
    _: bool = Depends(require_admin),
):
    if not isinstance(payload.id, str) or not payload.id or payload.status not in ORDER_STATUSES:
        raise InvalidOrder("status", "Invalid update payload")

    try:
        order = await update_order_status_service(payload.id, payload.status, request)
        return {"ok": True, "data": order}
    except Exception as e:
        await request.app.state.log.log_error("order", f"Ошибка при обновлении заказа: {str(e)}", {"id": payload.id})
        raise
