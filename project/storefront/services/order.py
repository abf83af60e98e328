# storefront/services/order.py

from fastapi import Request

from storefront.exceptions import ServerMisconfigured
from storefront.schemas.order import Order, OrderCreate, OrderStatus
from storefront.services.order_store import OrderStore
from storefront.services.validation import items_subtotal, validate_order


async def get_order_store(request: Request) -> OrderStore:
    store = getattr(request.app.state, "order_store", None)
    if store is None:
        await request.app.state.log.log_error("order", "Хранилище заказов не настроено (нет DATABASE_URL в production)")
        raise ServerMisconfigured()
    return store


async def create_order_service(payload: OrderCreate, request: Request) -> Order:
    """
    Создание нового заказа: проверка, затем запись.
    Письма отправляет маршрут после успешной записи.
    """
    log = request.app.state.log

    order = validate_order(payload)
    store = await get_order_store(request)

    # сумма приходит от клиента и не пересчитывается, расхождение только логируем
    subtotal = items_subtotal(order.items)
    if abs(subtotal - order.total) > 0.005:
        await log.log_warning("order", "Сумма заказа не совпадает с позициями",
                              {"id": order.id, "total": order.total, "items": subtotal})

    await store.save(order)
    await log.log_info("order", "Заказ создан", {"id": order.id, "store": store.name})
    return order


async def read_orders_service(request: Request) -> list[Order]:
    """
    Получение списка заказов, новые первыми.
    """
    log = request.app.state.log
    store = await get_order_store(request)

    orders = await store.list_orders()
    await log.log_info("order", f"{len(orders)} заказов загружено")
    return orders


async def update_order_status_service(id: str, status: OrderStatus, request: Request) -> Order:
    """
    Смена статуса заказа. Возвращает заказ после записи:
    по нему админка сверяет свой оптимистично обновлённый список.
    """
    log = request.app.state.log
    store = await get_order_store(request)

    order = await store.update_status(id, status)
    await log.log_info("order", "Статус заказа обновлён", {"id": id, "status": status})
    return order
