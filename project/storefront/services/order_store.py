# storefront/services/order_store.py

"""
Хранилища заказов.

OrderStore: общий интерфейс. Реализации:
  - HostedOrderStore - хостовая база через SQLAlchemy;
  - LocalOrderStore - локальный файл: base64(JSON списка заказов);
  - FallbackOrderStore - хостовая база с откатом на локальный файл.

Какая реализация используется, решает build_order_store по наличию настроек.
"""

import asyncio
import base64
import binascii
import json
import os
from abc import ABC, abstractmethod
from typing import List, Optional

import aiofiles
from pydantic import ValidationError
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.config import Settings
from storefront.exceptions import DuplicateOrder, OrderNotFound, UpstreamFailure
from storefront.models.order import Order as OrderModel
from storefront.schemas.order import Order, OrderStatus
from storefront.utils.log import Log


class OrderStore(ABC):
    name = "store"

    @abstractmethod
    async def save(self, order: Order) -> None:
        ...

    @abstractmethod
    async def list_orders(self) -> List[Order]:
        """Все заказы, новые первыми (по date)."""

    @abstractmethod
    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        """Меняет только status; возвращает заказ после записи."""


# ==========================================================
# ХОСТОВАЯ БАЗА
# ==========================================================
class HostedOrderStore(OrderStore):
    name = "hosted"

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], log: Optional[Log] = None):
        self.session_factory = session_factory
        self.log = log

    async def save(self, order: Order) -> None:
        db_order = OrderModel(**order.model_dump(mode="json"))
        try:
            async with self.session_factory() as db:
                db.add(db_order)
                await db.commit()
        except IntegrityError as e:
            # конфликт по id, а не недоступность базы
            raise DuplicateOrder(order.id) from e
        except (SQLAlchemyError, OSError) as e:
            raise UpstreamFailure("Order save failed", details=str(e)) from e

        if self.log:
            await self.log.log_info("order_store", "Заказ записан в базу", {"id": order.id})

    async def list_orders(self) -> List[Order]:
        try:
            async with self.session_factory() as db:
                result = await db.execute(select(OrderModel).order_by(OrderModel.date.desc()))
                rows = result.scalars().all()
        except (SQLAlchemyError, OSError) as e:
            raise UpstreamFailure("Failed to load orders", details=str(e)) from e

        if self.log:
            await self.log.log_info("order_store", f"{len(rows)} заказов загружено из базы")
        return [Order.model_validate(row) for row in rows]

    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        try:
            async with self.session_factory() as db:
                await db.execute(
                    update(OrderModel).where(OrderModel.id == order_id).values(status=status)
                )
                await db.commit()
                result = await db.execute(select(OrderModel).where(OrderModel.id == order_id))
                db_order = result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as e:
            raise UpstreamFailure("Failed to update order", details=str(e)) from e

        if db_order is None:
            raise OrderNotFound(order_id)

        if self.log:
            await self.log.log_info("order_store", "Статус заказа обновлён", {"id": order_id, "status": status})
        return Order.model_validate(db_order)


# ==========================================================
# ЛОКАЛЬНЫЙ ФАЙЛ
# ==========================================================
def encode_orders(orders: List[Order]) -> str:
    data = json.dumps([o.model_dump(mode="json") for o in orders], ensure_ascii=False)
    return base64.b64encode(data.encode("utf-8")).decode("ascii")


def decode_orders(blob: str) -> List[Order]:
    """Битые данные дают пустой список, а не исключение."""
    try:
        raw = json.loads(base64.b64decode(blob, validate=True).decode("utf-8"))
        if not isinstance(raw, list):
            return []
        return [Order.model_validate(item) for item in raw]
    except (binascii.Error, UnicodeDecodeError, ValueError, ValidationError):
        return []


class LocalOrderStore(OrderStore):
    name = "local"

    def __init__(self, path: str, log: Optional[Log] = None):
        self.path = path
        self.log = log
        self.lock = asyncio.Lock()

    async def read_blob(self) -> str:
        if not os.path.exists(self.path):
            return ""
        async with aiofiles.open(self.path, mode="r", encoding="utf-8") as f:
            return await f.read()

    async def write_blob(self, blob: str):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        async with aiofiles.open(self.path, mode="w", encoding="utf-8") as f:
            await f.write(blob)

    async def load(self) -> List[Order]:
        try:
            blob = await self.read_blob()
        except OSError as e:
            if self.log:
                await self.log.log_error("order_store", f"Ошибка чтения локального хранилища: {e}")
            return []
        return decode_orders(blob) if blob else []

    async def save(self, order: Order) -> None:
        async with self.lock:
            orders = await self.load()
            if any(o.id == order.id for o in orders):
                raise DuplicateOrder(order.id)
            # новые заказы в начало списка
            await self.write_blob(encode_orders([order, *orders]))

        if self.log:
            await self.log.log_warning("order_store", "Заказ сохранён локально", {"id": order.id, "path": self.path})

    async def list_orders(self) -> List[Order]:
        async with self.lock:
            orders = await self.load()
        return sorted(orders, key=lambda o: o.date, reverse=True)

    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        async with self.lock:
            orders = await self.load()
            target = next((o for o in orders if o.id == order_id), None)
            if target is None:
                raise OrderNotFound(order_id)

            updated = [o.model_copy(update={"status": status}) if o.id == order_id else o for o in orders]
            await self.write_blob(encode_orders(updated))

        if self.log:
            await self.log.log_info("order_store", "Статус заказа обновлён локально", {"id": order_id, "status": status})
        return target.model_copy(update={"status": status})


# ==========================================================
# БАЗА С ОТКАТОМ НА ЛОКАЛЬНЫЙ ФАЙЛ
# ==========================================================
class FallbackOrderStore(OrderStore):
    """
    Чтение и смена статуса при ошибке базы уходят в локальный файл.
    Откат только на UpstreamFailure: DuplicateOrder и OrderNotFound
    отдаются как есть.
    Сохранение уходит туда только при fallback_on_save (режим разработки),
    иначе ошибка пробрасывается вызывающему.
    """
    name = "fallback"

    def __init__(self, primary: OrderStore, fallback: OrderStore,
                 fallback_on_save: bool = True, log: Optional[Log] = None):
        self.primary = primary
        self.fallback = fallback
        self.fallback_on_save = fallback_on_save
        self.log = log

    async def warn(self, operation: str, error: UpstreamFailure):
        if self.log:
            await self.log.log_error("order_store", f"{operation}: ошибка базы, используем локальное хранилище",
                                     {"error": error.message, "details": error.details})

    async def save(self, order: Order) -> None:
        try:
            await self.primary.save(order)
        except UpstreamFailure as e:
            if not self.fallback_on_save:
                raise
            await self.warn("save", e)
            await self.fallback.save(order)

    async def list_orders(self) -> List[Order]:
        try:
            return await self.primary.list_orders()
        except UpstreamFailure as e:
            await self.warn("list", e)
            return await self.fallback.list_orders()

    async def update_status(self, order_id: str, status: OrderStatus) -> Order:
        try:
            return await self.primary.update_status(order_id, status)
        except UpstreamFailure as e:
            await self.warn("update_status", e)
            return await self.fallback.update_status(order_id, status)


# ==========================================================
# ВЫБОР ХРАНИЛИЩА ПО НАСТРОЙКАМ
# ==========================================================
def build_order_store(settings: Settings,
                      session_factory: Optional[async_sessionmaker[AsyncSession]],
                      log: Optional[Log] = None) -> Optional[OrderStore]:
    """
    DATABASE_URL есть, разработка   → база + локальный файл
    DATABASE_URL есть, production    → только база
    DATABASE_URL нет, разработка    → только локальный файл (демо)
    DATABASE_URL нет, production     → None: сервер не настроен
    """
    local = LocalOrderStore(settings.LOCAL_STORE_PATH, log)

    if session_factory is not None:
        hosted = HostedOrderStore(session_factory, log)
        if settings.is_production:
            return hosted
        return FallbackOrderStore(hosted, local, fallback_on_save=True, log=log)

    if settings.is_production:
        return None
    return local
