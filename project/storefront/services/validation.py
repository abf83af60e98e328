# storefront/services/validation.py

"""
Проверка и нормализация заказа до сохранения.

Порядок как у обработчика оформления заказа: сначала покупатель, потом
позиции, потом сумма. Первая же ошибка даёт InvalidOrder, ни база, ни почта
при этом не трогаются.
"""

import math
import re
import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from storefront.exceptions import InvalidOrder
from storefront.schemas.order import Customer, Order, OrderCreate, OrderItem

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
EMAIL_MAX_LENGTH = 255

# значение города "другой" в форме оформления; тогда город берётся из otherCity
OTHER_CITY_VALUES = ("other", "Tjetër")

_BASE36 = string.digits + string.ascii_lowercase


def sanitize(value: Any, max_length: int = 200) -> str:
    """Обрезает пробелы и длину; всё, что не строка, превращается в ''."""
    if not isinstance(value, str):
        return ""
    return value.strip()[:max_length]


def is_valid_email(value: Any) -> bool:
    return isinstance(value, str) and len(value) <= EMAIL_MAX_LENGTH and EMAIL_RE.match(value) is not None


def is_other_city(city: str | None) -> bool:
    return city in OTHER_CITY_VALUES


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_order_id() -> str:
    """Метка времени (мс, base36) + случайный хвост."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(10))
    return to_base36(int(time.time() * 1000)) + suffix


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def validate_customer(raw: Any) -> Customer:
    data = raw if isinstance(raw, dict) else {}
    email = sanitize(data.get("email"), EMAIL_MAX_LENGTH + 1)

    if not sanitize(data.get("emri")) or not sanitize(data.get("mbiemri")) or not is_valid_email(email):
        raise InvalidOrder("customer", "Invalid customer details")

    city = sanitize(data.get("qyteti"), 80)
    other_city = sanitize(data.get("otherCity"), 80) if is_other_city(city) else ""

    return Customer(
        emri=sanitize(data.get("emri"), 80),
        mbiemri=sanitize(data.get("mbiemri"), 80),
        email=email,
        adresa=sanitize(data.get("adresa"), 200),
        shteti=sanitize(data.get("shteti"), 80),
        qyteti=city,
        otherCity=other_city or None,
    )


def validate_items(raw: Any) -> list[OrderItem]:
    if not isinstance(raw, list) or len(raw) == 0:
        raise InvalidOrder("items", "Order items missing")

    items = []
    for entry in raw:
        if not isinstance(entry, dict) or not isinstance(entry.get("product"), dict):
            raise InvalidOrder("items", "Order items missing")

        quantity = entry.get("quantity", 1)
        if isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
            quantity = 1
        # количество не меньше 1
        quantity = max(1, int(quantity))

        product = dict(entry["product"])
        price = product.get("price")
        if price is not None and (isinstance(price, bool) or not isinstance(price, (int, float))):
            product["price"] = None

        try:
            items.append(OrderItem(product=product, quantity=quantity))
        except ValidationError:
            raise InvalidOrder("items", "Order items missing")
    return items


def validate_total(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)) or not math.isfinite(raw) or raw < 0:
        raise InvalidOrder("total", "Invalid total")
    return float(raw)


def items_subtotal(items: list[OrderItem]) -> float:
    return sum((item.product.price or 0) * item.quantity for item in items)


def validate_order(payload: OrderCreate) -> Order:
    """
    Возвращает заказ, готовый к записи: status всегда pending,
    id и date проставляются, если клиент их не прислал.
    """
    customer = validate_customer(payload.customer)
    items = validate_items(payload.items)
    total = validate_total(payload.total)

    order_id = sanitize(payload.id, 64) or generate_order_id()
    date = payload.date if isinstance(payload.date, str) and payload.date.strip() else utc_now_iso()

    return Order(
        id=order_id,
        customer=customer,
        items=items,
        total=total,
        date=date,
        status="pending",
    )
