# storefront/schemas/order.py

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List, Literal, Optional

OrderStatus = Literal["pending", "completed"]

# ────────────── Сохранённый заказ ──────────────
class Customer(BaseModel):
    emri: str                       # имя
    mbiemri: str                    # фамилия
    email: str
    adresa: str = ""                # адрес
    shteti: str = ""                # страна
    qyteti: str = ""                # город
    otherCity: Optional[str] = None # если город = "другой"

class ProductRef(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    price: Optional[float] = None

    # клиент присылает товар целиком, лишние поля сохраняем как есть
    model_config = ConfigDict(extra="allow")

class OrderItem(BaseModel):
    product: ProductRef
    quantity: int = 1

class Order(BaseModel):
    id: str
    customer: Customer
    items: List[OrderItem]
    total: float
    date: str
    status: OrderStatus = "pending"

    model_config = ConfigDict(from_attributes=True)

# ────────────── Входные данные ──────────────
class OrderCreate(BaseModel):
    """
    Тело POST /order. Поля не типизированы строго: проверку делает
    validate_order, чтобы на любые ошибки отвечать 400 с понятным текстом,
    а не 422 от pydantic.
    """
    id: Optional[str] = None
    customer: Optional[Any] = None
    items: Optional[Any] = None
    total: Optional[Any] = None
    date: Optional[Any] = None

class OrderStatusUpdate(BaseModel):
    id: Optional[Any] = None
    status: Optional[Any] = None

class OrderCreated(BaseModel):
    ok: bool = True
    id: str

# ────────────── Тело POST /order-email ──────────────
# Письмо шлётся по тому, что прислал клиент: неверные поля становятся
# пустыми, а не дают 422.
def text_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None

def number_or_none(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return value

class EmailCustomer(BaseModel):
    emri: Optional[str] = None
    mbiemri: Optional[str] = None
    email: Optional[str] = None
    adresa: Optional[str] = None
    shteti: Optional[str] = None
    qyteti: Optional[str] = None
    otherCity: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def keep_text(cls, value):
        return text_or_none(value)

class EmailItem(BaseModel):
    product: ProductRef = Field(default_factory=ProductRef)
    quantity: int = 1

    @field_validator("product", mode="before")
    @classmethod
    def loose_product(cls, value):
        if not isinstance(value, dict):
            return {}
        return {
            **value,
            "id": text_or_none(value.get("id")),
            "name": text_or_none(value.get("name")),
            "price": number_or_none(value.get("price")),
        }

    @field_validator("quantity", mode="before")
    @classmethod
    def loose_quantity(cls, value):
        number = number_or_none(value)
        return int(number) if number is not None else 1

class OrderEmail(BaseModel):
    id: Optional[str] = None
    customer: EmailCustomer = Field(default_factory=EmailCustomer)
    items: List[EmailItem] = Field(default_factory=list)
    total: Optional[float] = None
    date: Optional[str] = None

    @field_validator("id", "date", mode="before")
    @classmethod
    def keep_text(cls, value):
        return text_or_none(value)

    @field_validator("customer", mode="before")
    @classmethod
    def loose_customer(cls, value):
        return value if isinstance(value, dict) else {}

    @field_validator("items", mode="before")
    @classmethod
    def loose_items(cls, value):
        if not isinstance(value, list):
            return []
        return [item if isinstance(item, dict) else {} for item in value]

    @field_validator("total", mode="before")
    @classmethod
    def loose_total(cls, value):
        return number_or_none(value)
