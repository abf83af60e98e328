# storefront/services/notification.py

import asyncio
from typing import Callable, Optional

from storefront.exceptions import ServerMisconfigured, UpstreamFailure
from storefront.schemas.order import Order, OrderEmail
from storefront.services.email import send_email
from storefront.services.validation import is_other_city
from storefront.utils.log import Log
from storefront.utils.template import render_template

CUSTOMER_SUBJECT = "Your Magie Skin order is confirmed"


def format_money(value) -> str:
    """Сумма в евро в формате en-US: €1,250.00"""
    amount = value if isinstance(value, (int, float)) and not isinstance(value, bool) else 0
    sign = "-" if amount < 0 else ""
    return f"{sign}€{abs(amount):,.2f}"


def customer_name(order: Order | OrderEmail) -> str:
    return f"{order.customer.emri or ''} {order.customer.mbiemri or ''}".strip() or "Customer"


def customer_address(order: Order | OrderEmail) -> str:
    c = order.customer
    city = c.otherCity if is_other_city(c.qyteti) else c.qyteti
    return ", ".join(part for part in (c.adresa, city, c.shteti) if part)


def item_lines(order: Order | OrderEmail) -> list[dict]:
    return [
        {
            "name": item.product.name or "Item",
            "quantity": item.quantity,
            "price": format_money(item.product.price),
        }
        for item in order.items
    ]


def build_messages(order: Order | OrderEmail, notify_to: str) -> list[dict]:
    """
    Письма по заказу: уведомление магазину и, если есть email,
    подтверждение покупателю. Текст и HTML из одного списка позиций.
    """
    context = {
        "order": order,
        "customer_name": customer_name(order),
        "customer_email": order.customer.email,
        "address": customer_address(order),
        "items": item_lines(order),
        "total": format_money(order.total),
    }

    messages = [{
        "to": notify_to,
        "subject": f"New order placed (#{order.id})" if order.id else "New order placed",
        "text": render_template("emails/admin_order.txt", **context),
        "html": render_template("emails/admin_order.html", **context),
    }]

    if order.customer.email:
        messages.append({
            "to": order.customer.email,
            "subject": CUSTOMER_SUBJECT,
            "text": render_template("emails/customer_order.txt", **context),
            "html": render_template("emails/customer_order.html", **context),
        })

    return messages


class OrderNotifier:
    """Письма по новому заказу."""

    def __init__(
        self,
        api_key: Optional[str],
        from_email: Optional[str],
        notify_to: Optional[str],
        log: Log,
        sender: Callable[..., str] = send_email,
    ):
        self.api_key = api_key
        self.from_email = from_email
        self.notify_to = notify_to
        self.log = log
        self.sender = sender

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.from_email and self.notify_to)

    async def send(self, order: Order | OrderEmail):
        """
        Отправляет письма параллельно и ждёт обе отправки.
        Ошибка любой из них: UpstreamFailure.
        """
        if not self.configured:
            raise ServerMisconfigured("Missing email configuration")

        messages = build_messages(order, self.notify_to)
        results = await asyncio.gather(
            *[
                asyncio.to_thread(self.sender, self.api_key, self.from_email,
                                  m["to"], m["subject"], m["text"], m["html"])
                for m in messages
            ],
            return_exceptions=True,
        )

        errors = [r for r in results if isinstance(r, Exception)]
        if errors:
            await self.log.log_error("notify", "Ошибка отправки писем", {
                "id": order.id,
                "errors": [str(getattr(e, "details", None) or e) for e in errors],
            })
            raise UpstreamFailure("Email send failed")

        await self.log.log_info("notify", "Письма отправлены", {"id": order.id, "count": len(messages)})

    async def notify(self, order: Order):
        """Fire-and-forget: заказ уже принят, ошибки почты только логируются."""
        if not self.configured:
            await self.log.log_warning("notify", "Почта не настроена, письма не отправлены", {"id": order.id})
            return
        try:
            await self.send(order)
        except Exception as e:
            await self.log.log_error("notify", f"Письма по заказу не отправлены: {e}", {"id": order.id})
