"""Проверка и нормализация заказа."""

import re

import pytest

from storefront.exceptions import InvalidOrder
from storefront.schemas.order import OrderCreate
from storefront.services.validation import (
    generate_order_id,
    is_valid_email,
    sanitize,
    to_base36,
    validate_order,
)


def make(payload: dict) -> OrderCreate:
    return OrderCreate(**payload)


class TestValidOrder:
    """Валидный заказ превращается в запись для хранилища."""

    def test_example_order(self, order_payload) -> None:
        order = validate_order(make(order_payload))
        assert order.total == 250
        assert order.status == "pending"
        assert order.customer.emri == "Arta"
        assert order.items[0].product.id == "p1"
        assert order.items[0].quantity == 2

    def test_id_and_date_generated(self, order_payload) -> None:
        order = validate_order(make(order_payload))
        assert order.id
        assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$", order.date)

    def test_client_id_and_date_kept(self, order_payload) -> None:
        order_payload["id"] = "abc123"
        order_payload["date"] = "2025-01-02T10:00:00.000Z"
        order = validate_order(make(order_payload))
        assert order.id == "abc123"
        assert order.date == "2025-01-02T10:00:00.000Z"

    def test_status_forced_pending(self, order_payload) -> None:
        order_payload["status"] = "completed"
        assert validate_order(make(order_payload)).status == "pending"

    def test_fields_trimmed(self, order_payload) -> None:
        order_payload["customer"]["emri"] = "  Arta  "
        order_payload["customer"]["email"] = " arta@example.com "
        order = validate_order(make(order_payload))
        assert order.customer.emri == "Arta"
        assert order.customer.email == "arta@example.com"

    def test_long_name_truncated(self, order_payload) -> None:
        order_payload["customer"]["emri"] = "A" * 300
        assert len(validate_order(make(order_payload)).customer.emri) == 80

    def test_quantity_clamped_to_one(self, order_payload) -> None:
        order_payload["items"][0]["quantity"] = 0
        assert validate_order(make(order_payload)).items[0].quantity == 1
        order_payload["items"][0]["quantity"] = -5
        assert validate_order(make(order_payload)).items[0].quantity == 1

    def test_other_city_only_for_sentinel(self, order_payload) -> None:
        order_payload["customer"]["otherCity"] = "Deçan"
        assert validate_order(make(order_payload)).customer.otherCity is None

        order_payload["customer"]["qyteti"] = "Tjetër"
        assert validate_order(make(order_payload)).customer.otherCity == "Deçan"

    def test_zero_total_allowed(self, order_payload) -> None:
        order_payload["total"] = 0
        assert validate_order(make(order_payload)).total == 0

    def test_extra_product_fields_kept(self, order_payload) -> None:
        order_payload["items"][0]["product"]["size"] = "30ml"
        item = validate_order(make(order_payload)).items[0]
        assert item.product.model_dump()["size"] == "30ml"


class TestInvalidOrder:
    """Ошибки указывают на поле и не зависят от порядка остальных полей."""

    @pytest.mark.parametrize("field", ["emri", "mbiemri"])
    def test_blank_name(self, order_payload, field) -> None:
        order_payload["customer"][field] = "   "
        with pytest.raises(InvalidOrder) as exc:
            validate_order(make(order_payload))
        assert exc.value.field == "customer"
        assert exc.value.message == "Invalid customer details"

    @pytest.mark.parametrize("email", ["", "arta", "arta@example", "ar ta@example.com", "@example.com"])
    def test_malformed_email(self, order_payload, email) -> None:
        order_payload["customer"]["email"] = email
        with pytest.raises(InvalidOrder) as exc:
            validate_order(make(order_payload))
        assert exc.value.field == "customer"

    def test_email_too_long(self, order_payload) -> None:
        order_payload["customer"]["email"] = "a" * 250 + "@example.com"
        with pytest.raises(InvalidOrder):
            validate_order(make(order_payload))

    def test_missing_customer(self, order_payload) -> None:
        del order_payload["customer"]
        with pytest.raises(InvalidOrder) as exc:
            validate_order(make(order_payload))
        assert exc.value.field == "customer"

    @pytest.mark.parametrize("items", [[], None, "p1", [{"quantity": 1}], ["p1"]])
    def test_bad_items(self, order_payload, items) -> None:
        order_payload["items"] = items
        with pytest.raises(InvalidOrder) as exc:
            validate_order(make(order_payload))
        assert exc.value.field == "items"
        assert exc.value.message == "Order items missing"

    @pytest.mark.parametrize("total", [-1, -0.01, None, "250", True, float("nan"), float("inf"), float("-inf")])
    def test_bad_total(self, order_payload, total) -> None:
        order_payload["total"] = total
        with pytest.raises(InvalidOrder) as exc:
            validate_order(make(order_payload))
        assert exc.value.field == "total"
        assert exc.value.message == "Invalid total"


class TestHelpers:
    """Вспомогательные функции."""

    def test_sanitize_non_string(self) -> None:
        assert sanitize(None) == ""
        assert sanitize(42) == ""

    def test_is_valid_email(self) -> None:
        assert is_valid_email("a@b.co")
        assert not is_valid_email("a@b")

    def test_to_base36(self) -> None:
        assert to_base36(0) == "0"
        assert to_base36(35) == "z"
        assert to_base36(36) == "10"

    def test_generated_ids_unique(self) -> None:
        ids = {generate_order_id() for _ in range(200)}
        assert len(ids) == 200
        assert all(re.match(r"^[0-9a-z]+$", i) for i in ids)
