"""Tests for order records and their pricing invariants."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError
from ulid import ULID

from comanda.domain import Order, OrderItem, OrderRequest, ValidationError, most_recent_first
from tests.fixtures import ANA_TAX_ID, item, order_request


def build(**kwargs) -> OrderRequest:
    return OrderRequest.coerce(order_request(**kwargs))


class TestOrderItem:
    def test_line_total(self):
        line = OrderItem(product_id="1", name="Latte", unit_price=Decimal("7.25"), quantity=3)
        assert line.line_total == Decimal("21.75")

    def test_numeric_product_ids_become_strings(self):
        line = OrderItem(product_id=7, name="Latte", unit_price=Decimal("1"), quantity=1)
        assert line.product_id == "7"

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_rejects_non_positive_quantity(self, quantity):
        with pytest.raises(PydanticValidationError):
            OrderItem(product_id="1", name="Latte", unit_price=Decimal("1"), quantity=quantity)

    def test_rejects_negative_price(self):
        with pytest.raises(PydanticValidationError):
            OrderItem(product_id="1", name="Latte", unit_price=Decimal("-1"), quantity=1)

    def test_is_immutable(self):
        line = OrderItem(product_id="1", name="Latte", unit_price=Decimal("1"), quantity=1)
        with pytest.raises(PydanticValidationError):
            line.quantity = 5


class TestOrderRequest:
    def test_normalizes_tax_id_and_name(self):
        request = build(customer_name="  Ana  ", customer_tax_id="111.111.111-11")
        assert request.customer_name == "Ana"
        assert request.customer_tax_id == ANA_TAX_ID

    def test_generates_request_id(self):
        assert build().request_id != build().request_id

    def test_accepts_existing_request(self):
        request = build()
        assert OrderRequest.coerce(request) is request

    @pytest.mark.parametrize(
        "overrides",
        [
            {"items": []},
            {"items": [item(quantity=0)]},
            {"items": [item(quantity=-2)]},
            {"customer_tax_id": "1111111111"},
            {"customer_tax_id": "111111111111"},
            {"customer_tax_id": "1111111111x"},
            {"customer_name": "   "},
        ],
    )
    def test_coerce_rejects_invalid_requests(self, overrides):
        with pytest.raises(ValidationError):
            build(**overrides)

    def test_validation_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            build(items=[])


class TestOrderCreate:
    def test_without_service_fee(self):
        order = Order.create(1, build(items=[item(unit_price=10, quantity=2)]))

        assert order.subtotal == Decimal("20.00")
        assert order.service_fee == Decimal("0")
        assert order.total == Decimal("20.00")

    def test_with_service_fee(self):
        order = Order.create(
            1, build(items=[item(unit_price=30, quantity=1)], service_fee_applied=True)
        )

        assert order.subtotal == Decimal("30.00")
        assert order.service_fee == Decimal("3.00")
        assert order.total == Decimal("33.00")

    def test_subtotal_sums_every_line(self):
        order = Order.create(
            1,
            build(
                items=[
                    item(unit_price="6.50", quantity=2, product_id="espresso"),
                    item(unit_price="5.00", quantity=3, product_id="pao", name="Pão de queijo"),
                ],
                service_fee_applied=True,
            ),
        )

        assert order.subtotal == Decimal("28.00")
        assert order.service_fee == Decimal("2.80")
        assert order.total == Decimal("30.80")
        assert order.item_count == 5

    def test_carries_request_details(self):
        request = build()
        created_at = datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc)

        order = Order.create(7, request, created_at=created_at)

        assert order.id == 7
        assert order.request_id == request.request_id
        assert order.customer_name == "Ana"
        assert order.customer_tax_id == ANA_TAX_ID
        assert order.created_at == created_at

    def test_stamps_creation_time_in_utc(self):
        order = Order.create(1, build())
        assert order.created_at.tzinfo is not None
        assert order.created_at.utcoffset() == timedelta(0)


class TestOrderInvariants:
    def fields(self, **overrides):
        values = {
            "id": 1,
            "request_id": ULID(),
            "customer_name": "Ana",
            "customer_tax_id": ANA_TAX_ID,
            "items": [item(unit_price=10, quantity=2)],
            "subtotal": "20.00",
            "service_fee_applied": False,
            "service_fee": "0.00",
            "total": "20.00",
            "created_at": datetime(2025, 1, 1, tzinfo=timezone.utc),
        }
        values.update(overrides)
        return values

    def test_consistent_order_is_accepted(self):
        order = Order.model_validate(self.fields())
        assert order.total == Decimal("20.00")

    @pytest.mark.parametrize(
        "overrides",
        [
            {"subtotal": "19.00", "total": "19.00"},
            {"total": "21.00"},
            {"service_fee": "2.00", "total": "22.00"},
            {"service_fee_applied": True},
            {"items": []},
            {"customer_tax_id": "123"},
        ],
    )
    def test_inconsistent_order_is_rejected(self, overrides):
        with pytest.raises(PydanticValidationError):
            Order.model_validate(self.fields(**overrides))

    def test_naive_timestamps_are_treated_as_utc(self):
        order = Order.model_validate(self.fields(created_at=datetime(2025, 1, 1, 12)))
        assert order.created_at == datetime(2025, 1, 1, 12, tzinfo=timezone.utc)

    def test_timestamps_keep_millisecond_precision(self):
        moment = datetime(2025, 1, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)
        order = Order.model_validate(self.fields(created_at=moment))
        assert order.created_at.microsecond == 123000


def test_most_recent_first_breaks_ties_by_id():
    moment = datetime(2025, 1, 1, tzinfo=timezone.utc)
    first = Order.create(1, build(), created_at=moment)
    second = Order.create(2, build(), created_at=moment)
    older = Order.create(3, build(), created_at=moment - timedelta(minutes=5))

    assert [o.id for o in most_recent_first([first, older, second])] == [2, 1, 3]
