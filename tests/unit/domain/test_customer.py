"""Tests for customer aggregates and their derivation from orders."""

from decimal import Decimal

import pytest

from comanda.domain import Customer, Order, OrderRequest, derive_customers
from tests.fixtures import ANA_TAX_ID, BRUNO_TAX_ID, item, order_request


def make_order(order_id: int, **kwargs) -> Order:
    return Order.create(order_id, OrderRequest.coerce(order_request(**kwargs)))


def test_from_order_starts_a_new_aggregate():
    order = make_order(1, items=[item(unit_price=10, quantity=2)])

    customer = Customer.from_order(order)

    assert customer == Customer(
        tax_id=ANA_TAX_ID, name="Ana", total_orders=1, total_spent=Decimal("20.00")
    )


def test_absorb_accumulates_and_refreshes_name():
    customer = Customer.from_order(make_order(1, items=[item(unit_price=10, quantity=2)]))

    updated = customer.absorb(
        make_order(
            2,
            customer_name="Ana Souza",
            items=[item(unit_price=30)],
            service_fee_applied=True,
        )
    )

    assert updated.name == "Ana Souza"
    assert updated.total_orders == 2
    assert updated.total_spent == Decimal("53.00")
    # the original is untouched
    assert customer.total_orders == 1


def test_absorb_rejects_another_customers_order():
    customer = Customer.from_order(make_order(1))
    with pytest.raises(ValueError):
        customer.absorb(make_order(2, customer_tax_id=BRUNO_TAX_ID))


def test_derive_customers_groups_by_tax_id():
    orders = [
        make_order(1, items=[item(unit_price=10)]),
        make_order(2, customer_name="Bruno", customer_tax_id=BRUNO_TAX_ID, items=[item(unit_price=5)]),
        make_order(3, items=[item(unit_price=20)]),
    ]

    customers = derive_customers(orders)

    assert set(customers) == {ANA_TAX_ID, BRUNO_TAX_ID}
    assert customers[ANA_TAX_ID].total_orders == 2
    assert customers[ANA_TAX_ID].total_spent == Decimal("30.00")
    assert customers[BRUNO_TAX_ID].total_orders == 1
    assert customers[BRUNO_TAX_ID].total_spent == Decimal("5.00")


def test_derive_customers_latest_name_wins_regardless_of_input_order():
    orders = [
        make_order(2, customer_name="Ana Souza"),
        make_order(1, customer_name="Ana"),
    ]

    assert derive_customers(orders)[ANA_TAX_ID].name == "Ana Souza"


def test_derive_customers_of_nothing_is_empty():
    assert derive_customers([]) == {}
