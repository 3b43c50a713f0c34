from decimal import Decimal

from ..domain import OrderItem, OrderRequest, ValidationError
from ..domain.money import ZERO, to_currency
from .product import Product


class Cart:
    """Products picked for an order that has not been confirmed yet.

    Lines keep the order in which products were first added. A product's
    quantity never drops to zero: removing its last unit removes the line.
    """

    def __init__(self) -> None:
        self._lines: dict[str, tuple[Product, int]] = {}

    def add(self, product: Product) -> int:
        """Add one unit of a product. Returns the new quantity."""
        _, quantity = self._lines.get(product.product_id, (product, 0))
        self._lines[product.product_id] = (product, quantity + 1)
        return quantity + 1

    def remove_one(self, product_id: str) -> int:
        """Take one unit of a product out. Returns the remaining quantity."""
        if product_id not in self._lines:
            return 0
        product, quantity = self._lines[product_id]
        if quantity <= 1:
            del self._lines[product_id]
            return 0
        self._lines[product_id] = (product, quantity - 1)
        return quantity - 1

    def remove(self, product_id: str) -> None:
        """Drop a product from the cart regardless of its quantity."""
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()

    def quantity_of(self, product_id: str) -> int:
        _, quantity = self._lines.get(product_id, (None, 0))
        return quantity

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def items(self) -> list[OrderItem]:
        return [
            OrderItem(
                product_id=product.product_id,
                name=product.name,
                unit_price=product.price,
                quantity=quantity,
            )
            for product, quantity in self._lines.values()
        ]

    @property
    def subtotal(self) -> Decimal:
        """Running subtotal shown while the cart is being filled."""
        return sum(
            (to_currency(product.price * quantity) for product, quantity in self._lines.values()),
            ZERO,
        )

    def to_request(
        self,
        customer_name: str,
        customer_tax_id: str,
        service_fee_applied: bool = False,
    ) -> OrderRequest:
        """Turn the cart into an order request.

        Raises:
            ValidationError: If the cart is empty or the customer details
                are invalid.
        """
        if self.is_empty:
            raise ValidationError("Add at least one product before confirming the order")
        return OrderRequest.coerce(
            {
                "customer_name": customer_name,
                "customer_tax_id": customer_tax_id,
                "items": [
                    {
                        "product_id": product.product_id,
                        "name": product.name,
                        "unit_price": product.price,
                        "quantity": quantity,
                    }
                    for product, quantity in self._lines.values()
                ],
                "service_fee_applied": service_fee_applied,
            }
        )
