from collections.abc import Iterable, Iterator
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from ..domain import UnknownProductError, to_currency
from ..domain.money import MAX_UNIT_PRICE


class Product(BaseModel):
    """An item on the café menu."""

    model_config = {"frozen": True, "coerce_numbers_to_str": True}

    product_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0, le=MAX_UNIT_PRICE)

    @field_validator("price")
    @classmethod
    def _quantize_price(cls, value: Decimal) -> Decimal:
        return to_currency(value)


class Catalog:
    """The fixed list of products offered, in menu order.

    Examples:
        >>> catalog = Catalog([
        ...     Product(product_id="1", name="Espresso", price=Decimal("6.50")),
        ...     Product(product_id="2", name="Pão de queijo", price=Decimal("5.00")),
        ... ])
        >>> catalog.get("2").name
        'Pão de queijo'
    """

    def __init__(self, products: Iterable[Product]):
        self._products: dict[str, Product] = {}
        for product in products:
            if product.product_id in self._products:
                raise ValueError(f"Duplicate product id {product.product_id!r}")
            self._products[product.product_id] = product

    def get(self, product_id: str) -> Product:
        """Look up a product.

        Raises:
            UnknownProductError: If no product has that id.
        """
        try:
            return self._products[product_id]
        except KeyError:
            raise UnknownProductError(product_id) from None

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._products

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products.values())

    def __len__(self) -> int:
        return len(self._products)
