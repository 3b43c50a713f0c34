from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from ulid import ULID

from .exceptions import ValidationError
from .money import MAX_QUANTITY, MAX_UNIT_PRICE, ZERO, service_fee_for, to_currency
from .tax_id import TAX_ID_LENGTH, is_valid_tax_id, normalize_tax_id

TAX_ID_PATTERN = rf"^[0-9]{{{TAX_ID_LENGTH}}}$"


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class OrderItem(BaseModel):
    """One product line of an order.

    Attributes:
        product_id: Catalog identifier of the product.
        name: Product name at the time of ordering.
        unit_price: Price of a single unit, in currency precision. At most
            MAX_UNIT_PRICE.
        quantity: Number of units. Between 1 and MAX_QUANTITY.
    """

    model_config = {"frozen": True, "coerce_numbers_to_str": True}

    product_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    unit_price: Decimal = Field(ge=0, le=MAX_UNIT_PRICE)
    quantity: int = Field(gt=0, le=MAX_QUANTITY)

    @field_validator("unit_price")
    @classmethod
    def _quantize_price(cls, value: Decimal) -> Decimal:
        return to_currency(value)

    @property
    def line_total(self) -> Decimal:
        return to_currency(self.unit_price * self.quantity)


class OrderRequest(BaseModel):
    """A finalized cart submitted for recording.

    The tax id is normalized on construction, so ``"111.111.111-11"`` and
    ``"11111111111"`` describe the same customer.

    Attributes:
        customer_name: Display name given by the customer. Trimmed.
        customer_tax_id: The customer's 11 digit tax id.
        items: Non-empty sequence of order lines.
        service_fee_applied: Whether the 10% service fee is charged.
        request_id: Idempotency key. Submitting the same request twice
            records a single order.
    """

    model_config = {"frozen": True}

    customer_name: str
    customer_tax_id: str
    items: tuple[OrderItem, ...] = Field(min_length=1)
    service_fee_applied: bool = False
    request_id: ULID = Field(default_factory=ULID)

    @field_validator("customer_name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("customer name must not be blank")
        return value

    @field_validator("customer_tax_id")
    @classmethod
    def _normalize_tax_id(cls, value: str) -> str:
        if not is_valid_tax_id(value):
            raise ValueError(f"tax id must contain exactly {TAX_ID_LENGTH} digits")
        return normalize_tax_id(value)

    @classmethod
    def coerce(cls, value: "OrderRequest | dict[str, Any]") -> "OrderRequest":
        """Build a request from a mapping, translating validation failures.

        Raises:
            ValidationError: If the mapping does not describe a valid request.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls.model_validate(value)
        except PydanticValidationError as err:
            raise ValidationError(str(err)) from err

    @property
    def subtotal(self) -> Decimal:
        """Sum of the line totals.

        Item amounts are bounded, so pricing a validated request never fails.
        """
        return sum((item.line_total for item in self.items), ZERO)

    @property
    def service_fee(self) -> Decimal:
        return service_fee_for(self.subtotal) if self.service_fee_applied else ZERO

    @property
    def total(self) -> Decimal:
        return self.subtotal + self.service_fee


class Order(BaseModel):
    """An immutable, recorded purchase.

    Totals are computed by :meth:`create`; constructing an ``Order`` directly
    (for example when loading one from storage) re-checks that they agree
    with the items and the service fee flag.
    """

    model_config = {"frozen": True}

    id: int = Field(ge=1)
    request_id: ULID
    customer_name: str = Field(min_length=1)
    customer_tax_id: str = Field(pattern=TAX_ID_PATTERN)
    items: tuple[OrderItem, ...] = Field(min_length=1)
    subtotal: Decimal
    service_fee_applied: bool
    service_fee: Decimal
    total: Decimal
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # Naive timestamps come from stores that drop tzinfo; they are UTC.
        # Millisecond precision matches what MongoDB keeps.
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc)
        return value.replace(microsecond=value.microsecond // 1000 * 1000)

    @model_validator(mode="after")
    def _check_totals(self) -> "Order":
        subtotal = sum((item.line_total for item in self.items), ZERO)
        if self.subtotal != subtotal:
            raise ValueError(f"subtotal {self.subtotal} does not match items ({subtotal})")

        fee = service_fee_for(subtotal) if self.service_fee_applied else ZERO
        if self.service_fee != fee:
            raise ValueError(f"service fee {self.service_fee} should be {fee}")

        if self.total != subtotal + fee:
            raise ValueError(f"total {self.total} should be {subtotal + fee}")
        return self

    @classmethod
    def create(
        cls,
        order_id: int,
        request: OrderRequest,
        created_at: datetime | None = None,
    ) -> "Order":
        """Price a request and stamp it with an id and a creation time."""
        return cls(
            id=order_id,
            request_id=request.request_id,
            customer_name=request.customer_name,
            customer_tax_id=request.customer_tax_id,
            items=request.items,
            subtotal=request.subtotal,
            service_fee_applied=request.service_fee_applied,
            service_fee=request.service_fee,
            total=request.total,
            created_at=created_at or utc_now(),
        )

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)


def most_recent_first(orders: list[Order]) -> list[Order]:
    """Sort orders by creation time, newest first. Ties go to the higher id."""
    return sorted(orders, key=lambda order: (order.created_at, order.id), reverse=True)
