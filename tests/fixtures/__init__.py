"""Shared test doubles."""

from .gateways import FlakyGateway
from .requests import ANA_TAX_ID, BRUNO_TAX_ID, item, order_request

__all__ = ["FlakyGateway", "ANA_TAX_ID", "BRUNO_TAX_ID", "item", "order_request"]
