"""Menu and cart used to assemble order requests."""

from .cart import Cart
from .product import Catalog, Product

__all__ = ["Cart", "Catalog", "Product"]
