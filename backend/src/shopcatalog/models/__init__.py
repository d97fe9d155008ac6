"""SQLAlchemy ORM models."""

from shopcatalog.models.base import SoftDeleteMixin, TimestampMixin
from shopcatalog.models.category import Category
from shopcatalog.models.product import Product
from shopcatalog.models.shop import Shop

__all__ = [
    "TimestampMixin",
    "SoftDeleteMixin",
    "Category",
    "Shop",
    "Product",
]
