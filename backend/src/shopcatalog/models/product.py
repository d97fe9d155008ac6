"""Product model for shop merchandise."""

import uuid
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopcatalog.core.database import Base
from shopcatalog.models.base import SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from shopcatalog.models.category import Category
    from shopcatalog.models.shop import Shop


class Product(Base, TimestampMixin, SoftDeleteMixin):
    """Product sold by a shop. Price is in the smallest currency unit."""

    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    shop_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("shops.id"),
        nullable=False,
    )
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("categories.id"),
        nullable=True,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="",
    )
    price: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    stock: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Relationships
    shop: Mapped["Shop"] = relationship("Shop", back_populates="products")
    category: Mapped[Optional["Category"]] = relationship(
        "Category", back_populates="products"
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="chk_product_price_non_negative"),
        CheckConstraint("stock >= 0", name="chk_product_stock_non_negative"),
        Index("idx_products_shop_id", "shop_id"),
        Index("idx_products_category_id", "category_id"),
    )
