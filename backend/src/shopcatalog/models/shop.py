"""Shop model. A shop is owned by exactly one user."""

import uuid
from typing import TYPE_CHECKING, List

from sqlalchemy import Index, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopcatalog.core.database import Base
from shopcatalog.models.base import SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from shopcatalog.models.product import Product


class Shop(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "shops"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    # Users live in the identity service; only the id is stored here.
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    products: Mapped[List["Product"]] = relationship("Product", back_populates="shop")

    __table_args__ = (
        Index("idx_shops_user_id", "user_id"),
    )
