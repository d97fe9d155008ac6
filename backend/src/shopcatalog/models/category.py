import uuid
from typing import TYPE_CHECKING, List

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shopcatalog.core.database import Base
from shopcatalog.models.base import SoftDeleteMixin, TimestampMixin

if TYPE_CHECKING:
    from shopcatalog.models.product import Product


class Category(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    products: Mapped[List["Product"]] = relationship(
        "Product", back_populates="category"
    )
