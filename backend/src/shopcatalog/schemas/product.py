"""Product schemas for request/response validation."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from shopcatalog.schemas.common import PaginationMeta


def parse_category_ids(value: Any) -> list[Any]:
    """Split a comma-delimited id list, dropping blanks and repeats.

    First-occurrence order is kept so bound arguments follow the input.
    """
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")

    seen: set[str] = set()
    ids: list[Any] = []
    for raw in value:
        key = str(raw).strip()
        if not key or key in seen:
            continue
        seen.add(key)
        ids.append(key)
    return ids


class ProductFilter(BaseModel):
    """Optional filters for a product listing."""

    category_ids: list[UUID] = Field(default_factory=list)
    min_price: int = Field(0, ge=0)
    max_price: int = Field(0, ge=0)
    keyword: str | None = Field(None, max_length=255)

    @field_validator("category_ids", mode="before")
    @classmethod
    def split_category_ids(cls, v: Any) -> list[Any]:
        return parse_category_ids(v)

    @field_validator("keyword")
    @classmethod
    def strip_keyword(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class ProductCreate(BaseModel):
    """Schema for product creation request."""

    shop_id: UUID
    category_id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1, max_length=255)
    price: int = Field(..., ge=0)
    stock: int = Field(..., ge=0)


class ProductUpdate(BaseModel):
    """Schema for product update request. The shop cannot be changed."""

    category_id: UUID
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1, max_length=255)
    price: int = Field(..., ge=0)
    stock: int = Field(..., ge=0)


class ProductIdResponse(BaseModel):
    """Identifier of a created or updated product."""

    id: UUID


class ProductItem(BaseModel):
    """One row of a product listing."""

    id: UUID
    name: str
    price: int
    stock: int

    model_config = {"from_attributes": True}


class ProductListResponse(BaseModel):
    """Schema for product list response."""

    items: list[ProductItem]
    meta: PaginationMeta


class CategoryRef(BaseModel):
    """Category nested in a product detail. Empty when unset or dangling."""

    id: UUID | None = None
    name: str | None = None


class ProductDetailResponse(BaseModel):
    """Schema for a single product with its category."""

    id: UUID
    name: str
    description: str
    price: int
    stock: int
    category: CategoryRef


class ProductOwnership(BaseModel):
    """Ownership chain of a live product: product -> shop -> user."""

    id: UUID
    shop_id: UUID
    user_id: UUID
