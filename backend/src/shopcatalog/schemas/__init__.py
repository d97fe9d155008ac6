"""Pydantic schemas for request/response validation."""

from shopcatalog.schemas.common import PaginationMeta
from shopcatalog.schemas.product import (
    CategoryRef,
    ProductCreate,
    ProductDetailResponse,
    ProductFilter,
    ProductIdResponse,
    ProductItem,
    ProductListResponse,
    ProductOwnership,
    ProductUpdate,
)

__all__ = [
    "PaginationMeta",
    "CategoryRef",
    "ProductCreate",
    "ProductUpdate",
    "ProductFilter",
    "ProductIdResponse",
    "ProductItem",
    "ProductListResponse",
    "ProductDetailResponse",
    "ProductOwnership",
]
