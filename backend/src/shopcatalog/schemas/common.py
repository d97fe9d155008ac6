"""Schemas shared across resources."""

from pydantic import BaseModel

from shopcatalog.core.pagination import compute_total_pages


class PaginationMeta(BaseModel):
    """Pagination metadata returned with every listing."""

    page: int
    page_size: int
    total_data: int = 0
    total_pages: int = 0

    @classmethod
    def build(cls, page: int, page_size: int, total_data: int) -> "PaginationMeta":
        return cls(
            page=page,
            page_size=page_size,
            total_data=total_data,
            total_pages=compute_total_pages(page, page_size, total_data),
        )
