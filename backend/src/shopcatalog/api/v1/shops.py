"""Shop-scoped product listing."""

from uuid import UUID

from fastapi import APIRouter, Query

from shopcatalog.api.deps import ProductFilterDep, ProductServiceDep
from shopcatalog.core.config import settings
from shopcatalog.core.pagination import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from shopcatalog.schemas.product import ProductListResponse

router = APIRouter()


@router.get("/{shop_id}/products", response_model=ProductListResponse)
async def list_shop_products(
    shop_id: UUID,
    service: ProductServiceDep,
    filters: ProductFilterDep,
    page: int = Query(DEFAULT_PAGE),
    page_size: int = Query(DEFAULT_PAGE_SIZE, le=settings.MAX_PAGE_SIZE),
):
    """List one shop's products with the same filters as the global listing."""
    return await service.list_products(
        filters=filters, page=page, page_size=page_size, shop_id=shop_id
    )
