"""Product management API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from shopcatalog.api.deps import (
    ActorId,
    ProductFilterDep,
    ProductMutationServiceDep,
    ProductServiceDep,
)
from shopcatalog.core.config import settings
from shopcatalog.core.pagination import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from shopcatalog.schemas.product import (
    ProductCreate,
    ProductDetailResponse,
    ProductIdResponse,
    ProductListResponse,
    ProductUpdate,
)

router = APIRouter()


@router.get("", response_model=ProductListResponse)
async def list_products(
    service: ProductServiceDep,
    filters: ProductFilterDep,
    page: int = Query(DEFAULT_PAGE),
    page_size: int = Query(DEFAULT_PAGE_SIZE, le=settings.MAX_PAGE_SIZE),
):
    """List products with optional category, price and keyword filters."""
    return await service.list_products(filters=filters, page=page, page_size=page_size)


@router.get("/{product_id}", response_model=ProductDetailResponse)
async def get_product(
    product_id: UUID,
    service: ProductServiceDep,
):
    """Get product by ID with its category."""
    return await service.get_product(product_id)


@router.post("", response_model=ProductIdResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product_data: ProductCreate,
    service: ProductMutationServiceDep,
    actor_id: ActorId,
):
    """Create a new product."""
    product_id = await service.create_product(product_data)
    return ProductIdResponse(id=product_id)


@router.patch("/{product_id}", response_model=ProductIdResponse)
async def update_product(
    product_id: UUID,
    product_data: ProductUpdate,
    service: ProductMutationServiceDep,
    actor_id: ActorId,
):
    """Update a product (shop owner only)."""
    updated_id = await service.update_product(product_id, actor_id, product_data)
    return ProductIdResponse(id=updated_id)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: UUID,
    service: ProductMutationServiceDep,
    actor_id: ActorId,
):
    """Soft delete a product (shop owner only)."""
    await service.delete_product(product_id, actor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
