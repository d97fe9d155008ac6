"""API dependencies for caller identity, database access and services."""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Query, Request, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from shopcatalog.core.config import settings
from shopcatalog.core.database import get_db
from shopcatalog.core.exceptions import ValidationError, field_errors
from shopcatalog.schemas.product import ProductFilter
from shopcatalog.services.ownership_service import OwnershipGuard
from shopcatalog.services.product_mutation_service import ProductMutationService
from shopcatalog.services.product_service import ProductService


async def get_actor_id(request: Request) -> UUID:
    """Read the verified caller id set by the upstream gateway.

    Raises:
        HTTPException: If the header is missing or not a UUID
    """
    raw = request.headers.get(settings.USER_ID_HEADER)
    if not raw:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {settings.USER_ID_HEADER} header",
        )

    try:
        return UUID(raw)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid {settings.USER_ID_HEADER} header",
        )


DbSession = Annotated[AsyncSession, Depends(get_db)]
ActorId = Annotated[UUID, Depends(get_actor_id)]


# =============================================================================
# Service dependency injection
# Services get the request's session; nothing is looked up globally.
# =============================================================================

async def get_product_service(db: DbSession) -> ProductService:
    return ProductService(db)


async def get_product_mutation_service(
    db: DbSession,
    product_service: Annotated[ProductService, Depends(get_product_service)],
) -> ProductMutationService:
    return ProductMutationService(db, OwnershipGuard(product_service))


ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
ProductMutationServiceDep = Annotated[
    ProductMutationService, Depends(get_product_mutation_service)
]


async def get_product_filter(
    category_ids: Annotated[str | None, Query(description="Comma-separated category ids")] = None,
    min_price: Annotated[int, Query(ge=0)] = 0,
    max_price: Annotated[int, Query(ge=0)] = 0,
    keyword: Annotated[str | None, Query(max_length=255)] = None,
) -> ProductFilter:
    """Collect listing filters from the query string."""
    try:
        return ProductFilter(
            category_ids=category_ids,
            min_price=min_price,
            max_price=max_price,
            keyword=keyword,
        )
    except PydanticValidationError as e:
        raise ValidationError("invalid filter", errors=field_errors(e.errors()))


ProductFilterDep = Annotated[ProductFilter, Depends(get_product_filter)]
