"""Business logic services."""

from shopcatalog.services.ownership_service import OwnershipGuard
from shopcatalog.services.product_mutation_service import ProductMutationService
from shopcatalog.services.product_service import ProductService

__all__ = [
    "ProductService",
    "OwnershipGuard",
    "ProductMutationService",
]
