"""Ownership guard for product mutations."""

import logging
from uuid import UUID

from shopcatalog.core.exceptions import ForbiddenError
from shopcatalog.schemas.product import ProductOwnership
from shopcatalog.services.product_service import ProductService

logger = logging.getLogger(__name__)


class OwnershipGuard:
    """Checks that the actor owns the shop a product belongs to.

    Every call reads current state; nothing is cached between calls.
    """

    def __init__(self, product_service: ProductService):
        self.product_service = product_service

    async def authorize(self, product_id: UUID, actor_user_id: UUID) -> ProductOwnership:
        """Authorize ``actor_user_id`` to mutate ``product_id``.

        Returns:
            The resolved ownership chain

        Raises:
            NotFoundError: If the product (or its shop) is missing or deleted
            ForbiddenError: If the shop belongs to another user
        """
        ownership = await self.product_service.verify_product_exists(product_id)

        if ownership.user_id != actor_user_id:
            logger.warning(
                f"Ownership mismatch: product={product_id}, shop={ownership.shop_id}, "
                f"owner={ownership.user_id}, actor={actor_user_id}"
            )
            raise ForbiddenError()

        return ownership
