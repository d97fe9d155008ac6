"""Tests for the ownership guard."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from shopcatalog.core.exceptions import ForbiddenError, NotFoundError
from shopcatalog.schemas.product import ProductOwnership
from shopcatalog.services.ownership_service import OwnershipGuard


@pytest.fixture
def product_service() -> MagicMock:
    service = MagicMock()
    service.verify_product_exists = AsyncMock()
    return service


class TestOwnershipGuard:

    @pytest.mark.asyncio
    async def test_owner_is_authorized(self, product_service, product_id, shop_id, owner_id):
        product_service.verify_product_exists.return_value = ProductOwnership(
            id=product_id, shop_id=shop_id, user_id=owner_id
        )
        guard = OwnershipGuard(product_service)

        ownership = await guard.authorize(product_id, owner_id)

        assert ownership.shop_id == shop_id
        product_service.verify_product_exists.assert_awaited_once_with(product_id)

    @pytest.mark.asyncio
    async def test_other_user_is_forbidden(
        self, product_service, product_id, shop_id, owner_id, other_user_id
    ):
        product_service.verify_product_exists.return_value = ProductOwnership(
            id=product_id, shop_id=shop_id, user_id=owner_id
        )
        guard = OwnershipGuard(product_service)

        with pytest.raises(ForbiddenError) as exc_info:
            await guard.authorize(product_id, other_user_id)

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "you are not permitted to access this resource"

    @pytest.mark.asyncio
    async def test_missing_product_is_not_found_not_forbidden(
        self, product_service, product_id, other_user_id
    ):
        product_service.verify_product_exists.side_effect = NotFoundError()
        guard = OwnershipGuard(product_service)

        with pytest.raises(NotFoundError):
            await guard.authorize(product_id, other_user_id)

    @pytest.mark.asyncio
    async def test_each_call_reads_current_owner(
        self, product_service, product_id, shop_id, owner_id, other_user_id
    ):
        """Ownership handed over between calls is seen by the next call."""
        product_service.verify_product_exists.side_effect = [
            ProductOwnership(id=product_id, shop_id=shop_id, user_id=owner_id),
            ProductOwnership(id=product_id, shop_id=shop_id, user_id=other_user_id),
        ]
        guard = OwnershipGuard(product_service)

        await guard.authorize(product_id, owner_id)
        with pytest.raises(ForbiddenError):
            await guard.authorize(product_id, owner_id)

        assert product_service.verify_product_exists.await_count == 2
