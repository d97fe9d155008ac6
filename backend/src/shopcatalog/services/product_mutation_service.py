"""Product service for write operations."""

import logging
import time
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shopcatalog.core.exceptions import InternalError, NotFoundError, ValidationError
from shopcatalog.middleware.metrics import record_db_query
from shopcatalog.models.product import Product
from shopcatalog.models.shop import Shop
from shopcatalog.schemas.product import ProductCreate, ProductUpdate
from shopcatalog.services.ownership_service import OwnershipGuard
from shopcatalog.services.product_service import ProductService

logger = logging.getLogger(__name__)

FOREIGN_KEY_VIOLATION = "23503"

REFERENCE_ERRORS = {
    "shop_id": "must reference an existing shop",
    "category_id": "must reference an existing category",
}


def _owned_live_shops(actor_user_id: UUID):
    """Sub-select of live shop ids owned by the actor."""
    return select(Shop.id).where(Shop.user_id == actor_user_id).where(Shop.deleted_at.is_(None))


def _to_validation_error(exc: IntegrityError, fields: tuple[str, ...]) -> ValidationError:
    """Map an integrity failure to field errors for the references the write can set."""
    sqlstate = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if sqlstate == FOREIGN_KEY_VIOLATION:
        return ValidationError(
            "referenced record does not exist",
            errors={field: REFERENCE_ERRORS[field] for field in fields},
        )
    return ValidationError("product violates a storage constraint")


class ProductMutationService:
    """Service class for product create, update and soft delete."""

    def __init__(self, db: AsyncSession, guard: OwnershipGuard | None = None):
        self.db = db
        self.guard = guard or OwnershipGuard(ProductService(db))

    async def create_product(self, product_data: ProductCreate) -> UUID:
        """Insert a product and return its id.

        Shop and category existence is left to the foreign keys.

        Raises:
            ValidationError: If the shop or category does not exist
            InternalError: If the insert fails for any other reason
        """
        stmt = (
            insert(Product)
            .values(
                shop_id=product_data.shop_id,
                category_id=product_data.category_id,
                name=product_data.name,
                description=product_data.description,
                price=product_data.price,
                stock=product_data.stock,
            )
            .returning(Product.id)
        )

        start = time.perf_counter()
        try:
            result = await self.db.execute(stmt)
            product_id = result.scalar_one()
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(
                f"Rejected product for shop {product_data.shop_id}, "
                f"category {product_data.category_id}: {e.orig}"
            )
            raise _to_validation_error(e, ("shop_id", "category_id")) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to create product for shop {product_data.shop_id}: {e}")
            raise InternalError() from e
        finally:
            record_db_query("create_product", time.perf_counter() - start)

        logger.info(f"Created product {product_id} in shop {product_data.shop_id}")
        return product_id

    async def update_product(
        self, product_id: UUID, actor_user_id: UUID, product_data: ProductUpdate
    ) -> UUID:
        """Update a product owned by the actor.

        The ownership guard runs first. The UPDATE predicate repeats the
        ownership condition, so a shop handed over or a product deleted after
        the guard ran results in zero rows rather than a foreign write.

        Raises:
            NotFoundError: If the product is missing, deleted, or vanished
                between the guard and the write
            ForbiddenError: If the actor does not own the product's shop
            ValidationError: If the new category does not exist
            InternalError: If the update fails
        """
        await self.guard.authorize(product_id, actor_user_id)

        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .where(Product.deleted_at.is_(None))
            .where(Product.shop_id.in_(_owned_live_shops(actor_user_id)))
            .values(
                name=product_data.name,
                description=product_data.description,
                price=product_data.price,
                stock=product_data.stock,
                category_id=product_data.category_id,
                updated_at=func.now(),
            )
            .returning(Product.id)
            .execution_options(synchronize_session=False)
        )

        start = time.perf_counter()
        try:
            result = await self.db.execute(stmt)
            updated_id = result.scalar_one_or_none()
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Rejected update of product {product_id}: {e.orig}")
            raise _to_validation_error(e, ("category_id",)) from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to update product {product_id}: {e}")
            raise InternalError() from e
        finally:
            record_db_query("update_product", time.perf_counter() - start)

        if updated_id is None:
            logger.warning(f"Product {product_id} disappeared before update")
            raise NotFoundError()

        logger.info(f"Updated product {product_id} by user {actor_user_id}")
        return updated_id

    async def delete_product(self, product_id: UUID, actor_user_id: UUID) -> None:
        """Soft delete a product owned by the actor.

        Raises:
            NotFoundError: If the product is missing or already deleted
            ForbiddenError: If the actor does not own the product's shop
            InternalError: If the update fails
        """
        await self.guard.authorize(product_id, actor_user_id)

        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .where(Product.deleted_at.is_(None))
            .where(Product.shop_id.in_(_owned_live_shops(actor_user_id)))
            # Keep updated_at; the column onupdate would otherwise bump it
            .values(deleted_at=func.now(), updated_at=Product.updated_at)
            .returning(Product.id)
            .execution_options(synchronize_session=False)
        )

        start = time.perf_counter()
        try:
            result = await self.db.execute(stmt)
            deleted_id = result.scalar_one_or_none()
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to delete product {product_id}: {e}")
            raise InternalError() from e
        finally:
            record_db_query("delete_product", time.perf_counter() - start)

        if deleted_id is None:
            logger.warning(f"Product {product_id} disappeared before delete")
            raise NotFoundError()

        logger.info(f"Soft deleted product {product_id} by user {actor_user_id}")

    async def purge_deleted(self, older_than: datetime | None = None) -> int:
        """Physically remove soft-deleted products in one transaction.

        Args:
            older_than: Only purge rows deleted before this time

        Returns:
            Number of rows removed

        Raises:
            InternalError: If the delete fails; nothing is removed
        """
        stmt = delete(Product).where(Product.deleted_at.is_not(None))
        if older_than is not None:
            stmt = stmt.where(Product.deleted_at < older_than)
        stmt = stmt.execution_options(synchronize_session=False)

        start = time.perf_counter()
        try:
            async with self.db.begin():
                result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Failed to purge deleted products: {e}")
            raise InternalError() from e
        finally:
            record_db_query("purge_deleted", time.perf_counter() - start)

        logger.info(f"Purged {result.rowcount} soft-deleted products")
        return result.rowcount
