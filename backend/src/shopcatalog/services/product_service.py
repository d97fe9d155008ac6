"""Product service for read operations."""

import logging
import time
from typing import Any
from uuid import UUID

from sqlalchemy import select, text
from sqlalchemy.exc import NoResultFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shopcatalog.core.exceptions import InternalError, NotFoundError
from shopcatalog.core.pagination import normalize_page
from shopcatalog.core.query_builder import FilterClauseBuilder, rebind
from shopcatalog.middleware.metrics import record_db_query
from shopcatalog.models.category import Category
from shopcatalog.models.product import Product
from shopcatalog.models.shop import Shop
from shopcatalog.schemas.common import PaginationMeta
from shopcatalog.schemas.product import (
    CategoryRef,
    ProductDetailResponse,
    ProductFilter,
    ProductItem,
    ProductListResponse,
    ProductOwnership,
)

logger = logging.getLogger(__name__)

# The window count shares the WHERE clause and snapshot with the page rows.
PRODUCT_LIST_QUERY = """
    SELECT
        COUNT(id) OVER() AS total_data,
        id,
        name,
        price,
        stock
    FROM products
    WHERE
        deleted_at IS NULL
"""


def build_product_list_query(
    filters: ProductFilter,
    page: int,
    page_size: int,
    shop_id: UUID | None = None,
) -> tuple[str, list[Any]]:
    """Build the listing query with positional placeholders.

    Clause order: shop, categories, min price, price range, keyword, paging.
    """
    if shop_id is not None:
        builder = FilterClauseBuilder(PRODUCT_LIST_QUERY + " AND shop_id = ?", [shop_id])
    else:
        builder = FilterClauseBuilder(PRODUCT_LIST_QUERY)

    return (
        builder.where_category_in(filters.category_ids)
        .where_min_price(filters.min_price)
        .where_price_range(filters.min_price, filters.max_price)
        .where_keyword(filters.keyword)
        .order_by("created_at DESC, id")
        .paginate(page, page_size)
        .build()
    )


class ProductService:
    """Service class for product queries."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_products(
        self,
        filters: ProductFilter | None = None,
        page: int = 1,
        page_size: int = 10,
        shop_id: UUID | None = None,
    ) -> ProductListResponse:
        """List live products, optionally limited to one shop.

        Args:
            filters: Category, price and keyword filters
            page: 1-based page number, non-positive values fall back to 1
            page_size: Rows per page, non-positive values fall back to 10
            shop_id: Restrict to this shop when given

        Returns:
            Items for the page and pagination metadata

        Raises:
            InternalError: If the query fails
        """
        filters = filters or ProductFilter()
        page, page_size = normalize_page(page, page_size)

        query, args = build_product_list_query(filters, page, page_size, shop_id)
        sql, params = rebind(query, args)
        logger.debug(f"list_products query={' '.join(sql.split())} params={params}")

        start = time.perf_counter()
        try:
            result = await self.db.execute(text(sql), params)
            rows = result.mappings().all()
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to list products (shop_id={shop_id}, filters={filters.model_dump()}): {e}"
            )
            raise InternalError() from e
        finally:
            record_db_query("list_products", time.perf_counter() - start)

        total_data = rows[0]["total_data"] if rows else 0
        items = [
            ProductItem(
                id=row["id"],
                name=row["name"],
                price=row["price"],
                stock=row["stock"],
            )
            for row in rows
        ]

        return ProductListResponse(
            items=items,
            meta=PaginationMeta.build(page, page_size, total_data),
        )

    async def get_product(self, product_id: UUID) -> ProductDetailResponse:
        """Get a live product with its category.

        A product whose category is unset, missing or deleted is still
        returned, with an empty category.

        Raises:
            NotFoundError: If no live product has this id
            InternalError: If the query fails
        """
        stmt = (
            select(
                Product.id,
                Product.name,
                Product.description,
                Product.price,
                Product.stock,
                Category.id.label("category_id"),
                Category.name.label("category_name"),
            )
            .outerjoin(
                Category,
                (Category.id == Product.category_id) & Category.deleted_at.is_(None),
            )
            .where(Product.deleted_at.is_(None))
            .where(Product.id == product_id)
        )

        start = time.perf_counter()
        try:
            result = await self.db.execute(stmt)
            row = result.one()
        except NoResultFound:
            logger.warning(f"Product not found: product_id={product_id}")
            raise NotFoundError()
        except SQLAlchemyError as e:
            logger.error(f"Failed to get product {product_id}: {e}")
            raise InternalError() from e
        finally:
            record_db_query("get_product", time.perf_counter() - start)

        return ProductDetailResponse(
            id=row.id,
            name=row.name,
            description=row.description,
            price=row.price,
            stock=row.stock,
            category=CategoryRef(id=row.category_id, name=row.category_name),
        )

    async def verify_product_exists(self, product_id: UUID) -> ProductOwnership:
        """Resolve a live product to its shop and the shop's owner.

        Inner join: a product whose shop is missing or deleted is treated as
        not found, same as a deleted product.

        Raises:
            NotFoundError: If the product or its shop is missing or deleted
            InternalError: If the query fails
        """
        stmt = (
            select(Product.id, Product.shop_id, Shop.user_id)
            .join(Shop, Shop.id == Product.shop_id)
            .where(Product.deleted_at.is_(None))
            .where(Shop.deleted_at.is_(None))
            .where(Product.id == product_id)
        )

        start = time.perf_counter()
        try:
            result = await self.db.execute(stmt)
            row = result.one()
        except NoResultFound:
            logger.warning(f"Product not found for ownership check: product_id={product_id}")
            raise NotFoundError()
        except SQLAlchemyError as e:
            logger.error(f"Failed to verify product {product_id}: {e}")
            raise InternalError() from e
        finally:
            record_db_query("verify_product_exists", time.perf_counter() - start)

        return ProductOwnership(id=row.id, shop_id=row.shop_id, user_id=row.user_id)
