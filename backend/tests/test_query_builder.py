"""Tests for the filter clause builder and the product listing query.

The bound argument list must line up with the ``?`` placeholders, in order,
for every filter combination.
"""

import itertools
import re
from uuid import uuid4

import pytest

from shopcatalog.core.query_builder import PLACEHOLDER, FilterClauseBuilder, rebind
from shopcatalog.schemas.product import ProductFilter
from shopcatalog.services.product_service import build_product_list_query

BASE = "SELECT id FROM products WHERE deleted_at IS NULL"


def placeholder_count(query: str) -> int:
    return query.count(PLACEHOLDER)


class TestFilterClauseBuilder:
    """Each rule in isolation."""

    def test_no_filters_leaves_query_untouched(self):
        query, args = FilterClauseBuilder(BASE).build()

        assert query == BASE
        assert args == []

    def test_initial_args_are_kept_first(self):
        shop_id = uuid4()
        query, args = (
            FilterClauseBuilder(BASE + " AND shop_id = ?", [shop_id])
            .where_min_price(100)
            .build()
        )

        assert args == [shop_id, 100]
        assert placeholder_count(query) == 2

    def test_category_in_one_placeholder_per_id(self):
        ids = ["a", "b", "c"]
        query, args = FilterClauseBuilder(BASE).where_category_in(ids).build()

        assert query.endswith("AND category_id IN (?, ?, ?)")
        assert args == ids

    def test_category_in_empty_is_noop(self):
        query, args = FilterClauseBuilder(BASE).where_category_in([]).build()

        assert "category_id" not in query
        assert args == []

    def test_min_price_positive(self):
        query, args = FilterClauseBuilder(BASE).where_min_price(100).build()

        assert query.endswith("AND price >= ?")
        assert args == [100]

    @pytest.mark.parametrize("min_price", [0, None])
    def test_min_price_zero_or_missing_is_noop(self, min_price):
        query, args = FilterClauseBuilder(BASE).where_min_price(min_price).build()

        assert query == BASE
        assert args == []

    def test_price_range_when_max_above_min(self):
        query, args = FilterClauseBuilder(BASE).where_price_range(100, 500).build()

        assert query.endswith("AND price BETWEEN ? AND ?")
        assert args == [100, 500]

    def test_price_range_with_only_max(self):
        query, args = FilterClauseBuilder(BASE).where_price_range(0, 500).build()

        assert args == [0, 500]

    @pytest.mark.parametrize("min_price,max_price", [(100, 50), (100, 100), (0, 0), (0, None)])
    def test_price_range_omitted_unless_max_above_min(self, min_price, max_price):
        query, args = FilterClauseBuilder(BASE).where_price_range(min_price, max_price).build()

        assert "BETWEEN" not in query
        assert args == []

    def test_keyword_wrapped_and_bound_twice(self):
        query, args = FilterClauseBuilder(BASE).where_keyword("pen").build()

        assert "AND (name ILIKE ? OR description ILIKE ?)" in query
        assert args == ["%pen%", "%pen%"]

    @pytest.mark.parametrize("keyword", ["", None])
    def test_empty_keyword_is_noop(self, keyword):
        query, args = FilterClauseBuilder(BASE).where_keyword(keyword).build()

        assert query == BASE
        assert args == []

    def test_paginate_limit_and_offset(self):
        query, args = FilterClauseBuilder(BASE).paginate(page=3, page_size=20).build()

        assert query.endswith("LIMIT ? OFFSET ?")
        assert args == [20, 40]

    def test_build_returns_copy_of_args(self):
        builder = FilterClauseBuilder(BASE).where_min_price(10)
        _, args = builder.build()
        args.append("mutated")

        assert builder.args == [10]


class TestProductListQuery:
    """The composed listing query."""

    def test_min_and_range_both_applied(self):
        """min > 0 and max > min produce both the >= and BETWEEN clauses."""
        filters = ProductFilter(min_price=100, max_price=500)
        query, args = build_product_list_query(filters, page=1, page_size=10)

        assert "AND price >= ?" in query
        assert "AND price BETWEEN ? AND ?" in query
        assert args == [100, 100, 500, 10, 0]

    def test_max_below_min_only_min_applies(self):
        filters = ProductFilter(min_price=100, max_price=50)
        query, args = build_product_list_query(filters, page=1, page_size=10)

        assert "AND price >= ?" in query
        assert "BETWEEN" not in query
        assert args == [100, 10, 0]

    def test_clause_order_is_fixed(self):
        cat_a, cat_b = uuid4(), uuid4()
        shop_id = uuid4()
        filters = ProductFilter(
            category_ids=f"{cat_a},{cat_b}", min_price=10, max_price=90, keyword="pen"
        )
        query, args = build_product_list_query(filters, page=2, page_size=5, shop_id=shop_id)

        positions = [
            query.index("shop_id = ?"),
            query.index("category_id IN"),
            query.index("price >= ?"),
            query.index("price BETWEEN"),
            query.index("name ILIKE"),
            query.index("ORDER BY"),
            query.index("LIMIT ?"),
        ]
        assert positions == sorted(positions)
        assert args == [shop_id, cat_a, cat_b, 10, 10, 90, "%pen%", "%pen%", 5, 5]

    def test_always_excludes_soft_deleted(self):
        query, _ = build_product_list_query(ProductFilter(), page=1, page_size=10)

        assert "deleted_at IS NULL" in query

    def test_uses_window_count(self):
        query, _ = build_product_list_query(ProductFilter(), page=1, page_size=10)

        assert "COUNT(id) OVER()" in query

    @pytest.mark.parametrize(
        "categories,min_price,max_price,keyword,shop",
        list(
            itertools.product(
                [None, "1", "2"],
                [0, 100],
                [0, 50, 500],
                [None, "pen"],
                [False, True],
            )
        ),
    )
    def test_placeholders_match_args(self, categories, min_price, max_price, keyword, shop):
        category_ids = None
        if categories:
            category_ids = ",".join(str(uuid4()) for _ in range(int(categories)))
        filters = ProductFilter(
            category_ids=category_ids,
            min_price=min_price,
            max_price=max_price,
            keyword=keyword,
        )

        query, args = build_product_list_query(
            filters, page=3, page_size=7, shop_id=uuid4() if shop else None
        )

        assert placeholder_count(query) == len(args)
        # Paging is always the final pair
        assert args[-2:] == [7, 14]

        sql, params = rebind(query, args)
        names = re.findall(r":(p\d+)", sql)
        assert names == [f"p{i}" for i in range(len(args))]
        assert [params[name] for name in names] == args


class TestRebind:
    def test_rewrites_in_order(self):
        sql, params = rebind("a = ? AND b IN (?, ?)", [1, 2, 3])

        assert sql == "a = :p0 AND b IN (:p1, :p2)"
        assert params == {"p0": 1, "p1": 2, "p2": 3}

    def test_no_placeholders(self):
        assert rebind("SELECT 1", []) == ("SELECT 1", {})

    def test_mismatch_raises(self):
        with pytest.raises(ValueError):
            rebind("a = ? AND b = ?", [1])
