"""Incremental builder for filtered, paginated SQL.

Clauses are written with positional ``?`` placeholders and the bound values
are collected in the same order. ``rebind`` turns the pair into the named
bind parameters SQLAlchemy's ``text()`` expects just before execution.
"""

from typing import Any, Iterable, Sequence

from shopcatalog.core.pagination import page_offset

PLACEHOLDER = "?"


class FilterClauseBuilder:
    """Accumulates predicate fragments and their positional arguments.

    Every ``where_*`` method appends ``AND ...`` to the current query, so the
    starting query must already contain a ``WHERE`` clause. Methods return
    ``self`` to allow chaining.
    """

    def __init__(self, query: str, args: Iterable[Any] = ()):
        self._query = query.rstrip()
        self._args: list[Any] = list(args)

    @property
    def args(self) -> list[Any]:
        return list(self._args)

    def _append(self, clause: str, *args: Any) -> "FilterClauseBuilder":
        self._query += f" {clause}"
        self._args.extend(args)
        return self

    def where_category_in(self, category_ids: Sequence[Any]) -> "FilterClauseBuilder":
        """Restrict to the given categories. No-op for an empty sequence."""
        if not category_ids:
            return self
        placeholders = ", ".join(PLACEHOLDER for _ in category_ids)
        return self._append(f"AND category_id IN ({placeholders})", *category_ids)

    def where_min_price(self, min_price: int | None) -> "FilterClauseBuilder":
        if not min_price or min_price <= 0:
            return self
        return self._append(f"AND price >= {PLACEHOLDER}", min_price)

    def where_price_range(self, min_price: int | None, max_price: int | None) -> "FilterClauseBuilder":
        """Add a BETWEEN clause when max is strictly above min.

        Applied on top of ``where_min_price``; both may be present.
        """
        min_price = min_price or 0
        if max_price is None or max_price <= min_price:
            return self
        return self._append(
            f"AND price BETWEEN {PLACEHOLDER} AND {PLACEHOLDER}",
            min_price,
            max_price,
        )

    def where_keyword(self, keyword: str | None) -> "FilterClauseBuilder":
        """Case-insensitive substring match on name or description."""
        if not keyword:
            return self
        pattern = f"%{keyword}%"
        return self._append(
            f"AND (name ILIKE {PLACEHOLDER} OR description ILIKE {PLACEHOLDER})",
            pattern,
            pattern,
        )

    def order_by(self, clause: str) -> "FilterClauseBuilder":
        return self._append(f"ORDER BY {clause}")

    def paginate(self, page: int, page_size: int) -> "FilterClauseBuilder":
        """Append LIMIT/OFFSET. Must be the last clause added."""
        return self._append(
            f"LIMIT {PLACEHOLDER} OFFSET {PLACEHOLDER}",
            page_size,
            page_offset(page, page_size),
        )

    def build(self) -> tuple[str, list[Any]]:
        return self._query, list(self._args)


def rebind(query: str, args: Sequence[Any]) -> tuple[str, dict[str, Any]]:
    """Rewrite positional ``?`` placeholders as ``:p0, :p1, ...``.

    Raises:
        ValueError: If the number of placeholders and arguments differ
    """
    parts = query.split(PLACEHOLDER)
    if len(parts) - 1 != len(args):
        raise ValueError(
            f"query has {len(parts) - 1} placeholders but {len(args)} arguments"
        )

    params: dict[str, Any] = {}
    rebound = [parts[0]]
    for i, (value, part) in enumerate(zip(args, parts[1:])):
        name = f"p{i}"
        params[name] = value
        rebound.append(f":{name}{part}")

    return "".join(rebound), params
