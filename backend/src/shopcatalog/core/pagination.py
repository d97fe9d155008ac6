"""Pagination helpers shared by every listing operation."""

import math

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10


def normalize_page(page: int | None, page_size: int | None) -> tuple[int, int]:
    """Replace non-positive or missing page inputs with the defaults (1, 10)."""
    if page is None or page < 1:
        page = DEFAULT_PAGE
    if page_size is None or page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    return page, page_size


def page_offset(page: int, page_size: int) -> int:
    """Row offset of the first row on ``page``."""
    return page_size * (page - 1)


def compute_total_pages(page: int, page_size: int, total_rows: int) -> int:
    """Number of pages needed to show ``total_rows`` at ``page_size`` per page.

    ``page`` is accepted for symmetry with the response metadata; the result
    does not depend on it. Returns 0 when there are no rows.
    """
    if total_rows <= 0:
        return 0
    return math.ceil(total_rows / page_size)
