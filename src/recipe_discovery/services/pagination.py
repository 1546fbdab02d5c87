"""Pagination arithmetic."""

from recipe_discovery.domain.queries import PageInfo


def paginate(total: int, page: int, limit: int) -> PageInfo:
    """Derive total pages and navigation flags."""
    total_pages = -(-total // limit) if total > 0 else 0
    return PageInfo(
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_previous_page=page > 1,
    )
