"""Normalization of raw facet parameters into canonical query requests.

Malformed facets are silently omitted rather than rejected: a request with an
unparseable ``numberOfSteps`` behaves like a request without it.
"""

import re

from recipe_discovery.domain.queries import (
    MatchType,
    QueryRequest,
    RawQueryParams,
    SortField,
    SortOrder,
)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100

_NATURAL_SORT = "$natural"
_PATTERN_METACHARACTERS = re.compile(r"[.*+?^${}()|\[\]\\]")


def escape_pattern(text: str) -> str:
    """Escape regular-expression metacharacters in user-supplied text."""
    return _PATTERN_METACHARACTERS.sub(lambda match: "\\" + match.group(0), text)


def normalize_query(raw: RawQueryParams) -> QueryRequest:
    """Validate and clamp raw facet parameters."""
    tags = _clean_labels(raw.tags)
    ingredients = _clean_labels(raw.ingredients)
    return QueryRequest(
        page=max(DEFAULT_PAGE, _parse_int(raw.page, DEFAULT_PAGE)),
        limit=min(MAX_LIMIT, max(1, _parse_int(raw.limit, DEFAULT_LIMIT))),
        search=_clean_text(raw.search),
        sort_by=_parse_sort_field(raw.sort_by),
        order=_parse_order(raw.order),
        category=_clean_text(raw.category),
        tags=tags,
        tag_match=_parse_match(raw.tag_match_type) if tags else MatchType.ALL,
        ingredients=ingredients,
        ingredient_match=(
            _parse_match(raw.ingredients_match_type) if ingredients else MatchType.ALL
        ),
        number_of_steps=_parse_step_count(raw.number_of_steps),
    )


def _parse_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _clean_text(raw: str | None) -> str | None:
    if raw is None:
        return None
    cleaned = raw.strip()
    return cleaned or None


def _clean_labels(raw: list[str] | None) -> frozenset[str] | None:
    if not raw:
        return None
    labels = frozenset(value.strip() for value in raw if value and value.strip())
    return labels or None


def _parse_order(raw: str | None) -> SortOrder:
    value = (raw or "").strip().lower()
    if value == SortOrder.DESC.value:
        return SortOrder.DESC
    return SortOrder.ASC


def _parse_match(raw: str | None) -> MatchType:
    if (raw or "").strip().lower() == MatchType.ANY.value:
        return MatchType.ANY
    return MatchType.ALL


def _parse_sort_field(raw: str | None) -> SortField | None:
    value = (raw or "").strip()
    if not value or value == _NATURAL_SORT:
        return None
    try:
        return SortField(value)
    except ValueError:
        return None


def _parse_step_count(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        return None
    return value if value >= 0 else None
