"""Domain models for faceted recipe queries."""

import hashlib
import json
from dataclasses import dataclass, field
from enum import Enum

from recipe_discovery.domain.recipes import RecipeSummary


class MatchType(str, Enum):
    """How a multi-valued facet combines its values."""

    ALL = "all"
    ANY = "any"


class SortOrder(str, Enum):
    """Sort direction."""

    ASC = "asc"
    DESC = "desc"


class SortField(str, Enum):
    """Sortable recipe fields, keyed by their public parameter value."""

    TITLE = "title"
    PREP = "prep"
    COOK = "cook"
    PUBLISHED = "published"
    INSTRUCTION_COUNT = "instructionCount"

    @property
    def column(self) -> str:
        """Return the stored column backing this sort field."""
        if self is SortField.INSTRUCTION_COUNT:
            return "step_count"
        return self.value


class ConditionOperator(str, Enum):
    """Store-level predicate operators."""

    MATCHES = "matches"
    EQUALS = "equals"
    CONTAINS_ALL = "contains_all"
    OVERLAPS = "overlaps"


@dataclass(frozen=True)
class RawQueryParams:
    """Facet parameters as they arrive from an external request."""

    page: str | None = None
    limit: str | None = None
    search: str | None = None
    sort_by: str | None = None
    order: str | None = None
    category: str | None = None
    tags: list[str] | None = None
    tag_match_type: str | None = None
    ingredients: list[str] | None = None
    ingredients_match_type: str | None = None
    number_of_steps: str | None = None


@dataclass(frozen=True)
class QueryRequest:
    """Canonical, fully normalized recipe query."""

    page: int = 1
    limit: int = 20
    search: str | None = None
    sort_by: SortField | None = None
    order: SortOrder = SortOrder.ASC
    category: str | None = None
    tags: frozenset[str] | None = None
    tag_match: MatchType = MatchType.ALL
    ingredients: frozenset[str] | None = None
    ingredient_match: MatchType = MatchType.ALL
    number_of_steps: int | None = None

    def cache_key(self) -> str:
        """Return a deterministic key for this request."""
        parts = {
            "page": self.page,
            "limit": self.limit,
            "search": self.search,
            "sort_by": self.sort_by.value if self.sort_by else None,
            "order": self.order.value,
            "category": self.category,
            "tags": sorted(self.tags) if self.tags else None,
            "tag_match": self.tag_match.value,
            "ingredients": sorted(self.ingredients) if self.ingredients else None,
            "ingredient_match": self.ingredient_match.value,
            "number_of_steps": self.number_of_steps,
        }
        raw = json.dumps(parts, sort_keys=True, ensure_ascii=False)
        digest = hashlib.sha256(raw.encode("utf-8")).hexdigest()[:16]
        return f"recipes:{digest}"


@dataclass(frozen=True)
class Condition:
    """Single predicate on a recipe field."""

    field: str
    operator: ConditionOperator
    value: object


@dataclass(frozen=True)
class SortDirective:
    """Explicit sort on a stored column."""

    column: str
    descending: bool = False


@dataclass(frozen=True)
class CompiledQuery:
    """Conjunction of conditions plus sort, skip and limit directives."""

    conditions: tuple[Condition, ...] = field(default_factory=tuple)
    sort: SortDirective | None = None
    skip: int = 0
    limit: int = 20


@dataclass(frozen=True)
class PageInfo:
    """Derived pagination flags."""

    total_pages: int
    has_next_page: bool
    has_previous_page: bool


@dataclass(frozen=True)
class QueryResult:
    """One page of recipes with pagination metadata."""

    items: tuple[RecipeSummary, ...]
    total: int
    total_pages: int
    current_page: int
    limit: int
    has_next_page: bool
    has_previous_page: bool
