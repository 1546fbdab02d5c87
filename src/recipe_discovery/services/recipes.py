"""Recipe lookups: faceted search, suggestions and facet catalogs."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from recipe_discovery.domain.queries import (
    CompiledQuery,
    QueryRequest,
    QueryResult,
    RawQueryParams,
)
from recipe_discovery.domain.recipes import Recipe, RecipeSummary, Suggestion
from recipe_discovery.services.cache import Cache, get_or_compute
from recipe_discovery.services.filters import escape_pattern, normalize_query
from recipe_discovery.services.pagination import paginate
from recipe_discovery.services.query_compiler import compile_query

MAX_SUGGESTIONS = 10

_logger = logging.getLogger(__name__)


class RecipeRepository(Protocol):
    """Persistence interface for recipes."""

    def search(self, query: CompiledQuery) -> tuple[list[RecipeSummary], int]:
        """Return one page of matching recipes and the total match count."""

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        """Return a recipe with its version history, if present."""

    def apply_description_update(
        self,
        recipe_id: str,
        description: str,
        editor_name: str,
        timestamp: datetime,
    ) -> bool:
        """Atomically set the description, append a version, bump the counter.

        Returns False when no recipe matched ``recipe_id``.
        """

    def suggest(self, pattern: str, limit: int) -> list[Suggestion]:
        """Return recipes whose title matches an escaped pattern."""

    def list_categories(self) -> list[str]:
        """Return all category labels."""

    def list_tags(self) -> list[str]:
        """Return all distinct tags across recipes."""

    def list_ingredients(self) -> list[str]:
        """Return all distinct ingredients across recipes."""


@dataclass
class RecipeQueryService:
    """Read path: normalize, compile, page, and memoize recipe queries."""

    repository: RecipeRepository
    cache: Cache
    ttl_seconds: int = 300

    def search(self, raw: RawQueryParams) -> QueryResult:
        """Run a faceted search from raw request parameters."""
        return self.run(normalize_query(raw))

    def run(self, request: QueryRequest) -> QueryResult:
        """Run a normalized query, serving from cache when fresh."""
        return get_or_compute(
            self.cache,
            request.cache_key(),
            self.ttl_seconds,
            lambda: self._execute(request),
        )

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        """Return a single recipe by id."""
        return self.repository.get_recipe(recipe_id)

    def suggest(self, query: str | None, limit: int | None = None) -> list[Suggestion]:
        """Return title suggestions for autocomplete."""
        text = (query or "").strip()
        if not text:
            return []
        capped = MAX_SUGGESTIONS if limit is None else min(limit, MAX_SUGGESTIONS)
        if capped < 1:
            return []
        return self.repository.suggest(escape_pattern(text), capped)

    def list_categories(self) -> list[str]:
        """Return cached category labels."""
        return get_or_compute(
            self.cache, "categories", self.ttl_seconds, self.repository.list_categories
        )

    def list_tags(self) -> list[str]:
        """Return cached tag labels."""
        return get_or_compute(
            self.cache, "tags", self.ttl_seconds, self.repository.list_tags
        )

    def list_ingredients(self) -> list[str]:
        """Return cached ingredient labels."""
        return get_or_compute(
            self.cache, "ingredients", self.ttl_seconds, self.repository.list_ingredients
        )

    def _execute(self, request: QueryRequest) -> QueryResult:
        compiled = compile_query(request)
        items, total = self.repository.search(compiled)
        page_info = paginate(total, request.page, request.limit)
        _logger.debug(
            "Recipe query: conditions=%s total=%s page=%s",
            len(compiled.conditions),
            total,
            request.page,
        )
        return QueryResult(
            items=tuple(items),
            total=total,
            total_pages=page_info.total_pages,
            current_page=request.page,
            limit=request.limit,
            has_next_page=page_info.has_next_page,
            has_previous_page=page_info.has_previous_page,
        )
