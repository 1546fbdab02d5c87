"""Supabase implementation of the recipe repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from recipe_discovery.adapters.supabase_errors import store_errors
from recipe_discovery.domain.queries import CompiledQuery, Condition, ConditionOperator
from recipe_discovery.domain.recipes import (
    Recipe,
    RecipeSummary,
    RecipeVersion,
    Suggestion,
)
from recipe_discovery.services.recipes import RecipeRepository

_SUMMARY_COLUMNS = (
    "id, title, description, category, tags, ingredients, step_count, "
    "prep, cook, published"
)
_NATURAL_ORDER_COLUMN = "created_at"
_UPDATE_FUNCTION = "apply_recipe_description_update"


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase-backed repository for recipes and their version history."""

    client: Client

    def search(self, query: CompiledQuery) -> tuple[list[RecipeSummary], int]:
        """Return one page of matching recipes and the exact match count."""
        builder = self.client.table("recipes").select(_SUMMARY_COLUMNS, count="exact")
        for condition in query.conditions:
            builder = _apply_condition(builder, condition)
        if query.sort is not None:
            builder = builder.order(query.sort.column, desc=query.sort.descending)
        builder = builder.order(_NATURAL_ORDER_COLUMN).order("id")
        with store_errors("search recipes"):
            response = builder.range(
                query.skip, query.skip + query.limit - 1
            ).execute()
        rows = response.data or []
        return [_parse_summary(row) for row in rows], int(response.count or 0)

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        """Return a recipe with its version history, if present."""
        with store_errors("get recipe"):
            response = (
                self.client.table("recipes")
                .select("*, recipe_versions(*)")
                .eq("id", recipe_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_recipe(response.data[0])

    def apply_description_update(
        self,
        recipe_id: str,
        description: str,
        editor_name: str,
        timestamp: datetime,
    ) -> bool:
        """Run the single-statement update function for one recipe."""
        with store_errors("update recipe description"):
            response = self.client.rpc(
                _UPDATE_FUNCTION,
                {
                    "p_recipe_id": recipe_id,
                    "p_description": description,
                    "p_editor_name": editor_name,
                    "p_updated_at": timestamp.isoformat(),
                },
            ).execute()
        return bool(response.data)

    def suggest(self, pattern: str, limit: int) -> list[Suggestion]:
        """Return recipes whose title matches a case-insensitive pattern."""
        with store_errors("suggest recipes"):
            response = (
                self.client.table("recipes")
                .select("id, title, category")
                .filter("title", "imatch", pattern)
                .order("title")
                .limit(limit)
                .execute()
            )
        return [
            Suggestion(
                id=str(row["id"]),
                title=str(row.get("title", "")),
                category=row.get("category"),
            )
            for row in response.data or []
        ]

    def list_categories(self) -> list[str]:
        """Return all category names."""
        return self._list_column("categories", "name")

    def list_tags(self) -> list[str]:
        """Return distinct tags from the recipe_tags view."""
        return self._list_column("recipe_tags", "tag")

    def list_ingredients(self) -> list[str]:
        """Return distinct ingredients from the recipe_ingredients view."""
        return self._list_column("recipe_ingredients", "ingredient")

    def _list_column(self, table: str, column: str) -> list[str]:
        with store_errors(f"list {table}"):
            response = (
                self.client.table(table).select(column).order(column).execute()
            )
        return [str(row[column]) for row in response.data or [] if row.get(column)]


def _apply_condition(builder, condition: Condition):  # type: ignore[no-untyped-def]
    """Translate one domain condition into a PostgREST filter."""
    if condition.operator is ConditionOperator.MATCHES:
        return builder.filter(condition.field, "imatch", condition.value)
    if condition.operator is ConditionOperator.EQUALS:
        return builder.eq(condition.field, condition.value)
    if condition.operator is ConditionOperator.CONTAINS_ALL:
        return builder.contains(condition.field, list(condition.value))
    if condition.operator is ConditionOperator.OVERLAPS:
        return builder.overlaps(condition.field, list(condition.value))
    raise ValueError(f"Unsupported operator: {condition.operator}")


def _parse_datetime(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def _parse_optional_int(raw: object) -> int | None:
    if raw is None:
        return None
    return int(raw)


def _parse_summary(row: dict[str, object]) -> RecipeSummary:
    """Parse a recipe listing row into a domain model."""
    return RecipeSummary(
        id=str(row["id"]),
        title=str(row.get("title", "")),
        description=str(row.get("description") or ""),
        category=row.get("category"),
        tags=tuple(row.get("tags") or ()),
        ingredients=tuple(row.get("ingredients") or ()),
        step_count=int(row.get("step_count") or 0),
        prep=_parse_optional_int(row.get("prep")),
        cook=_parse_optional_int(row.get("cook")),
        published=_parse_datetime(row.get("published")),
    )


def _parse_recipe(row: dict[str, object]) -> Recipe:
    """Parse a recipe row with embedded versions into a domain model."""
    version_rows = sorted(
        row.get("recipe_versions") or [], key=lambda item: int(item["sequence"])
    )
    return Recipe(
        id=str(row["id"]),
        title=str(row.get("title", "")),
        description=str(row.get("description") or ""),
        category=row.get("category"),
        tags=tuple(row.get("tags") or ()),
        ingredients=tuple(row.get("ingredients") or ()),
        steps=tuple(row.get("steps") or ()),
        prep=_parse_optional_int(row.get("prep")),
        cook=_parse_optional_int(row.get("cook")),
        published=_parse_datetime(row.get("published")),
        update_count=int(row.get("update_count") or 0),
        versions=tuple(
            RecipeVersion(
                sequence=int(version["sequence"]),
                editor_name=str(version.get("editor_name", "")),
                description=str(version.get("description", "")),
                timestamp=datetime.fromisoformat(str(version["created_at"])),
            )
            for version in version_rows
        ),
    )
