"""Domain models for recipes and their edit history."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RecipeVersion:
    """Immutable snapshot appended on every accepted description edit."""

    sequence: int
    editor_name: str
    description: str
    timestamp: datetime


@dataclass(frozen=True)
class Recipe:
    """Represents a full recipe record."""

    id: str
    title: str
    description: str
    category: str | None
    tags: tuple[str, ...]
    ingredients: tuple[str, ...]
    steps: tuple[str, ...]
    prep: int | None
    cook: int | None
    published: datetime | None
    update_count: int
    versions: tuple[RecipeVersion, ...]

    @property
    def latest_version(self) -> RecipeVersion | None:
        """Return the most recent edit snapshot, if any."""
        return self.versions[-1] if self.versions else None


@dataclass(frozen=True)
class RecipeSummary:
    """Listing view of a recipe."""

    id: str
    title: str
    description: str
    category: str | None
    tags: tuple[str, ...]
    ingredients: tuple[str, ...]
    step_count: int
    prep: int | None
    cook: int | None
    published: datetime | None


@dataclass(frozen=True)
class Suggestion:
    """Title suggestion returned by the autocomplete search."""

    id: str
    title: str
    category: str | None
