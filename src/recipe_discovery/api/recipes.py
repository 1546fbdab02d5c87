"""Recipe query, lookup and update endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from recipe_discovery.api.auth import optional_user
from recipe_discovery.api.errors import to_http_exception
from recipe_discovery.api.models import RecipeUpdateRequest  # noqa: TC001
from recipe_discovery.domain.errors import BackingStoreError, RecipeServiceError
from recipe_discovery.domain.models import AuthenticatedUser  # noqa: TC001
from recipe_discovery.domain.queries import RawQueryParams

if TYPE_CHECKING:
    from recipe_discovery.containers import AppContainer
    from recipe_discovery.domain.queries import QueryResult
    from recipe_discovery.domain.recipes import Recipe, RecipeSummary

router = APIRouter(tags=["recipes"])

_logger = logging.getLogger(__name__)


@router.get("/recipes")
async def list_recipes(  # noqa: PLR0913
    request: Request,
    page: str | None = None,
    limit: str | None = None,
    search: str | None = None,
    sort_by: str | None = Query(default=None, alias="sortBy"),
    order: str | None = None,
    category: str | None = None,
    tags: list[str] | None = Query(default=None, alias="tags[]"),
    tag_match_type: str | None = Query(default=None, alias="tagMatchType"),
    ingredients: list[str] | None = Query(default=None, alias="ingredients[]"),
    ingredients_match_type: str | None = Query(
        default=None, alias="ingredientsMatchType"
    ),
    ingredient_match_type: str | None = Query(
        default=None, alias="ingredientMatchType"
    ),
    number_of_steps: str | None = Query(default=None, alias="numberOfSteps"),
) -> dict[str, object]:
    """Return one page of recipes matching the requested facets."""
    container: AppContainer = request.app.state.container
    raw = RawQueryParams(
        page=page,
        limit=limit,
        search=search,
        sort_by=sort_by,
        order=order,
        category=category,
        tags=tags,
        tag_match_type=tag_match_type,
        ingredients=ingredients,
        ingredients_match_type=ingredients_match_type or ingredient_match_type,
        number_of_steps=number_of_steps,
    )
    try:
        result = container.recipe_query_service.search(raw)
    except RecipeServiceError as exc:
        _logger.exception("Error fetching recipes")
        raise to_http_exception(exc, "Error fetching recipes") from exc
    return _serialize_result(result)


@router.get("/recipes/{recipe_id}")
async def get_recipe(recipe_id: str, request: Request) -> dict[str, object]:
    """Return a single recipe with its version history."""
    container: AppContainer = request.app.state.container
    try:
        recipe = container.recipe_query_service.get_recipe(recipe_id)
    except RecipeServiceError as exc:
        _logger.exception("Error fetching recipe", extra={"recipe_id": recipe_id})
        raise to_http_exception(exc, "Internal server error") from exc
    if recipe is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Recipe not found"
        )
    return _serialize_recipe(recipe)


@router.patch("/recipes/{recipe_id}")
async def update_recipe(
    recipe_id: str,
    payload: RecipeUpdateRequest,
    request: Request,
    user: AuthenticatedUser | None = Depends(optional_user),
) -> dict[str, object]:
    """Update a recipe description and notify users who favorited it."""
    container: AppContainer = request.app.state.container
    try:
        result = await container.update_coordinator.update_description(
            recipe_id,
            description=payload.description,
            editor_name=payload.user_name,
            editor=user,
        )
    except RecipeServiceError as exc:
        if isinstance(exc, BackingStoreError):
            _logger.exception("Error updating recipe", extra={"recipe_id": recipe_id})
        raise to_http_exception(exc, "Internal server error") from exc
    return {
        "message": "Recipe updated successfully",
        "recipe": _serialize_recipe(result.recipe),
        "notificationsSent": result.notifications_sent,
    }


@router.get("/suggestions")
async def suggestions(
    request: Request, q: str | None = None, limit: str | None = None
) -> dict[str, object]:
    """Return title suggestions for autocomplete."""
    container: AppContainer = request.app.state.container
    try:
        items = container.recipe_query_service.suggest(q, _parse_limit(limit))
    except RecipeServiceError as exc:
        _logger.exception("Error fetching suggestions")
        raise to_http_exception(exc, "Failed to fetch suggestions") from exc
    return {
        "suggestions": [
            {"id": item.id, "title": item.title, "category": item.category}
            for item in items
        ]
    }


@router.get("/categories")
async def categories(request: Request) -> list[str]:
    """Return all recipe categories."""
    container: AppContainer = request.app.state.container
    try:
        return container.recipe_query_service.list_categories()
    except RecipeServiceError as exc:
        _logger.exception("Error fetching categories")
        raise to_http_exception(exc, "Error fetching categories") from exc


@router.get("/tags")
async def tags(request: Request) -> list[str]:
    """Return all distinct recipe tags."""
    container: AppContainer = request.app.state.container
    try:
        return container.recipe_query_service.list_tags()
    except RecipeServiceError as exc:
        _logger.exception("Error fetching tags")
        raise to_http_exception(exc, "Error fetching tags") from exc


@router.get("/ingredients")
async def ingredients(request: Request) -> list[str]:
    """Return all distinct recipe ingredients."""
    container: AppContainer = request.app.state.container
    try:
        return container.recipe_query_service.list_ingredients()
    except RecipeServiceError as exc:
        _logger.exception("Error fetching ingredients")
        raise to_http_exception(exc, "Error fetching ingredients") from exc


def _parse_limit(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _serialize_summary(summary: RecipeSummary) -> dict[str, object]:
    return {
        "id": summary.id,
        "title": summary.title,
        "description": summary.description,
        "category": summary.category,
        "tags": list(summary.tags),
        "ingredients": list(summary.ingredients),
        "stepCount": summary.step_count,
        "prep": summary.prep,
        "cook": summary.cook,
        "published": summary.published.isoformat() if summary.published else None,
    }


def _serialize_result(result: QueryResult) -> dict[str, object]:
    return {
        "recipes": [_serialize_summary(item) for item in result.items],
        "total": result.total,
        "totalPages": result.total_pages,
        "currentPage": result.current_page,
        "limit": result.limit,
        "hasNextPage": result.has_next_page,
        "hasPreviousPage": result.has_previous_page,
    }


def _serialize_recipe(recipe: Recipe) -> dict[str, object]:
    return {
        "id": recipe.id,
        "title": recipe.title,
        "description": recipe.description,
        "category": recipe.category,
        "tags": list(recipe.tags),
        "ingredients": list(recipe.ingredients),
        "steps": list(recipe.steps),
        "prep": recipe.prep,
        "cook": recipe.cook,
        "published": recipe.published.isoformat() if recipe.published else None,
        "updateCount": recipe.update_count,
        "versionHistory": [
            {
                "sequence": version.sequence,
                "editorName": version.editor_name,
                "description": version.description,
                "timestamp": version.timestamp.isoformat(),
            }
            for version in recipe.versions
        ],
    }
