"""Mapping of domain errors onto HTTP responses."""

from fastapi import HTTPException, status

from recipe_discovery.domain.errors import (
    AuthError,
    BackingStoreError,
    NotFoundError,
    RecipeServiceError,
    ValidationError,
)

_STATUS_BY_ERROR: dict[type[RecipeServiceError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthError: status.HTTP_401_UNAUTHORIZED,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    BackingStoreError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_http_exception(exc: RecipeServiceError, fallback: str) -> HTTPException:
    """Return the HTTPException for a domain error.

    Store failures and unmapped errors use ``fallback`` as the detail so that
    backend messages never reach the client.
    """
    status_code = _STATUS_BY_ERROR.get(
        type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return HTTPException(status_code=status_code, detail=fallback)
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status_code, detail="Recipe not found")
    return HTTPException(status_code=status_code, detail=str(exc))
