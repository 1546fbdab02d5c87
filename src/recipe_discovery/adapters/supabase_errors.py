"""Translation of Supabase client failures into domain errors."""

from collections.abc import Iterator
from contextlib import contextmanager

import httpx
from postgrest.exceptions import APIError

from recipe_discovery.domain.errors import BackingStoreError


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Re-raise PostgREST and transport failures as BackingStoreError."""
    try:
        yield
    except APIError as exc:
        raise BackingStoreError(operation, str(exc.message or exc)) from exc
    except httpx.HTTPError as exc:
        raise BackingStoreError(operation, str(exc)) from exc
