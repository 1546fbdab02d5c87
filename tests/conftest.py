"""Shared test fixtures."""

import re
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from recipe_discovery.config import Settings
from recipe_discovery.containers import AppContainer
from recipe_discovery.domain.errors import AuthError, BackingStoreError, PushSendError
from recipe_discovery.domain.models import AuthenticatedUser
from recipe_discovery.domain.notifications import PushEndpoint
from recipe_discovery.domain.queries import CompiledQuery, Condition, ConditionOperator
from recipe_discovery.domain.recipes import (
    Recipe,
    RecipeSummary,
    RecipeVersion,
    Suggestion,
)
from recipe_discovery.services.cache import InMemoryCache
from recipe_discovery.services.favorites import FavoriteService, PushSubscriptionService
from recipe_discovery.services.notifications import NotificationDispatcher, PushClient
from recipe_discovery.services.parties import (
    FavoriteRepository,
    InterestedPartyResolver,
    PushSubscriptionRepository,
)
from recipe_discovery.services.recipes import RecipeQueryService, RecipeRepository
from recipe_discovery.services.updates import RecipeUpdateCoordinator
from recipe_discovery.services.users import SessionVerifier, UserService

TEST_SERVICE_KEY = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
    "c2lnbmF0dXJlLWZvci10ZXN0cw"
)


def make_recipe(  # noqa: PLR0913
    recipe_id: str,
    title: str,
    *,
    description: str = "A recipe used in tests.",
    category: str | None = None,
    tags: tuple[str, ...] = (),
    ingredients: tuple[str, ...] = (),
    steps: tuple[str, ...] = (),
    prep: int | None = None,
    cook: int | None = None,
    published: datetime | None = None,
) -> Recipe:
    return Recipe(
        id=recipe_id,
        title=title,
        description=description,
        category=category,
        tags=tags,
        ingredients=ingredients,
        steps=steps,
        prep=prep,
        cook=cook,
        published=published,
        update_count=0,
        versions=(),
    )


def make_endpoint(user_id: str, address: str) -> PushEndpoint:
    return PushEndpoint(
        id=uuid4(),
        user_id=user_id,
        subscription={
            "endpoint": address,
            "keys": {"p256dh": "p256dh-key", "auth": "auth-key"},
        },
        registered_at=datetime.now(tz=UTC),
    )


def _summary(recipe: Recipe) -> RecipeSummary:
    return RecipeSummary(
        id=recipe.id,
        title=recipe.title,
        description=recipe.description,
        category=recipe.category,
        tags=recipe.tags,
        ingredients=recipe.ingredients,
        step_count=len(recipe.steps),
        prep=recipe.prep,
        cook=recipe.cook,
        published=recipe.published,
    )


def _column_value(recipe: Recipe, column: str) -> object:
    if column == "step_count":
        return len(recipe.steps)
    return getattr(recipe, column)


def _matches(recipe: Recipe, condition: Condition) -> bool:
    value = _column_value(recipe, condition.field)
    if condition.operator is ConditionOperator.MATCHES:
        return re.search(str(condition.value), str(value), re.IGNORECASE) is not None
    if condition.operator is ConditionOperator.EQUALS:
        return value == condition.value
    if condition.operator is ConditionOperator.CONTAINS_ALL:
        return set(condition.value) <= set(value)
    if condition.operator is ConditionOperator.OVERLAPS:
        return bool(set(condition.value) & set(value))
    raise AssertionError(f"Unknown operator {condition.operator}")


@dataclass
class InMemoryRecipeRepository(RecipeRepository):
    """In-memory recipe repository for tests; insertion order is natural order."""

    recipes: dict[str, Recipe] = field(default_factory=dict)
    categories: list[str] = field(default_factory=list)
    search_calls: list[CompiledQuery] = field(default_factory=list)
    lookup_calls: list[str] = field(default_factory=list)
    failure: BackingStoreError | None = None

    def add(self, recipe: Recipe) -> Recipe:
        self.recipes[recipe.id] = recipe
        return recipe

    def search(self, query: CompiledQuery) -> tuple[list[RecipeSummary], int]:
        self._raise_if_failing()
        self.search_calls.append(query)
        matched = [
            recipe
            for recipe in self.recipes.values()
            if all(_matches(recipe, condition) for condition in query.conditions)
        ]
        if query.sort is not None:
            column = query.sort.column
            present = [r for r in matched if _column_value(r, column) is not None]
            missing = [r for r in matched if _column_value(r, column) is None]
            present.sort(
                key=lambda r: _column_value(r, column), reverse=query.sort.descending
            )
            matched = missing + present if query.sort.descending else present + missing
        page = matched[query.skip : query.skip + query.limit]
        return [_summary(recipe) for recipe in page], len(matched)

    def get_recipe(self, recipe_id: str) -> Recipe | None:
        self._raise_if_failing()
        return self.recipes.get(recipe_id)

    def apply_description_update(
        self,
        recipe_id: str,
        description: str,
        editor_name: str,
        timestamp: datetime,
    ) -> bool:
        self._raise_if_failing()
        recipe = self.recipes.get(recipe_id)
        if recipe is None:
            return False
        sequence = recipe.update_count + 1
        self.recipes[recipe_id] = replace(
            recipe,
            description=description,
            update_count=sequence,
            versions=(
                *recipe.versions,
                RecipeVersion(
                    sequence=sequence,
                    editor_name=editor_name,
                    description=description,
                    timestamp=timestamp,
                ),
            ),
        )
        return True

    def suggest(self, pattern: str, limit: int) -> list[Suggestion]:
        self._raise_if_failing()
        matched = sorted(
            (
                recipe
                for recipe in self.recipes.values()
                if re.search(pattern, recipe.title, re.IGNORECASE)
            ),
            key=lambda recipe: recipe.title,
        )
        return [
            Suggestion(id=recipe.id, title=recipe.title, category=recipe.category)
            for recipe in matched[:limit]
        ]

    def list_categories(self) -> list[str]:
        self._raise_if_failing()
        self.lookup_calls.append("categories")
        return sorted(self.categories)

    def list_tags(self) -> list[str]:
        self._raise_if_failing()
        self.lookup_calls.append("tags")
        return sorted({tag for recipe in self.recipes.values() for tag in recipe.tags})

    def list_ingredients(self) -> list[str]:
        self._raise_if_failing()
        self.lookup_calls.append("ingredients")
        return sorted(
            {item for recipe in self.recipes.values() for item in recipe.ingredients}
        )

    def _raise_if_failing(self) -> None:
        if self.failure is not None:
            raise self.failure


@dataclass
class InMemoryFavoriteRepository(FavoriteRepository):
    """In-memory favorites relation for tests."""

    favorites: set[tuple[str, str]] = field(default_factory=set)
    lookups: list[str] = field(default_factory=list)

    def list_user_ids(self, recipe_id: str) -> set[str]:
        self.lookups.append(recipe_id)
        return {user for user, recipe in self.favorites if recipe == recipe_id}

    def add_favorite(self, user_id: str, recipe_id: str, created_at: datetime) -> None:
        self.favorites.add((user_id, recipe_id))

    def is_favorited(self, user_id: str, recipe_id: str) -> bool:
        return (user_id, recipe_id) in self.favorites


@dataclass
class InMemoryPushSubscriptionRepository(PushSubscriptionRepository):
    """In-memory push endpoint registry for tests."""

    endpoints: dict[UUID, PushEndpoint] = field(default_factory=dict)
    lookups: list[set[str]] = field(default_factory=list)
    deleted: list[UUID] = field(default_factory=list)
    delete_error: Exception | None = None

    def add(self, endpoint: PushEndpoint) -> PushEndpoint:
        self.endpoints[endpoint.id] = endpoint
        return endpoint

    def list_for_users(self, user_ids: set[str]) -> list[PushEndpoint]:
        self.lookups.append(set(user_ids))
        return [
            endpoint
            for endpoint in self.endpoints.values()
            if endpoint.user_id in user_ids
        ]

    def save(
        self, user_id: str, subscription: dict[str, object], registered_at: datetime
    ) -> PushEndpoint:
        for existing in self.endpoints.values():
            if existing.user_id == user_id and existing.address == subscription.get(
                "endpoint"
            ):
                updated = replace(
                    existing, subscription=subscription, registered_at=registered_at
                )
                self.endpoints[existing.id] = updated
                return updated
        endpoint = PushEndpoint(
            id=uuid4(),
            user_id=user_id,
            subscription=subscription,
            registered_at=registered_at,
        )
        self.endpoints[endpoint.id] = endpoint
        return endpoint

    def delete(self, endpoint_id: UUID) -> None:
        if self.delete_error is not None:
            raise self.delete_error
        self.deleted.append(endpoint_id)
        self.endpoints.pop(endpoint_id, None)


@dataclass
class FakePushClient(PushClient):
    """Fake push transport that records attempts and deliveries, failing on request."""

    attempts: list[str] = field(default_factory=list)
    sent: list[tuple[dict[str, object], dict[str, str]]] = field(default_factory=list)
    failures: dict[str, int | None] = field(default_factory=dict)

    async def send(
        self, subscription: dict[str, object], payload: dict[str, str]
    ) -> None:
        address = str(subscription.get("endpoint"))
        self.attempts.append(address)
        if address in self.failures:
            raise PushSendError("push service rejected", self.failures[address])
        self.sent.append((subscription, payload))


@dataclass
class FakeSessionVerifier(SessionVerifier):
    """Token verifier backed by a static token table."""

    users: dict[str, AuthenticatedUser] = field(default_factory=dict)
    outage: BackingStoreError | None = None

    def verify(self, access_token: str) -> AuthenticatedUser:
        if self.outage is not None:
            raise self.outage
        user = self.users.get(access_token)
        if user is None:
            raise AuthError()
        return user


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=TEST_SERVICE_KEY,
        vapid_public_key="test-public-key",
        vapid_private_key="test-private-key",
    )


@pytest.fixture
def recipe_repository() -> InMemoryRecipeRepository:
    return InMemoryRecipeRepository()


@pytest.fixture
def favorite_repository() -> InMemoryFavoriteRepository:
    return InMemoryFavoriteRepository()


@pytest.fixture
def subscription_repository() -> InMemoryPushSubscriptionRepository:
    return InMemoryPushSubscriptionRepository()


@pytest.fixture
def push_client() -> FakePushClient:
    return FakePushClient()


@pytest.fixture
def session_verifier() -> FakeSessionVerifier:
    return FakeSessionVerifier(
        users={
            "alice-token": AuthenticatedUser(
                id="user-alice", email="alice@example.com", name="Alice"
            ),
            "bob-token": AuthenticatedUser(
                id="user-bob", email="bob@example.com", name=None
            ),
        }
    )


@pytest.fixture
def dispatcher(
    push_client: FakePushClient,
    subscription_repository: InMemoryPushSubscriptionRepository,
) -> NotificationDispatcher:
    return NotificationDispatcher(
        push_client=push_client,
        subscription_repository=subscription_repository,
    )


@pytest.fixture
def coordinator(
    recipe_repository: InMemoryRecipeRepository,
    favorite_repository: InMemoryFavoriteRepository,
    subscription_repository: InMemoryPushSubscriptionRepository,
    dispatcher: NotificationDispatcher,
) -> RecipeUpdateCoordinator:
    return RecipeUpdateCoordinator(
        repository=recipe_repository,
        resolver=InterestedPartyResolver(
            favorite_repository=favorite_repository,
            subscription_repository=subscription_repository,
        ),
        dispatcher=dispatcher,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    recipe_repository: InMemoryRecipeRepository,
    favorite_repository: InMemoryFavoriteRepository,
    subscription_repository: InMemoryPushSubscriptionRepository,
    session_verifier: FakeSessionVerifier,
    coordinator: RecipeUpdateCoordinator,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        user_service=UserService(session_verifier),
        recipe_query_service=RecipeQueryService(
            repository=recipe_repository,
            cache=InMemoryCache(),
            ttl_seconds=settings.query_cache_ttl_seconds,
        ),
        update_coordinator=coordinator,
        favorite_service=FavoriteService(
            repository=favorite_repository,
            recipe_repository=recipe_repository,
        ),
        push_subscription_service=PushSubscriptionService(
            repository=subscription_repository,
            public_key=settings.vapid_public_key,
        ),
    )
