"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from recipe_discovery.adapters.supabase_favorite_repository import (
    SupabaseFavoriteRepository,
)
from recipe_discovery.adapters.supabase_push_subscription_repository import (
    SupabasePushSubscriptionRepository,
)
from recipe_discovery.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from recipe_discovery.adapters.supabase_session_verifier import (
    SupabaseSessionVerifier,
)
from recipe_discovery.adapters.webpush_client import WebPushClient
from recipe_discovery.config import Settings
from recipe_discovery.services.cache import InMemoryCache
from recipe_discovery.services.favorites import FavoriteService, PushSubscriptionService
from recipe_discovery.services.notifications import NotificationDispatcher
from recipe_discovery.services.parties import InterestedPartyResolver
from recipe_discovery.services.recipes import RecipeQueryService
from recipe_discovery.services.updates import RecipeUpdateCoordinator
from recipe_discovery.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    recipe_query_service: RecipeQueryService
    update_coordinator: RecipeUpdateCoordinator
    favorite_service: FavoriteService
    push_subscription_service: PushSubscriptionService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    favorite_repository = SupabaseFavoriteRepository(supabase_client)
    subscription_repository = SupabasePushSubscriptionRepository(supabase_client)

    push_client = None
    if resolved_settings.push_enabled and resolved_settings.vapid_private_key:
        push_client = WebPushClient(
            vapid_private_key=resolved_settings.vapid_private_key,
            vapid_subject=resolved_settings.vapid_subject,
            timeout_seconds=resolved_settings.push_timeout_seconds,
        )

    update_coordinator = RecipeUpdateCoordinator(
        repository=recipe_repository,
        resolver=InterestedPartyResolver(
            favorite_repository=favorite_repository,
            subscription_repository=subscription_repository,
        ),
        dispatcher=NotificationDispatcher(
            push_client=push_client,
            subscription_repository=subscription_repository,
        ),
    )

    return AppContainer(
        settings=resolved_settings,
        user_service=UserService(SupabaseSessionVerifier(supabase_client)),
        recipe_query_service=RecipeQueryService(
            repository=recipe_repository,
            cache=InMemoryCache(),
            ttl_seconds=resolved_settings.query_cache_ttl_seconds,
        ),
        update_coordinator=update_coordinator,
        favorite_service=FavoriteService(
            repository=favorite_repository,
            recipe_repository=recipe_repository,
        ),
        push_subscription_service=PushSubscriptionService(
            repository=subscription_repository,
            public_key=resolved_settings.vapid_public_key,
        ),
    )
