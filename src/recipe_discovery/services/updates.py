"""Recipe description updates and the follow-up notification fan-out."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from recipe_discovery.domain.errors import AuthError, NotFoundError, ValidationError
from recipe_discovery.domain.models import AuthenticatedUser
from recipe_discovery.domain.recipes import Recipe
from recipe_discovery.services.notifications import (
    EXCERPT_LENGTH,
    NotificationDispatcher,
)
from recipe_discovery.services.parties import InterestedPartyResolver
from recipe_discovery.services.recipes import RecipeRepository

MIN_DESCRIPTION_LENGTH = 10

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateResult:
    """Committed recipe plus the number of users a notification was attempted for."""

    recipe: Recipe
    notifications_sent: int


@dataclass
class RecipeUpdateCoordinator:
    """Applies description edits, then hands off to the notification phase.

    The commit phase raises ``AuthError``, ``ValidationError``, ``NotFoundError``
    or ``BackingStoreError`` before anything is written. Once the store has
    accepted the edit, nothing in the notification phase can change the result
    beyond the reported count.
    """

    repository: RecipeRepository
    resolver: InterestedPartyResolver
    dispatcher: NotificationDispatcher

    async def update_description(
        self,
        recipe_id: str,
        description: object,
        editor_name: object,
        editor: AuthenticatedUser | None,
    ) -> UpdateResult:
        """Update a recipe description and notify its favoriters."""
        if editor is None:
            raise AuthError()
        if not isinstance(description, str) or len(description) < MIN_DESCRIPTION_LENGTH:
            raise ValidationError(
                "Invalid description. Must be at least "
                f"{MIN_DESCRIPTION_LENGTH} characters long."
            )
        supplied = editor_name.strip() if isinstance(editor_name, str) else ""
        name = supplied or editor.display_name

        recipe = self._commit(recipe_id, description, name)
        notified = await self._notify(recipe_id, name, description)
        return UpdateResult(recipe=recipe, notifications_sent=notified)

    def _commit(self, recipe_id: str, description: str, editor_name: str) -> Recipe:
        matched = self.repository.apply_description_update(
            recipe_id,
            description=description,
            editor_name=editor_name,
            timestamp=datetime.now(tz=UTC),
        )
        if not matched:
            raise NotFoundError(recipe_id)
        recipe = self.repository.get_recipe(recipe_id)
        if recipe is None:
            raise NotFoundError(recipe_id)
        return recipe

    async def _notify(self, recipe_id: str, editor_name: str, description: str) -> int:
        try:
            parties = self.resolver.resolve(recipe_id)
            if not parties.endpoints:
                return 0
            await self.dispatcher.dispatch(
                recipe_id,
                editor_name=editor_name,
                description_excerpt=description[:EXCERPT_LENGTH],
                targets=parties.endpoints,
            )
        except Exception:
            _logger.exception(
                "Notification phase failed", extra={"recipe_id": recipe_id}
            )
            return 0
        return len(parties.notified_user_ids)
