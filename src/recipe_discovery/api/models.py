"""Pydantic models for request bodies."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RecipeUpdateRequest(BaseModel):
    """Description edit payload; the description is validated by the update service."""

    model_config = ConfigDict(populate_by_name=True)

    description: Any = None
    user_name: Any = Field(default=None, alias="userName")


class FavoriteRequest(BaseModel):
    """Favorite a recipe."""

    model_config = ConfigDict(populate_by_name=True)

    recipe_id: str | None = Field(default=None, alias="recipeId")


class PushKeys(BaseModel):
    """Encryption keys of a browser push subscription."""

    p256dh: str
    auth: str


class PushSubscriptionRequest(BaseModel):
    """Browser ``PushSubscription.toJSON()`` payload."""

    model_config = ConfigDict(populate_by_name=True)

    endpoint: str
    expiration_time: int | None = Field(default=None, alias="expirationTime")
    keys: PushKeys

    def to_subscription_info(self) -> dict[str, object]:
        """Return the opaque subscription blob stored for delivery."""
        return self.model_dump(by_alias=True)
