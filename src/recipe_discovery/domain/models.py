"""Domain models for recipe discovery users."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthenticatedUser:
    """Represents the caller behind a verified session."""

    id: str
    email: str | None
    name: str | None

    @property
    def display_name(self) -> str:
        """Return the best human-readable label for the user."""
        return self.name or self.email or self.id
