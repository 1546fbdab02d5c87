"""Domain error taxonomy."""


class RecipeServiceError(Exception):
    """Base class for recipe service errors."""


class ValidationError(RecipeServiceError):
    """Raised when user input is malformed or too short."""


class AuthError(RecipeServiceError):
    """Raised when the caller has no valid session."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class NotFoundError(RecipeServiceError):
    """Raised when a recipe id does not resolve to a record."""

    def __init__(self, recipe_id: str) -> None:
        super().__init__(f"Recipe not found: {recipe_id}")
        self.recipe_id = recipe_id


class BackingStoreError(RecipeServiceError):
    """Raised for any failure reported by the persistent store."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(f"Store error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason


class PushSendError(Exception):
    """Raised by a push transport when a delivery attempt fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DeliveryError(RecipeServiceError):
    """A classified notification delivery failure."""

    def __init__(self, endpoint: str, status_code: int | None, reason: str) -> None:
        super().__init__(f"Delivery to {endpoint} failed ({status_code}): {reason}")
        self.endpoint = endpoint
        self.status_code = status_code
        self.reason = reason


class TransientDeliveryError(DeliveryError):
    """Delivery failed for a reason that does not mean the endpoint is gone."""


class PermanentDeliveryError(DeliveryError):
    """The endpoint no longer exists at the transport layer."""
