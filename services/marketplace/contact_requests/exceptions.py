"""Domain errors raised by the marketplace core."""
from __future__ import annotations


class MarketplaceError(Exception):
    """Base class for marketplace domain errors."""


class NotFound(MarketplaceError):
    """An id did not match any stored record."""


class InvalidTransition(MarketplaceError):
    """A contact request was moved out of a terminal state."""


class ValidationError(MarketplaceError):
    """A required field is missing or a value is not allowed."""


class DeliveryError(MarketplaceError):
    """A notification could not be handed to its transport."""


class StorageError(MarketplaceError):
    """The persistence layer failed; the operation was rolled back."""
