from __future__ import annotations


class SubscriptionError(Exception):
    """Base error for every failure the subscription service reports."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(SubscriptionError):
    """Raised for malformed or out-of-range input; nothing is written."""


class NotFoundError(SubscriptionError):
    """Raised when the referenced subscription does not exist."""


class StorageError(SubscriptionError):
    """Raised when the persistence gateway fails."""


class AggregationError(StorageError):
    """Raised when the storage layer fails while computing a summary."""
