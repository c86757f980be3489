"""Custom exception hierarchy for site-inventory."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from site_inventory.generators.layout import BatchResult


class InventoryError(Exception):
    """Base exception for all site-inventory errors."""


class ValidationError(InventoryError):
    """Raised when a ledger mutation is missing or has a malformed field."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class GenerationError(InventoryError):
    """Raised when a generation request cannot produce any flats."""


class PartialBatchFailure(InventoryError):
    """Raised when some flats of a generation batch could not be created."""

    def __init__(self, result: BatchResult) -> None:
        failed = ", ".join(
            f"{f.block} ({f.failed}/{f.attempted})" for f in result.failures
        )
        super().__init__(f"Failed to create flats for: {failed}")
        self.result = result


class AuthorizationError(InventoryError):
    """Raised when the current user's capabilities do not allow an action."""


class StoreError(InventoryError):
    """Raised when the flat store fails to read or persist records."""


class EntityNotFoundError(StoreError):
    """Raised when a referenced flat does not exist."""


class ConfirmationRejected(InventoryError):
    """Raised when a cascade deletion is attempted with a wrong token."""


class InvalidNavigationError(InventoryError):
    """Raised for paths or transitions the navigator cannot reach."""


class ConfigurationError(InventoryError):
    """Raised when configuration is invalid or missing."""
