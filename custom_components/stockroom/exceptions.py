"""Exception taxonomy for the Stockroom integration.

Defines a small hierarchy of exceptions used by the registry, services and
the WebSocket API. These extend Home Assistant's HomeAssistantError to ensure
consistent behavior when surfaced through the platform.

All exceptions carry a human-readable message. ``str(exception)`` returns the
message unchanged. Identifier errors also expose the offending ``item_id``.
"""

from __future__ import annotations

from homeassistant.exceptions import HomeAssistantError


class StockroomError(HomeAssistantError):
    """Base exception for Stockroom-related errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ValidationError(StockroomError):
    """Raised when input payloads fail validation."""


class DuplicateIdentifierError(StockroomError):
    """Raised when inserting an item whose id is already registered."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"item with id {item_id} already exists")
        self.item_id = item_id


class ItemNotFoundError(StockroomError):
    """Raised when a lookup or removal targets an unknown id."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"item with id {item_id} not found")
        self.item_id = item_id


class RegistryNotReadyError(StockroomError):
    """Raised when handlers run before the integration has been set up."""
