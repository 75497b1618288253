"""Typed models and validation helpers for Stockroom.

This module defines the stored item shape and the lightweight input schema
used when inserting items, along with validation helpers that normalize
identifiers and free-form text.

The intent is to keep these models framework-agnostic and free of I/O. Higher
layers (services, WebSocket API) are expected to compose these helpers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypedDict

from .exceptions import ValidationError

TEXT_MAX_LENGTH = 200


@dataclass(frozen=True)
class StoredItem:
    """Stored shape for an inventory item.

    Attributes:
        id: Unique primary key.
        description: Secondary key used for ordered listing.
        location: Free-form display text (e.g., "Aisle 3, Shelf 1").
    """

    id: str
    description: str
    location: str = ""


class ItemCreate(TypedDict, total=False):
    """Insertion input for StoredItem. 'id' and 'description' are required."""

    id: str
    description: str
    location: str


# -----------------------------
# Validation helpers
# -----------------------------


def validate_item_id(value: Any) -> str:
    """Return a stripped identifier or raise ValidationError when empty."""

    if not isinstance(value, str):
        raise ValidationError("id must be a string")
    stripped = value.strip()
    if not stripped:
        raise ValidationError("id cannot be empty")
    if len(stripped) > TEXT_MAX_LENGTH:
        raise ValidationError(f"id must be at most {TEXT_MAX_LENGTH} characters")
    return stripped


def validate_text(value: Any, *, field_name: str, allow_empty: bool = False) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    stripped = value.strip()
    if not stripped and not allow_empty:
        raise ValidationError(f"{field_name} cannot be empty")
    if len(stripped) > TEXT_MAX_LENGTH:
        raise ValidationError(f"{field_name} must be at most {TEXT_MAX_LENGTH} characters")
    return stripped


def create_item_from_payload(payload: ItemCreate) -> StoredItem:
    """Build a StoredItem from an ItemCreate mapping, validating each field."""

    if "id" not in payload:
        raise ValidationError("id is required")
    if "description" not in payload:
        raise ValidationError("description is required")
    return StoredItem(
        id=validate_item_id(payload["id"]),
        description=validate_text(payload["description"], field_name="description"),
        location=validate_text(
            payload.get("location", ""), field_name="location", allow_empty=True
        ),
    )


def serialize_item(item: StoredItem) -> dict[str, str]:
    return {
        "id": item.id,
        "description": item.description,
        "location": item.location,
    }
