"""Offline tests for item models and validation helpers."""

from __future__ import annotations

import dataclasses

import pytest
from custom_components.stockroom.exceptions import ValidationError
from custom_components.stockroom.models import (
    TEXT_MAX_LENGTH,
    StoredItem,
    create_item_from_payload,
    serialize_item,
    validate_item_id,
)


def test_stored_item_is_immutable() -> None:
    item = StoredItem(id="ITEM001", description="LED Light", location="Aisle 3, Shelf 1")
    with pytest.raises(dataclasses.FrozenInstanceError):
        item.description = "Other"  # type: ignore[misc]


def test_create_item_strips_and_defaults_location() -> None:
    item = create_item_from_payload({"id": "  ITEM001 ", "description": " LED Light "})
    assert item == StoredItem(id="ITEM001", description="LED Light", location="")


@pytest.mark.parametrize(
    "payload",
    [
        {"description": "LED Light"},
        {"id": "ITEM001"},
        {"id": "   ", "description": "LED Light"},
        {"id": "ITEM001", "description": ""},
        {"id": 42, "description": "LED Light"},
        {"id": "ITEM001", "description": "LED Light", "location": None},
        {"id": "ITEM001", "description": "x" * (TEXT_MAX_LENGTH + 1)},
    ],
)
def test_create_item_rejects_invalid_payloads(payload) -> None:
    with pytest.raises(ValidationError):
        create_item_from_payload(payload)


def test_validate_item_id_returns_stripped_value() -> None:
    assert validate_item_id("\tITEM002\n") == "ITEM002"


def test_serialize_item_shape() -> None:
    item = StoredItem(id="ITEM002", description="Fan Motor", location="Aisle 2, Shelf 5")
    assert serialize_item(item) == {
        "id": "ITEM002",
        "description": "Fan Motor",
        "location": "Aisle 2, Shelf 5",
    }
