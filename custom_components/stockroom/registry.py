"""In-memory registry with identifier and description indexes for Stockroom.

This module provides a synchronous registry class that stores items once,
keyed by id, and maintains an ordered secondary index from description to the
id of the item currently visible under that description.

Description collisions follow a last-write-wins policy: a later insert takes
over the description slot while the earlier item stays addressable by id.
Removal only clears a description slot that still belongs to the removed item.

The registry is framework-agnostic and designed to be exercised by offline
tests and invoked by service/WebSocket layers.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator

from .const import DOMAIN
from .exceptions import DuplicateIdentifierError, ItemNotFoundError
from .models import StoredItem

LOGGER = logging.getLogger(__name__)


class DescriptionListing:
    """Lazy, restartable view over a registry in description order.

    Every iteration takes a fresh snapshot of the description index, so the
    view reflects the registry state at the time iteration starts.
    """

    def __init__(self, registry: Registry) -> None:
        self._registry = registry

    def __iter__(self) -> Iterator[StoredItem]:
        for item in self._registry._snapshot_by_description():
            LOGGER.debug(
                "Item listed",
                extra={
                    "domain": DOMAIN,
                    "op": "list_by_description",
                    "item_id": item.id,
                    "description": item.description,
                    "location": item.location,
                },
            )
            yield item

    def __len__(self) -> int:
        return self._registry.get_counts()["listed_total"]


class Registry:
    """In-memory registry maintaining the id and description indexes.

    Notes:
        - Items are immutable; "changing" one means removing and re-inserting.
        - Mutations and listing snapshots are serialized with a single lock so
          readers never see the two indexes out of step.
    """

    # -----------------------------
    # Lifecycle
    # -----------------------------

    def __init__(self) -> None:
        # Primary store
        self._items_by_id: dict[str, StoredItem] = {}
        # Secondary index: description -> id of the visible item
        self._id_by_description: dict[str, str] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._items_by_id)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items_by_id

    # -----------------------------
    # Public API - mutations
    # -----------------------------

    def insert(self, item: StoredItem) -> StoredItem:
        with self._lock:
            if item.id in self._items_by_id:
                raise DuplicateIdentifierError(item.id)
            shadowed_id = self._id_by_description.get(item.description)
            self._items_by_id[item.id] = item
            self._id_by_description[item.description] = item.id
        LOGGER.debug(
            "Item added: %s - %s",
            item.id,
            item.description,
            extra={
                "domain": DOMAIN,
                "op": "insert",
                "item_id": item.id,
                "shadowed_item_id": shadowed_id,
            },
        )
        return item

    def remove_by_id(self, item_id: str) -> StoredItem:
        with self._lock:
            item = self._items_by_id.get(item_id)
            if item is None:
                raise ItemNotFoundError(item_id)
            del self._items_by_id[item_id]
            # A later insert may own this description slot now; leave it alone
            if self._id_by_description.get(item.description) == item_id:
                del self._id_by_description[item.description]
        LOGGER.debug(
            "Item removed: %s",
            item_id,
            extra={"domain": DOMAIN, "op": "remove_by_id", "item_id": item_id},
        )
        return item

    # -----------------------------
    # Public API - queries
    # -----------------------------

    def find_by_id(self, item_id: str) -> StoredItem:
        item = self._items_by_id.get(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def list_by_description(self) -> DescriptionListing:
        return DescriptionListing(self)

    def get_counts(self) -> dict[str, int]:
        with self._lock:
            items_total = len(self._items_by_id)
            listed_total = len(self._id_by_description)
        return {
            "items_total": items_total,
            "listed_total": listed_total,
            "shadowed_total": items_total - listed_total,
        }

    def check_consistency(self) -> list[str]:
        """Return human-readable issues found between the two indexes."""

        issues: list[str] = []
        with self._lock:
            for description, item_id in self._id_by_description.items():
                item = self._items_by_id.get(item_id)
                if item is None:
                    issues.append(f"description {description!r} references missing id {item_id}")
                elif item.description != description:
                    issues.append(
                        f"description {description!r} references id {item_id} "
                        f"with description {item.description!r}"
                    )
            for item_id, item in self._items_by_id.items():
                if item.id != item_id:
                    issues.append(f"id {item_id} stores item with id {item.id}")
        return issues

    # -----------------------------
    # Internal helpers
    # -----------------------------

    def _snapshot_by_description(self) -> list[StoredItem]:
        with self._lock:
            return [
                self._items_by_id[self._id_by_description[description]]
                for description in sorted(self._id_by_description)
            ]
