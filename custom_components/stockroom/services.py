"""Service registration and handlers for Stockroom.

Exposes Home Assistant services under the ``stockroom`` domain to insert and
remove items. Input is validated with voluptuous and operations are delegated
to the in-memory ``Registry``.

Errors from the domain layer (validation, duplicate id, not found) are logged
with contextual fields and do not raise stack traces.
"""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall

from .const import DOMAIN
from .exceptions import RegistryNotReadyError, StockroomError
from .models import create_item_from_payload, validate_item_id
from .registry import Registry

LOGGER = logging.getLogger(__name__)


# -----------------------------
# Validation schemas
# -----------------------------

SCHEMA_ITEM_INSERT = vol.Schema(
    {
        vol.Required("id"): str,
        vol.Required("description"): str,
        vol.Optional("location", default=""): str,
    }
)

SCHEMA_ITEM_REMOVE = vol.Schema({vol.Required("id"): str})


# -----------------------------
# Internal helpers
# -----------------------------


def _get_registry(hass: HomeAssistant) -> Registry:
    bucket = hass.data.get(DOMAIN) or {}
    registry = bucket.get("registry")
    if registry is None:
        raise RegistryNotReadyError("registry not initialized; run integration setup")
    return registry  # type: ignore[return-value]


def _log_domain_error(op: str, context: dict[str, Any], exc: Exception) -> None:
    LOGGER.warning(str(exc), extra={"domain": DOMAIN, "op": op, **context})


# -----------------------------
# Service handlers (exported for tests)
# -----------------------------


async def service_item_insert(hass: HomeAssistant, data: dict) -> None:
    op = "item_insert"
    try:
        payload = SCHEMA_ITEM_INSERT(data)
        item = _get_registry(hass).insert(create_item_from_payload(payload))
        LOGGER.debug(
            "Service item_insert stored item",
            extra={"domain": DOMAIN, "op": op, "item_id": item.id},
        )
    except (vol.Invalid, StockroomError) as exc:
        _log_domain_error(op, {"item_id": data.get("id")}, exc)
    except Exception:  # pragma: no cover - defensive
        LOGGER.error("Unhandled service error", exc_info=True, extra={"domain": DOMAIN, "op": op})


async def service_item_remove(hass: HomeAssistant, data: dict) -> None:
    op = "item_remove"
    try:
        payload = SCHEMA_ITEM_REMOVE(data)
        _get_registry(hass).remove_by_id(validate_item_id(payload["id"]))
    except (vol.Invalid, StockroomError) as exc:
        _log_domain_error(op, {"item_id": data.get("id")}, exc)
    except Exception:  # pragma: no cover - defensive
        LOGGER.error("Unhandled service error", exc_info=True, extra={"domain": DOMAIN, "op": op})


# -----------------------------
# Registration
# -----------------------------


def setup(hass: HomeAssistant) -> None:
    """Register stockroom.* services on Home Assistant."""

    # Idempotent: avoid duplicate registration across reloads
    bucket = hass.data.setdefault(DOMAIN, {})
    if bucket.get("services_registered"):
        return

    # Handlers must be coroutine functions so the core awaits them on the loop
    async def _handle_item_insert(call: ServiceCall) -> None:
        await service_item_insert(hass, dict(call.data))

    async def _handle_item_remove(call: ServiceCall) -> None:
        await service_item_remove(hass, dict(call.data))

    # Home Assistant will validate inputs according to these schemas before
    # invoking the handler. Handlers are exported above for testability.
    hass.services.async_register(DOMAIN, "item_insert", _handle_item_insert, SCHEMA_ITEM_INSERT)
    hass.services.async_register(DOMAIN, "item_remove", _handle_item_remove, SCHEMA_ITEM_REMOVE)

    bucket["services_registered"] = True


def unload(hass: HomeAssistant) -> None:
    """Remove stockroom.* services registered by ``setup``."""

    bucket = hass.data.get(DOMAIN) or {}
    if not bucket.pop("services_registered", None):
        return
    for service in ("item_insert", "item_remove"):
        hass.services.async_remove(DOMAIN, service)
