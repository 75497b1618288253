"""WebSocket command handlers for Stockroom.

Implements insert/get/remove/list commands for items plus small utility
commands. Adheres to the envelope: input {id, type, ...payload}, output
result_message/error_message.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

import voluptuous as vol
from homeassistant.components import websocket_api
from homeassistant.core import HomeAssistant

from .const import DOMAIN, INTEGRATION_VERSION
from .exceptions import (
    DuplicateIdentifierError,
    ItemNotFoundError,
    RegistryNotReadyError,
    StockroomError,
    ValidationError,
)
from .models import create_item_from_payload, serialize_item, validate_item_id
from .registry import Registry

LOGGER = logging.getLogger(__name__)


def _registry(hass: HomeAssistant) -> Registry:
    bucket = hass.data.get(DOMAIN) or {}
    registry = bucket.get("registry")
    if registry is None:
        raise RegistryNotReadyError("registry not initialized; run integration setup")
    return registry  # type: ignore[return-value]


def _error_code(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "validation_error"
    if isinstance(exc, DuplicateIdentifierError):
        return "duplicate_id"
    if isinstance(exc, ItemNotFoundError):
        return "not_found"
    if isinstance(exc, RegistryNotReadyError):
        return "not_ready"
    return "unknown_error"


def _ctx(op: str, **extra: Any) -> dict[str, Any]:
    """Build a structured logging context for WS operations.

    Ensures the `op` field is always present and merges any additional fields.
    """
    base: dict[str, Any] = {"op": op}
    if extra:
        base.update(extra)
    return base


def _error_message(_id: int, exc: Exception, *, context: dict[str, Any]) -> dict[str, Any]:
    level = logging.ERROR if isinstance(exc, RegistryNotReadyError) else logging.WARNING
    LOGGER.log(level, str(exc), extra={"domain": DOMAIN, **context})
    return websocket_api.error_message(_id, _error_code(exc), str(exc))


# -----------------------------
# Unified exception handling for WS handlers
# -----------------------------

_WSHandler = Callable[[HomeAssistant, Any, dict], Awaitable[Any]]


def ws_guard(op: str, context_fields: tuple[str, ...] = ()) -> Callable[[_WSHandler], _WSHandler]:
    """Decorator to map domain exceptions to unified WS error envelopes.

    Builds a structured log context from selected fields in the incoming
    message and sends a Home Assistant websocket error message on the
    connection.
    """

    def decorator(func: _WSHandler) -> _WSHandler:
        @functools.wraps(func)
        async def wrapper(hass: HomeAssistant, conn, msg):  # type: ignore[override]
            try:
                return await func(hass, conn, msg)
            except StockroomError as exc:
                ctx = _ctx(op, **{f"msg_{f}": msg.get(f) for f in context_fields if f in msg})
                conn.send_message(_error_message(msg.get("id", 0), exc, context=ctx))
                return None

        return wrapper

    return decorator


def _now_ts() -> str:
    return datetime.now(tz=UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")


# -----------------------------
# Utility commands
# -----------------------------


@websocket_api.websocket_command(
    {vol.Required("type"): "stockroom/ping", vol.Optional("echo"): object}
)
@websocket_api.async_response
async def ws_ping(hass: HomeAssistant, conn, msg):
    result = {"echo": msg.get("echo"), "ts": _now_ts()}
    conn.send_message(websocket_api.result_message(msg.get("id", 0), result))


@websocket_api.websocket_command({vol.Required("type"): "stockroom/version"})
@websocket_api.async_response
async def ws_version(hass: HomeAssistant, conn, msg):
    result = {"integration_version": INTEGRATION_VERSION}
    conn.send_message(websocket_api.result_message(msg.get("id", 0), result))


@websocket_api.websocket_command({vol.Required("type"): "stockroom/stats"})
@websocket_api.async_response
@ws_guard("stats")
async def ws_stats(hass: HomeAssistant, conn, msg):
    counts = _registry(hass).get_counts()
    conn.send_message(websocket_api.result_message(msg.get("id", 0), counts))


@websocket_api.websocket_command({vol.Required("type"): "stockroom/health"})
@websocket_api.async_response
@ws_guard("health")
async def ws_health(hass: HomeAssistant, conn, msg):
    registry = _registry(hass)
    issues = registry.check_consistency()
    if issues:
        LOGGER.warning(
            "Registry index issues detected: %s",
            len(issues),
            extra={"domain": DOMAIN, "op": "health", "issues_count": len(issues)},
        )
    result = {"healthy": not issues, "issues": issues, "counts": registry.get_counts()}
    conn.send_message(websocket_api.result_message(msg.get("id", 0), result))


# -----------------------------
# Items
# -----------------------------


@websocket_api.websocket_command(
    {
        vol.Required("type"): "stockroom/item/insert",
        vol.Required("item_id"): object,
        vol.Required("description"): object,
        vol.Optional("location"): object,
    }
)
@websocket_api.async_response
@ws_guard("item_insert", ("item_id", "description"))
async def ws_item_insert(hass: HomeAssistant, conn, msg):
    payload = {"id": msg.get("item_id"), "description": msg.get("description")}
    if "location" in msg:
        payload["location"] = msg.get("location")
    item = _registry(hass).insert(create_item_from_payload(payload))  # type: ignore[arg-type]
    conn.send_message(websocket_api.result_message(msg.get("id", 0), serialize_item(item)))


@websocket_api.websocket_command(
    {vol.Required("type"): "stockroom/item/get", vol.Required("item_id"): str}
)
@websocket_api.async_response
@ws_guard("item_get", ("item_id",))
async def ws_item_get(hass: HomeAssistant, conn, msg):
    item = _registry(hass).find_by_id(validate_item_id(msg.get("item_id")))
    conn.send_message(websocket_api.result_message(msg.get("id", 0), serialize_item(item)))


@websocket_api.websocket_command(
    {vol.Required("type"): "stockroom/item/remove", vol.Required("item_id"): str}
)
@websocket_api.async_response
@ws_guard("item_remove", ("item_id",))
async def ws_item_remove(hass: HomeAssistant, conn, msg):
    removed = _registry(hass).remove_by_id(validate_item_id(msg.get("item_id")))
    conn.send_message(websocket_api.result_message(msg.get("id", 0), serialize_item(removed)))


@websocket_api.websocket_command({vol.Required("type"): "stockroom/item/list"})
@websocket_api.async_response
@ws_guard("item_list")
async def ws_item_list(hass: HomeAssistant, conn, msg):
    items = [serialize_item(item) for item in _registry(hass).list_by_description()]
    conn.send_message(websocket_api.result_message(msg.get("id", 0), {"items": items}))


# -----------------------------
# Registration
# -----------------------------

HANDLERS = (
    ws_ping,
    ws_version,
    ws_stats,
    ws_health,
    ws_item_insert,
    ws_item_get,
    ws_item_remove,
    ws_item_list,
)


def setup(hass: HomeAssistant) -> None:
    # Idempotent: avoid duplicate registration across reloads
    bucket = hass.data.setdefault(DOMAIN, {})
    if bucket.get("ws_registered"):
        return

    for handler in HANDLERS:
        websocket_api.async_register_command(hass, handler)

    bucket["ws_registered"] = True
