"""Stockroom integration bootstrap.

This module initializes the integration and sets up the in-memory registry in
hass.data. Each config entry owns exactly one registry; services and WebSocket
handlers resolve it from hass.data rather than from module-level state.
"""

from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers import config_validation as cv

from . import services as services_mod
from . import ws as ws_mod
from .const import DOMAIN
from .registry import Registry

LOGGER = logging.getLogger(__name__)


# This integration is config-entry only; no YAML configuration is accepted.
CONFIG_SCHEMA = cv.config_entry_only_config_schema(DOMAIN)


async def async_setup(hass: HomeAssistant, _config: dict) -> bool:
    """Set up the Stockroom domain at Home Assistant startup.

    Initializes an empty domain bucket in hass.data with no side effects.
    """
    hass.data.setdefault(DOMAIN, {})
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Stockroom from a config entry."""
    bucket = hass.data.setdefault(DOMAIN, {})
    bucket["registry"] = Registry()

    # Register services
    services_mod.setup(hass)

    # Register WebSocket commands
    ws_mod.setup(hass)

    LOGGER.debug(
        "Stockroom registry ready",
        extra={"domain": DOMAIN, "op": "setup_entry", "entry_id": entry.entry_id},
    )
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry.

    Removes registered services and drops the in-memory registry. WebSocket
    commands stay registered with Home Assistant and report ``not_ready``
    until the entry is set up again.
    """

    bucket = hass.data.get(DOMAIN) or {}

    services_mod.unload(hass)

    registry = bucket.pop("registry", None)
    LOGGER.debug(
        "Stockroom registry dropped",
        extra={
            "domain": DOMAIN,
            "op": "unload_entry",
            "entry_id": entry.entry_id,
            "items_total": len(registry) if registry is not None else 0,
        },
    )
    return True
