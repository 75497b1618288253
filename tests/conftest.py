"""Shared fixtures for offline tests.

Most handlers only touch ``hass.data`` and ``hass.services``, so tests use a small
double for the Home Assistant instance instead of booting a full core. Service dispatch is
exercised against a real core through ``core_hass``. The
WebSocket connection double collects every message sent on it.
"""

from __future__ import annotations

import logging
import types
from typing import Any

import pytest
import pytest_asyncio
from custom_components.stockroom.const import DOMAIN
from custom_components.stockroom.registry import Registry
from homeassistant.components import websocket_api
from homeassistant.core import HomeAssistant


class ServiceRegistryDouble:
    def __init__(self) -> None:
        self.registered: dict[tuple[str, str], tuple[Any, Any]] = {}

    def async_register(self, domain: str, service: str, handler, schema=None) -> None:
        self.registered[(domain, service)] = (handler, schema)

    def async_remove(self, domain: str, service: str) -> None:
        self.registered.pop((domain, service), None)


class ConnCollect:
    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    def send_message(self, msg: dict[str, Any]) -> None:
        self.messages.append(msg)

    @property
    def last(self) -> dict[str, Any] | None:
        return self.messages[-1] if self.messages else None


@pytest.fixture
def hass() -> types.SimpleNamespace:
    return types.SimpleNamespace(data={}, services=ServiceRegistryDouble())


@pytest_asyncio.fixture
async def core_hass(tmp_path):
    """A real Home Assistant core, used where dispatch through the core matters."""
    core = HomeAssistant(str(tmp_path))
    try:
        yield core
    finally:
        await core.async_stop(force=True)


@pytest.fixture
def registry(hass) -> Registry:
    """Registry installed in hass.data the way async_setup_entry does it."""
    reg = Registry()
    hass.data.setdefault(DOMAIN, {})["registry"] = reg
    return reg


@pytest.fixture
def conn() -> ConnCollect:
    return ConnCollect()


@pytest.fixture
def ws_registered(monkeypatch) -> list[Any]:
    """Capture handlers passed to websocket_api.async_register_command."""
    captured: list[Any] = []
    monkeypatch.setattr(
        websocket_api, "async_register_command", lambda _hass, handler: captured.append(handler)
    )
    return captured


@pytest.fixture
def debug_logs(caplog):
    caplog.set_level(logging.DEBUG, logger="custom_components.stockroom")
    return caplog
