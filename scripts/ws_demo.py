r"""Walk through the Stockroom registry scenario over the HA WebSocket API.

Usage:
  export HA_BASE_URL='http://localhost:8123'
  export HA_TOKEN='<your-long-lived-token>'
  python scripts/ws_demo.py

Environment variables:
- HA_BASE_URL: Home Assistant base URL (http/https). Default: http://localhost:8123
- HA_TOKEN: Long-lived access token (required)
- SR_RECV_TIMEOUT: Seconds to wait for each reply. Default: 20

The scenario inserts two items, looks one up, removes an unknown id, retries a
duplicate insert and prints the description-ordered listing. Expected errors
are printed and do not abort the run.
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from itertools import count
from typing import Any

import aiohttp

SAMPLE_ITEMS = [
    {"item_id": "ITEM001", "description": "LED Light", "location": "Aisle 3, Shelf 1"},
    {"item_id": "ITEM002", "description": "Fan Motor", "location": "Aisle 2, Shelf 5"},
]


def _ws_url_from_base(base_url: str) -> str:
    """Convert an HTTP(S) base URL to a WS(S) endpoint."""
    base_url = base_url.rstrip("/")
    if base_url.startswith("https://"):
        return f"wss://{base_url[len('https://') :]}/api/websocket"
    if base_url.startswith("http://"):
        return f"ws://{base_url[len('http://') :]}/api/websocket"
    return f"ws://{base_url}/api/websocket"


class _Client:
    def __init__(self, ws: aiohttp.ClientWebSocketResponse, recv_timeout_s: float) -> None:
        self._ws = ws
        self._ids = count(1)
        self._recv_timeout_s = recv_timeout_s

    async def call(self, type_: str, **payload: Any) -> dict[str, Any]:
        msg_id = next(self._ids)
        await self._ws.send_json({"id": msg_id, "type": type_, **payload})
        while True:
            msg = await asyncio.wait_for(self._ws.receive_json(), timeout=self._recv_timeout_s)
            if isinstance(msg, dict) and msg.get("id") == msg_id and msg.get("type") == "result":
                return msg


def _report(label: str, res: dict[str, Any]) -> None:
    if res.get("success"):
        print(f"{label}: ok")
        return
    err = res.get("error") or {}
    print(f"{label}: error {err.get('code')}: {err.get('message')}", file=sys.stderr)


async def run_demo() -> int:
    base = os.environ.get("HA_BASE_URL", "http://localhost:8123")
    token = os.environ.get("HA_TOKEN")
    recv_timeout_s = float(os.environ.get("SR_RECV_TIMEOUT", "20"))

    if not token:
        print("Missing HA_TOKEN in environment", file=sys.stderr)
        return 2

    async with aiohttp.ClientSession() as session:
        async with session.ws_connect(_ws_url_from_base(base)) as ws:
            try:
                _hello = await asyncio.wait_for(ws.receive_json(), timeout=recv_timeout_s)
                await ws.send_json({"type": "auth", "access_token": token})
                auth = await asyncio.wait_for(ws.receive_json(), timeout=recv_timeout_s)
                if auth.get("type") != "auth_ok":
                    print(f"Authentication failed: {json.dumps(auth)}", file=sys.stderr)
                    return 2

                client = _Client(ws, recv_timeout_s)

                for sample in SAMPLE_ITEMS:
                    res = await client.call("stockroom/item/insert", **sample)
                    _report(f"Insert {sample['item_id']}", res)

                print("\nRetrieving ITEM002...")
                res = await client.call("stockroom/item/get", item_id="ITEM002")
                if res.get("success"):
                    found = res["result"]
                    print(f"Found: {found['description']} at {found['location']}")
                else:
                    _report("Get ITEM002", res)

                print("\nRemoving ITEM999...")
                res = await client.call("stockroom/item/remove", item_id="ITEM999")
                _report("Remove ITEM999", res)

                print("\nTesting duplicate insertion...")
                _report(
                    "Insert ITEM001 again",
                    await client.call("stockroom/item/insert", **SAMPLE_ITEMS[0]),
                )

                print("\nItems in description order:")
                res = await client.call("stockroom/item/list")
                for item in (res.get("result") or {}).get("items", []):
                    print(f"- {item['description']}: {item['location']}")
            except TimeoutError:
                print(f"WebSocket receive timed out after {int(recv_timeout_s)}s", file=sys.stderr)
                return 3

    return 0


def main() -> None:
    try:
        code = asyncio.run(run_demo())
    except KeyboardInterrupt:
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
