"""WebSocket live feed.

A new connection receives exactly one full snapshot. After that the server
only answers client commands and sends heartbeats while idle; generations
are pulled by the client through POST /api/next, never pushed.
"""

from __future__ import annotations

import asyncio
import json
import logging

import orjson
from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status
from starlette.concurrency import run_in_threadpool

from backend.security import WebSocketLimiter, get_client_ip
from core.grid import GridEngine

logger = logging.getLogger(__name__)


def _dumps(message: dict) -> str:
    return orjson.dumps(message).decode("utf-8")


async def _send_snapshot(websocket: WebSocket, grid_engine: GridEngine) -> None:
    # The engine lock is held only while the snapshot is copied
    snapshot = await run_in_threadpool(grid_engine.snapshot)
    await websocket.send_text(_dumps({"type": "snapshot", "grid": snapshot.to_dict()}))


async def _handle_command(websocket: WebSocket, grid_engine: GridEngine, raw_text: str) -> None:
    try:
        payload = json.loads(raw_text)
    except json.JSONDecodeError:
        await websocket.send_text(_dumps({"type": "error", "error": "Invalid JSON payload."}))
        return

    command = payload.get("command") if isinstance(payload, dict) else None
    if command == "ping":
        await websocket.send_text(_dumps({"type": "pong"}))
    elif command == "snapshot":
        await _send_snapshot(websocket, grid_engine)
    else:
        await websocket.send_text(
            _dumps({"type": "error", "error": f"Unknown command: {command!r}"})
        )


async def _handle_websocket(
    websocket: WebSocket,
    grid_engine: GridEngine,
    limiter: WebSocketLimiter,
    heartbeat_seconds: float,
    trusted_proxies: frozenset,
) -> None:
    client_ip = get_client_ip(websocket.headers, websocket.client, trusted_proxies)
    limiter_connected = False

    try:
        await websocket.accept()

        if not limiter.connect(client_ip):
            await websocket.send_text(
                _dumps({"type": "error", "error": "Too many WebSocket connections from this IP."})
            )
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return

        limiter_connected = True
        logger.info("WebSocket client connected: %s", client_ip)

        await _send_snapshot(websocket, grid_engine)

        while True:
            try:
                message = await asyncio.wait_for(websocket.receive(), timeout=heartbeat_seconds)
            except asyncio.TimeoutError:
                await websocket.send_text(_dumps({"type": "heartbeat"}))
                continue
            except WebSocketDisconnect:
                break

            if message["type"] == "websocket.disconnect":
                break
            if message["type"] != "websocket.receive":
                continue

            raw_text = message.get("text")
            if raw_text is None and message.get("bytes"):
                try:
                    raw_text = message["bytes"].decode("utf-8")
                except UnicodeDecodeError:
                    await websocket.send_text(
                        _dumps({"type": "error", "error": "Invalid message encoding."})
                    )
                    continue

            if not raw_text:
                continue

            await _handle_command(websocket, grid_engine, raw_text)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WebSocket error for client %s", client_ip)
    finally:
        if limiter_connected:
            limiter.disconnect(client_ip)
            logger.info("WebSocket client disconnected: %s", client_ip)


def setup_router(
    grid_engine: GridEngine,
    limiter: WebSocketLimiter,
    heartbeat_seconds: float,
    trusted_proxies: frozenset = frozenset(),
) -> APIRouter:
    """Create the websocket router bound to the grid engine."""
    router = APIRouter()

    @router.websocket("/ws")
    async def websocket_feed(websocket: WebSocket) -> None:
        await _handle_websocket(
            websocket, grid_engine, limiter, heartbeat_seconds, trusted_proxies
        )

    return router
