# wordspy/transport/ws.py
from __future__ import annotations

import ipaddress
import json
import uuid
from urllib.parse import urlparse

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from loguru import logger

from wordspy.settings import get_settings
from wordspy.domain.lifecycle.handlers import handle_disconnect
from wordspy.transport.dispatcher import dispatch_message
from wordspy.transport.protocols import OutHello, dump_events, error

router = APIRouter()

LAN_DEV_PORT = 3000


def _is_private_ip(host: str) -> bool:
    """Return True if host is a private IP (192.168.x.x, 10.x.x.x, 172.16-31.x.x)."""
    try:
        ip = ipaddress.ip_address(host)
        return ip.is_private
    except ValueError:
        return False


async def _check_origin_or_close(websocket: WebSocket) -> bool:
    settings = get_settings()
    allowed = {o.strip() for o in settings.WS_ALLOWED_ORIGINS.split(",") if o.strip()}

    origin = websocket.headers.get("origin")
    if origin is None or origin in allowed:
        return True
    if settings.WS_ALLOW_LAN_ORIGINS:
        o = urlparse(origin)
        if _is_private_ip(o.hostname or "") and o.port == LAN_DEV_PORT:
            return True
    logger.warning("Rejected websocket from origin {}", origin)
    await websocket.close(code=1008)
    return False


@router.websocket("/ws")
async def ws_session(websocket: WebSocket):
    if not await _check_origin_or_close(websocket):
        return

    await websocket.accept()

    app = websocket.app
    pid = uuid.uuid4().hex[:10]
    wsman = app.state.wsman
    await wsman.connect(pid, websocket)
    await websocket.send_json(OutHello(pid=pid).model_dump())
    logger.debug("Connected: {}", pid)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))

            text = message.get("text")
            try:
                if text is None:
                    raise ValueError("binary frame")
                raw = json.loads(text)
            except ValueError:
                # JSONDecodeError is a ValueError
                await wsman.send_to_pid(pid, error("BAD_MESSAGE", "Frames must be JSON text").model_dump())
                continue

            async with app.state.lock:
                room_code, to_sender, to_room = await dispatch_message(app=app, pid=pid, raw=raw)

                # unicast; a dead sender socket must not block the room delivery
                for e in to_sender:
                    await wsman.send_to_pid(pid, e)

                # room (exclude sender; targeted events go to their targets)
                await wsman.deliver(room_code, to_room, exclude_pid=pid)

    except WebSocketDisconnect:
        logger.debug("Disconnected: {}", pid)

    finally:
        # any exit from the loop frees the seat
        async with app.state.lock:
            room_code, _, to_room = await handle_disconnect(app=app, pid=pid)
            await wsman.deliver(room_code, dump_events(to_room), exclude_pid=pid)
        await wsman.disconnect(pid)
