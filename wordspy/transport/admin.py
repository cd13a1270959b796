from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from loguru import logger

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/rooms")
async def list_rooms(request: Request):
    """
    List all live rooms (debug/admin).
    """
    registry = request.app.state.registry
    wsman = request.app.state.wsman

    rooms = []
    for room in registry.list_rooms():
        rooms.append(
            {
                "room_code": room.id,
                "phase": room.state.phase,
                "mode": room.settings.mode,
                "round": room.state.round,
                "host_id": room.host_id,
                "players": len(room.players),
                "connected": await wsman.room_size(room.id),
                "created_at": room.created_at,
            }
        )

    return {"rooms": rooms}


@router.post("/rooms/{room_code}/close")
async def close_room(room_code: str, request: Request):
    """
    Force close a room (debug/admin). Drops it from the registry and closes its websockets.
    """
    app = request.app
    async with app.state.lock:
        if app.state.registry.get_room(room_code) is None:
            raise HTTPException(status_code=404, detail="Room not found")
        pids = app.state.registry.close_room(room_code)

    for pid in pids:
        await app.state.wsman.close_pid(pid, code=4000)

    logger.info("Room {} closed by admin ({} players)", room_code, len(pids))
    return {"ok": True, "room_code": room_code}
