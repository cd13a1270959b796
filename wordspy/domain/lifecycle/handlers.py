# wordspy/domain/lifecycle/handlers.py
from __future__ import annotations

from typing import List, Optional, Tuple

from loguru import logger

from wordspy.domain.common.validation import is_current_speaker
from wordspy.domain.session.flow import advance_speaker
from wordspy.store.models import PublicPlayer
from wordspy.store.registry import to_public_view
from wordspy.transport.protocols import (
    InCreateRoom,
    InJoinRoom,
    InLeaveRoom,
    InSnapshot,
    OutgoingEvent,
    OutPlayerJoined,
    OutPlayerLeft,
    OutRoomCreated,
    OutRoomJoined,
    OutRoomSnapshot,
    error,
)

# Returns: (room_code, to_sender, to_room)
Result = Tuple[Optional[str], List[OutgoingEvent], List[OutgoingEvent]]


async def handle_create_room(*, app, pid: Optional[str], msg: InCreateRoom) -> Result:
    if not pid:
        return None, [error("NO_PID", "Missing pid for this connection")], []

    registry = app.state.registry
    current = registry.get_room_by_player(pid)
    if current is not None:
        return None, [error("ALREADY_IN_ROOM", f"Already in room {current.id}")], []

    room = registry.create_room(pid, msg.player_name)
    await app.state.wsman.join(room.id, pid)
    logger.info("Room {} created by {} ({})", room.id, msg.player_name, pid)

    return room.id, [OutRoomCreated(room_code=room.id), OutRoomJoined(room=to_public_view(room), player_id=pid)], []


async def handle_join_room(*, app, pid: Optional[str], msg: InJoinRoom) -> Result:
    """
    Join:
    - room must exist, be in the lobby and have a free seat
    - unicast the public room view to the joiner
    - broadcast player_joined to everyone else
    """
    if not pid:
        return None, [error("NO_PID", "Missing pid for this connection")], []

    registry = app.state.registry
    current = registry.get_room_by_player(pid)
    if current is not None:
        return None, [error("ALREADY_IN_ROOM", f"Already in room {current.id}")], []

    room = registry.join_room(msg.room_code, pid, msg.player_name)
    if room is None:
        return None, [error("ROOM_NOT_FOUND", "Room not found or game in progress")], []

    await app.state.wsman.join(room.id, pid)
    logger.info("{} ({}) joined room {}", msg.player_name, pid, room.id)

    p = room.players[pid]
    joined = PublicPlayer(id=p.id, name=p.name, is_host=p.is_host, is_alive=p.is_alive, has_voted=p.has_voted)
    return room.id, [OutRoomJoined(room=to_public_view(room), player_id=pid)], [OutPlayerJoined(player=joined)]


async def handle_snapshot(*, app, pid: Optional[str], msg: InSnapshot) -> Result:
    room = app.state.registry.get_room_by_player(pid) if pid else None
    if room is None:
        return None, [error("NOT_IN_ROOM", "Not in a room")], []
    return room.id, [OutRoomSnapshot(room=to_public_view(room))], []


async def handle_leave_room(*, app, pid: Optional[str], msg: InLeaveRoom) -> Result:
    return await _leave(app, pid)


async def handle_disconnect(*, app, pid: Optional[str]) -> Result:
    """
    Called by transport when the socket goes away. Same as an explicit leave:
    there is no resume, the seat is gone.
    """
    return await _leave(app, pid)


async def _leave(app, pid: Optional[str]) -> Result:
    if not pid:
        return None, [], []

    registry = app.state.registry
    current = registry.get_room_by_player(pid)
    if current is None:
        return None, [], []

    code = current.id
    was_speaker = is_current_speaker(current, pid)
    room, was_host = registry.leave_room(pid)
    await app.state.wsman.leave(code, pid)

    if room is None:
        logger.info("Room {} closed (last player {} left)", code, pid)
        return code, [], []

    new_host_id = room.host_id if was_host else None
    if new_host_id:
        logger.info("{} left room {}; new host {}", pid, code, new_host_id)
    else:
        logger.info("{} left room {}", pid, code)
    events: List[OutgoingEvent] = [OutPlayerLeft(player_id=pid, new_host_id=new_host_id)]
    if was_speaker:
        # the floor passes on now instead of at the deadline
        events += advance_speaker(app, room)
    return code, [], events
