# wordspy/transport/dispatcher.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from wordspy.transport.protocols import (
    parse_incoming,
    dump_events,
    error,
    InCreateRoom,
    InJoinRoom,
    InLeaveRoom,
    InSnapshot,
    InStartGame,
    InEndSpeaking,
    InCastVote,
    InPlayAgain,
)
from wordspy.domain.lifecycle.handlers import (
    handle_create_room,
    handle_join_room,
    handle_leave_room,
    handle_snapshot,
)
from wordspy.domain.session.handlers import (
    handle_start_game,
    handle_end_speaking,
    handle_cast_vote,
    handle_play_again,
)

DispatchResult = Tuple[Optional[str], List[Dict[str, Any]], List[Dict[str, Any]]]
# (room_code, to_sender_events, to_room_events), each event is JSON dict


async def dispatch_message(
    *,
    app,
    pid: Optional[str],
    raw: Dict[str, Any],
) -> DispatchResult:
    """
    Transport layer calls this (holding app.state.lock).
    - Parses + validates raw JSON
    - Routes to the correct domain handler
    - Returns (room_code, to_sender, to_room) events as JSON dicts

    Nothing raised by a handler escapes: failures become a room_error to the sender.
    """
    try:
        msg = parse_incoming(raw)
    except ValueError as e:
        return None, [error("BAD_MESSAGE", str(e)).model_dump()], []

    try:
        # ---- Lifecycle ----
        if isinstance(msg, InCreateRoom):
            code, to_sender, to_room = await handle_create_room(app=app, pid=pid, msg=msg)
        elif isinstance(msg, InJoinRoom):
            code, to_sender, to_room = await handle_join_room(app=app, pid=pid, msg=msg)
        elif isinstance(msg, InLeaveRoom):
            code, to_sender, to_room = await handle_leave_room(app=app, pid=pid, msg=msg)
        elif isinstance(msg, InSnapshot):
            code, to_sender, to_room = await handle_snapshot(app=app, pid=pid, msg=msg)
        # ---- Game ----
        elif isinstance(msg, InStartGame):
            code, to_sender, to_room = await handle_start_game(app=app, pid=pid, msg=msg)
        elif isinstance(msg, InEndSpeaking):
            code, to_sender, to_room = await handle_end_speaking(app=app, pid=pid, msg=msg)
        elif isinstance(msg, InCastVote):
            code, to_sender, to_room = await handle_cast_vote(app=app, pid=pid, msg=msg)
        elif isinstance(msg, InPlayAgain):
            code, to_sender, to_room = await handle_play_again(app=app, pid=pid, msg=msg)
        else:
            return None, [error("NOT_IMPLEMENTED", f"Handler not implemented for type={msg.type}").model_dump()], []
    except Exception:
        logger.exception("Handler for {} from {} failed", msg.type, pid)
        return None, [error("INTERNAL", "Internal error").model_dump()], []

    return code, dump_events(to_sender), dump_events(to_room)
