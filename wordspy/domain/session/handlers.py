# wordspy/domain/session/handlers.py
from __future__ import annotations

from typing import List, Optional, Tuple

from loguru import logger

from wordspy.domain.common.validation import in_phase, is_current_speaker, is_host
from wordspy.domain.game.engine import reset_to_lobby, start_game
from wordspy.domain.game.roles import get_role_reveal_data
from wordspy.domain.game.voting import all_votes_cast, cast_vote
from wordspy.domain.session.flow import advance_speaker, resolve_votes, schedule_reveal
from wordspy.transport.protocols import (
    InCastVote,
    InEndSpeaking,
    InPlayAgain,
    InStartGame,
    OutGameStarted,
    OutPhaseChanged,
    OutVoteReceived,
    error,
    targeted,
)

Outgoing = List[object]
# (room_code, to_sender, to_room); to_room excludes the sender unless targeted
Result = Tuple[Optional[str], Outgoing, Outgoing]


def _room_of(app, pid: Optional[str]):
    return app.state.registry.get_room_by_player(pid) if pid else None


async def handle_start_game(*, app, pid: Optional[str], msg: InStartGame) -> Result:
    room = _room_of(app, pid)
    if room is None:
        return None, [error("NOT_IN_ROOM", "Not in a room")], []
    if not is_host(room, pid):
        return None, [error("NOT_HOST", "Only the host can start the game")], []
    if not in_phase(room, "lobby"):
        return None, [error("BAD_PHASE", f"Cannot start a game in phase {room.state.phase}")], []

    if not start_game(room, msg.mode, app.state.words):
        return None, [error("NOT_ENOUGH_PLAYERS", f"Need at least {room.settings.min_players} players")], []

    logger.info("Room {} game {} started: mode={} players={}", room.id, room.game_no, msg.mode, len(room.players))

    phase = OutPhaseChanged(phase="role_reveal", speaking_order=list(room.state.speaking_order))
    reveal = get_role_reveal_data(room)

    to_sender: Outgoing = []
    to_room: Outgoing = []
    for player_id, info in reveal.items():
        started = OutGameStarted(role=info.role, word=info.word)
        if player_id == pid:
            to_sender.append(started)
        else:
            to_room.append(targeted(started, [player_id]))
    to_sender.append(phase)
    to_room.append(phase)

    schedule_reveal(app, room)
    return room.id, to_sender, to_room


async def handle_end_speaking(*, app, pid: Optional[str], msg: InEndSpeaking) -> Result:
    room = _room_of(app, pid)
    if room is None:
        return None, [error("NOT_IN_ROOM", "Not in a room")], []
    if not in_phase(room, "speaking"):
        return None, [error("BAD_PHASE", "end_speaking only allowed in speaking phase")], []
    if not is_current_speaker(room, pid):
        return None, [error("NOT_YOUR_TURN", "Only the current speaker can end the turn")], []

    events = advance_speaker(app, room)
    return room.id, list(events), events


async def handle_cast_vote(*, app, pid: Optional[str], msg: InCastVote) -> Result:
    room = _room_of(app, pid)
    if room is None:
        return None, [error("NOT_IN_ROOM", "Not in a room")], []
    if not in_phase(room, "voting"):
        return None, [error("BAD_PHASE", "Votes only allowed in voting phase")], []
    if msg.target_id not in room.players:
        return None, [error("UNKNOWN_TARGET", "No such player in this room")], []

    if not cast_vote(room, pid, msg.target_id):
        return None, [error("VOTE_REJECTED", "Vote not accepted")], []

    # who voted is public, who they voted for is not
    events: Outgoing = [OutVoteReceived(voter_id=pid)]
    if all_votes_cast(room):
        events += resolve_votes(app, room)
    return room.id, list(events), events


async def handle_play_again(*, app, pid: Optional[str], msg: InPlayAgain) -> Result:
    room = _room_of(app, pid)
    if room is None:
        return None, [error("NOT_IN_ROOM", "Not in a room")], []
    if not is_host(room, pid):
        return None, [error("NOT_HOST", "Only the host can restart")], []

    reset_to_lobby(room)
    logger.info("Room {} back to lobby", room.id)

    events = [OutPhaseChanged(phase="lobby")]
    return room.id, list(events), events
