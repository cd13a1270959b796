# wordspy/domain/session/flow.py
"""
Phase progression shared by client actions and timers.

Every step mutates the room and returns the events to broadcast; timer-driven
steps are delivered here, action-driven ones by the transport.
"""
from __future__ import annotations

from typing import Any, Callable, List

from loguru import logger

from wordspy.domain.game.engine import (
    check_win_condition,
    current_speaker_id,
    eliminate_player,
    next_speaker,
    start_speaking_phase,
    start_voting_phase,
)
from wordspy.domain.game.roles import get_all_roles
from wordspy.domain.game.voting import tally_votes
from wordspy.domain.session.timers import Fingerprint
from wordspy.store.models import Room
from wordspy.transport.protocols import (
    OutBase,
    OutElimination,
    OutGameOver,
    OutPhaseChanged,
    OutSpeakerChanged,
    dump_events,
)
from wordspy.util.timeutil import now_ms

Events = List[OutBase]
Step = Callable[[Any, Room], Events]


# -------------------------
# Timer plumbing
# -------------------------

def schedule_step(app, room: Room, delay_ms: int, step: Step) -> None:
    expected = Fingerprint.of(room)

    async def _fire() -> None:
        await run_if_current(app, room, expected, step)

    app.state.timers.schedule(delay_ms, _fire)


async def run_if_current(app, room: Room, expected: Fingerprint, step: Step) -> Events:
    """
    Run a deferred step only if the room is still live and unchanged since the
    step was scheduled; otherwise it is a silent no-op.
    """
    async with app.state.lock:
        if app.state.registry.get_room(room.id) is not room:
            logger.debug("Timer for closed room {} ignored", room.id)
            return []
        current = Fingerprint.of(room)
        if current != expected:
            logger.debug("Stale timer in room {}: expected {}, now {}", room.id, expected, current)
            return []

        events = step(app, room)
        await app.state.wsman.deliver(room.id, dump_events(events))
        return events


# -------------------------
# Steps
# -------------------------

def schedule_reveal(app, room: Room) -> None:
    schedule_step(app, room, app.state.settings.ROLE_REVEAL_DELAY_MS, begin_speaking_round)


def begin_speaking_round(app, room: Room) -> Events:
    start_speaking_phase(room)
    logger.info("Room {} round {}: speaking order {}", room.id, room.state.round, room.state.speaking_order)
    phase = OutPhaseChanged(phase="speaking", speaking_order=list(room.state.speaking_order))
    return [phase] + open_speaker_turn(app, room)


def open_speaker_turn(app, room: Room) -> Events:
    speaker_id = current_speaker_id(room)
    if speaker_id is None:
        logger.warning("Room {} has no speaker at index {}", room.id, room.state.current_speaker_index)
        return []

    budget_ms = int(room.settings.speaking_time_seconds * 1000)
    room.state.speaking_end_time = now_ms() + budget_ms
    schedule_step(app, room, budget_ms, advance_speaker)
    return [OutSpeakerChanged(speaker_id=speaker_id, end_time=room.state.speaking_end_time)]


def advance_speaker(app, room: Room) -> Events:
    done, speaker = next_speaker(room)
    while not done and speaker is None:
        # seat left mid-round
        done, speaker = next_speaker(room)
    if not done:
        return open_speaker_turn(app, room)

    room.state.speaking_end_time = None
    start_voting_phase(room)
    return [OutPhaseChanged(phase="voting")]


def next_round(app, room: Room) -> Events:
    room.state.round += 1
    return begin_speaking_round(app, room)


def resolve_votes(app, room: Room) -> Events:
    eliminated_id, tie = tally_votes(room)
    if tie or eliminated_id is None:
        logger.info("Room {} round {}: tie, no elimination", room.id, room.state.round)
        return next_round(app, room)

    eliminated = eliminate_player(room, eliminated_id)
    if eliminated is None:
        # target left the room after being voted for
        logger.info("Room {}: voted-out player {} already gone", room.id, eliminated_id)
        return next_round(app, room)

    logger.info("Room {}: eliminated {} ({})", room.id, eliminated.name, eliminated.role)
    events: Events = [
        OutElimination(player_id=eliminated.id, role=eliminated.role, player_name=eliminated.name),
    ]

    game_over, winner = check_win_condition(room)
    if game_over:
        logger.info("Room {}: game over, {} win", room.id, winner)
        events.append(OutGameOver(winner=winner, roles=get_all_roles(room)))
        return events

    schedule_step(app, room, app.state.settings.ELIMINATION_PAUSE_MS, next_round)
    return events
