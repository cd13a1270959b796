# wordspy/domain/common/validation.py
from __future__ import annotations

from typing import Optional

from wordspy.domain.game.engine import current_speaker_id
from wordspy.store.models import Player, Room


def is_host(room: Optional[Room], pid: Optional[str]) -> bool:
    """Check if pid is the room's host."""
    return room is not None and pid is not None and room.host_id == pid


def is_current_speaker(room: Optional[Room], pid: Optional[str]) -> bool:
    """Check if pid holds the floor in a speaking phase."""
    if room is None or pid is None or room.state.phase != "speaking":
        return False
    return current_speaker_id(room) == pid


def is_alive(player: Optional[Player]) -> bool:
    return player is not None and player.is_alive


def in_phase(room: Optional[Room], *phases: str) -> bool:
    return room is not None and room.state.phase in phases
