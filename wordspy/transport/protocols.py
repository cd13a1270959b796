# wordspy/transport/protocols.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Literal, Optional, Union
from pydantic import BaseModel, Field

from wordspy.domain.common.types import Mode, Phase, Role, Winner
from wordspy.store.models import PublicPlayer, PublicRoom, RoleInfo


# =========================
# Incoming (Client -> Server)
# =========================

class InBase(BaseModel):
    type: str


class InCreateRoom(InBase):
    type: Literal["create_room"] = "create_room"
    player_name: str = Field(min_length=1, max_length=24)


class InJoinRoom(InBase):
    type: Literal["join_room"] = "join_room"
    room_code: str = Field(min_length=1, max_length=12)
    player_name: str = Field(min_length=1, max_length=24)


class InLeaveRoom(InBase):
    type: Literal["leave_room"] = "leave_room"


class InSnapshot(InBase):
    type: Literal["snapshot"] = "snapshot"


class InStartGame(InBase):
    type: Literal["start_game"] = "start_game"
    mode: Mode


class InEndSpeaking(InBase):
    type: Literal["end_speaking"] = "end_speaking"


class InCastVote(InBase):
    type: Literal["cast_vote"] = "cast_vote"
    target_id: str = Field(min_length=1, max_length=64)


class InPlayAgain(InBase):
    type: Literal["play_again"] = "play_again"


IncomingMessage = Union[
    InCreateRoom,
    InJoinRoom,
    InLeaveRoom,
    InSnapshot,
    InStartGame,
    InEndSpeaking,
    InCastVote,
    InPlayAgain,
]


# =========================
# Outgoing (Server -> Client)
# =========================

class OutBase(BaseModel):
    type: str


class OutHello(OutBase):
    type: Literal["hello"] = "hello"
    pid: str


class OutRoomError(OutBase):
    type: Literal["room_error"] = "room_error"
    code: str
    message: str


class OutRoomCreated(OutBase):
    type: Literal["room_created"] = "room_created"
    room_code: str


class OutRoomJoined(OutBase):
    type: Literal["room_joined"] = "room_joined"
    room: PublicRoom
    player_id: str


class OutRoomSnapshot(OutBase):
    type: Literal["room_snapshot"] = "room_snapshot"
    room: PublicRoom


class OutPlayerJoined(OutBase):
    type: Literal["player_joined"] = "player_joined"
    player: PublicPlayer


class OutPlayerLeft(OutBase):
    type: Literal["player_left"] = "player_left"
    player_id: str
    new_host_id: Optional[str] = None


class OutGameStarted(OutBase):
    """Private: only ever sent to the player it describes."""
    type: Literal["game_started"] = "game_started"
    role: Role
    word: Optional[str] = None


class OutPhaseChanged(OutBase):
    type: Literal["phase_changed"] = "phase_changed"
    phase: Phase
    speaking_order: Optional[List[str]] = None


class OutSpeakerChanged(OutBase):
    type: Literal["speaker_changed"] = "speaker_changed"
    speaker_id: str
    end_time: int  # epoch ms


class OutVoteReceived(OutBase):
    type: Literal["vote_received"] = "vote_received"
    voter_id: str


class OutElimination(OutBase):
    type: Literal["elimination"] = "elimination"
    player_id: str
    role: Role
    player_name: str


class OutGameOver(OutBase):
    type: Literal["game_over"] = "game_over"
    winner: Winner
    roles: Dict[str, RoleInfo]


OutgoingEvent = Union[
    OutHello,
    OutRoomError,
    OutRoomCreated,
    OutRoomJoined,
    OutRoomSnapshot,
    OutPlayerJoined,
    OutPlayerLeft,
    OutGameStarted,
    OutPhaseChanged,
    OutSpeakerChanged,
    OutVoteReceived,
    OutElimination,
    OutGameOver,
]


# =========================
# Parser / serialization helpers
# =========================

_INCOMING_BY_TYPE = {
    "create_room": InCreateRoom,
    "join_room": InJoinRoom,
    "leave_room": InLeaveRoom,
    "snapshot": InSnapshot,
    "start_game": InStartGame,
    "end_speaking": InEndSpeaking,
    "cast_vote": InCastVote,
    "play_again": InPlayAgain,
}


def parse_incoming(payload: Dict[str, Any]) -> IncomingMessage:
    """
    Convert raw dict -> validated message model.
    Raises ValueError for an unknown type, ValidationError (also a ValueError) for bad fields.
    """
    t = payload.get("type") if isinstance(payload, dict) else None
    if not isinstance(t, str):
        raise ValueError("Missing/invalid type")

    cls = _INCOMING_BY_TYPE.get(t)
    if cls is None:
        raise ValueError(f"Unknown message type: {t}")

    return cls.model_validate(payload)


def error(code: str, message: str) -> OutRoomError:
    return OutRoomError(code=code, message=message)


def targeted(event: OutBase, pids: Iterable[str]) -> Dict[str, Any]:
    """
    Wrap an event so the transport unicasts it to `pids` instead of broadcasting.
    """
    return {**event.model_dump(), "targets": list(pids)}


def dump_events(events: Iterable[Union[OutBase, Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """
    Convert pydantic events -> JSON dicts (targeted dicts pass through).
    """
    return [e if isinstance(e, dict) else e.model_dump() for e in events]
