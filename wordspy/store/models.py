# wordspy/store/models.py
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from wordspy.domain.common.types import Mode, Phase, Role, Winner


class Player(BaseModel):
    id: str
    name: str
    is_host: bool = False
    is_alive: bool = True
    has_voted: bool = False
    voted_for: Optional[str] = None
    role: Optional[Role] = None
    word: Optional[str] = None      # None for the infiltrator


class GameSettings(BaseModel):
    mode: Mode = "infiltrator"
    speaking_time_seconds: float = 30
    min_players: int = 4
    max_players: int = 10


class GameState(BaseModel):
    phase: Phase = "lobby"
    round: int = 0
    speaking_order: List[str] = Field(default_factory=list)
    current_speaker_index: int = 0
    speaking_end_time: Optional[int] = None   # epoch ms
    votes: Dict[str, str] = Field(default_factory=dict)  # voter pid -> target pid
    eliminated_players: List[str] = Field(default_factory=list)
    winner: Optional[Winner] = None


class Room(BaseModel):
    id: str
    host_id: str
    players: Dict[str, Player] = Field(default_factory=dict)
    settings: GameSettings = Field(default_factory=GameSettings)
    state: GameState = Field(default_factory=GameState)
    created_at: int
    game_no: int = 0


class RoleInfo(BaseModel):
    role: Role
    word: Optional[str] = None


# ---- Public projections (safe to broadcast) ----

class PublicPlayer(BaseModel):
    id: str
    name: str
    is_host: bool
    is_alive: bool
    has_voted: bool


class PublicGameState(BaseModel):
    phase: Phase
    round: int
    speaking_order: List[str]
    current_speaker_index: int
    speaking_end_time: Optional[int] = None
    eliminated_players: List[str]
    winner: Optional[Winner] = None
    vote_count: int = 0


class PublicRoom(BaseModel):
    id: str
    host_id: str
    players: List[PublicPlayer]
    settings: GameSettings
    state: PublicGameState
