# wordspy/store/registry.py
from __future__ import annotations

import random
from typing import Dict, List, Optional, Tuple

from wordspy.store.models import (
    GameSettings,
    Player,
    PublicGameState,
    PublicPlayer,
    PublicRoom,
    Room,
)
from wordspy.util.timeutil import now_ms

# 0/O and 1/I left out
ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ROOM_CODE_LENGTH = 6


class RoomRegistry:
    """
    In-memory room table.
    - room_code -> Room
    - player_id -> room_code
    Created empty at startup; a room is dropped as soon as its last player leaves.
    No game rules live here.
    """

    def __init__(self, defaults: Optional[GameSettings] = None, rng: Optional[random.Random] = None) -> None:
        self.defaults = defaults or GameSettings()
        self._rooms: Dict[str, Room] = {}
        self._player_rooms: Dict[str, str] = {}
        self._rng = rng or random.Random()

    def _gen_room_code(self) -> str:
        while True:
            code = "".join(self._rng.choice(ROOM_CODE_ALPHABET) for _ in range(ROOM_CODE_LENGTH))
            if code not in self._rooms:
                return code

    # ----------------------------
    # Rooms
    # ----------------------------
    def create_room(self, creator_id: str, creator_name: str) -> Room:
        code = self._gen_room_code()
        host = Player(id=creator_id, name=creator_name, is_host=True, is_alive=True, has_voted=False)
        room = Room(
            id=code,
            host_id=creator_id,
            players={creator_id: host},
            settings=self.defaults.model_copy(),
            created_at=now_ms(),
        )
        self._rooms[code] = room
        self._player_rooms[creator_id] = code
        return room

    def join_room(self, code: str, player_id: str, name: str) -> Optional[Room]:
        """
        Returns None when the room is missing, already playing, or full.
        """
        room = self._rooms.get(code.strip().upper())
        if room is None:
            return None
        if room.state.phase != "lobby":
            return None
        if len(room.players) >= room.settings.max_players:
            return None

        room.players[player_id] = Player(id=player_id, name=name, is_host=False, is_alive=True, has_voted=False)
        self._player_rooms[player_id] = room.id
        return room

    def leave_room(self, player_id: str) -> Tuple[Optional[Room], bool]:
        """
        Remove a player. Returns (room, was_host); room is None when the player
        was not in a room or the room was destroyed because it became empty.
        """
        code = self._player_rooms.pop(player_id, None)
        if code is None:
            return None, False
        room = self._rooms.get(code)
        if room is None:
            return None, False

        was_host = room.host_id == player_id
        room.players.pop(player_id, None)

        if not room.players:
            del self._rooms[code]
            return None, was_host

        if was_host:
            new_host = next(iter(room.players.values()))
            new_host.is_host = True
            room.host_id = new_host.id

        return room, was_host

    def close_room(self, code: str) -> List[str]:
        """
        Drop a room and every membership in it. Returns the evicted player ids.
        """
        room = self._rooms.pop(code, None)
        if room is None:
            return []
        for pid in room.players:
            self._player_rooms.pop(pid, None)
        return list(room.players)

    # ----------------------------
    # Lookups
    # ----------------------------
    def get_room(self, code: str) -> Optional[Room]:
        return self._rooms.get(code)

    def get_room_by_player(self, player_id: str) -> Optional[Room]:
        code = self._player_rooms.get(player_id)
        return self._rooms.get(code) if code else None

    def list_rooms(self) -> List[Room]:
        return sorted(self._rooms.values(), key=lambda r: r.created_at)

    def __len__(self) -> int:
        return len(self._rooms)


def to_public_view(room: Room) -> PublicRoom:
    """Strip roles, words and vote targets; votes collapse to a count."""
    players = [
        PublicPlayer(id=p.id, name=p.name, is_host=p.is_host, is_alive=p.is_alive, has_voted=p.has_voted)
        for p in room.players.values()
    ]
    state = room.state.model_dump(exclude={"votes"})
    return PublicRoom(
        id=room.id,
        host_id=room.host_id,
        players=players,
        settings=room.settings.model_copy(),
        state=PublicGameState(**state, vote_count=len(room.state.votes)),
    )
