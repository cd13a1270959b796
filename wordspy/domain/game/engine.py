# wordspy/domain/game/engine.py
"""
Room-level game state machine.

    lobby -> role_reveal -> speaking -> voting -> elimination -> speaking | game_over
                                          +-> (tie) -> speaking
    any phase -> lobby via reset_to_lobby

Every function here is synchronous and works on an explicit Room; callers own
timing, broadcasting and authorization.
"""
from __future__ import annotations

import random
from typing import List, Optional, Tuple

from wordspy.domain.common.types import MAJORITY_WINNER, ODD_ROLE, ODD_WINNER, Mode, Winner
from wordspy.domain.game.roles import assign_roles
from wordspy.store.models import GameState, Player, Room
from wordspy.words.provider import WordProvider


def start_game(room: Room, mode: Mode, words: WordProvider, rng: Optional[random.Random] = None) -> bool:
    if room.state.phase != "lobby":
        return False
    if len(room.players) < room.settings.min_players:
        return False

    room.settings.mode = mode
    shuffled: List[Player] = list(room.players.values())
    (rng or random).shuffle(shuffled)
    assign_roles(shuffled, mode, words)

    room.game_no += 1
    room.state.phase = "role_reveal"
    room.state.round = 1
    room.state.speaking_order = [p.id for p in shuffled]
    room.state.current_speaker_index = 0
    room.state.speaking_end_time = None
    room.state.votes = {}
    room.state.eliminated_players = []
    room.state.winner = None
    return True


def start_speaking_phase(room: Room) -> None:
    state = room.state
    state.phase = "speaking"
    state.current_speaker_index = 0
    state.speaking_order = [
        pid for pid in state.speaking_order if pid not in state.eliminated_players and pid in room.players
    ]


def current_speaker_id(room: Room) -> Optional[str]:
    order = room.state.speaking_order
    idx = room.state.current_speaker_index
    if 0 <= idx < len(order):
        return order[idx]
    return None


def get_current_speaker(room: Room) -> Optional[Player]:
    pid = current_speaker_id(room)
    return room.players.get(pid) if pid else None


def next_speaker(room: Room) -> Tuple[bool, Optional[Player]]:
    """
    Move to the next speaker. Returns (done, speaker); done=True means the
    round's order is exhausted and the caller must leave the speaking phase.
    """
    room.state.current_speaker_index += 1
    if room.state.current_speaker_index >= len(room.state.speaking_order):
        return True, None
    return False, get_current_speaker(room)


def start_voting_phase(room: Room) -> None:
    room.state.phase = "voting"
    room.state.votes = {}
    for p in room.players.values():
        p.has_voted = False
        p.voted_for = None


def eliminate_player(room: Room, player_id: str) -> Optional[Player]:
    player = room.players.get(player_id)
    if player is None:
        return None

    player.is_alive = False
    room.state.eliminated_players.append(player_id)
    room.state.phase = "elimination"
    return player


def check_win_condition(room: Room) -> Tuple[bool, Optional[Winner]]:
    """
    Evaluated over alive players only:
      - odd player gone          -> majority wins
      - odd player alive, <= 2 left -> odd player wins
    On a win the room moves to game_over and records the winner.
    """
    mode = room.settings.mode
    alive = [p for p in room.players.values() if p.is_alive]
    odd_alive = any(p.role == ODD_ROLE[mode] for p in alive)

    winner: Optional[Winner] = None
    if not odd_alive:
        winner = MAJORITY_WINNER[mode]
    elif len(alive) <= 2:
        winner = ODD_WINNER[mode]

    if winner is None:
        return False, None

    room.state.phase = "game_over"
    room.state.winner = winner
    return True, winner


def reset_to_lobby(room: Room) -> None:
    room.state = GameState()
    for p in room.players.values():
        p.role = None
        p.word = None
        p.is_alive = True
        p.has_voted = False
        p.voted_for = None
