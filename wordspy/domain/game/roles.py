from __future__ import annotations

from typing import Dict, List

from wordspy.domain.common.types import MAJORITY_ROLE, ODD_ROLE, Mode
from wordspy.store.models import Player, RoleInfo, Room
from wordspy.words.provider import WordProvider


def assign_roles(shuffled: List[Player], mode: Mode, words: WordProvider) -> None:
    """
    Position 0 of an already shuffled list becomes the odd player.
      - infiltrator: odd player gets no word, everyone else the primary word
      - spy: odd player gets a similar word, everyone else the primary word
    Words are drawn once per game.
    """
    if mode == "infiltrator":
        primary = words.random_word().primary
        odd_word = None
    else:
        pair = words.random_pair()
        primary, odd_word = pair.primary, pair.similar

    for i, p in enumerate(shuffled):
        if i == 0:
            p.role = ODD_ROLE[mode]
            p.word = odd_word
        else:
            p.role = MAJORITY_ROLE[mode]
            p.word = primary


def get_role_reveal_data(room: Room) -> Dict[str, RoleInfo]:
    """Per-player role + word, each entry meant for its owner only."""
    return {pid: RoleInfo(role=p.role, word=p.word) for pid, p in room.players.items() if p.role}


def get_all_roles(room: Room) -> Dict[str, RoleInfo]:
    """Full disclosure for the game-over broadcast."""
    return get_role_reveal_data(room)
