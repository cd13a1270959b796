from __future__ import annotations

from collections import Counter
from typing import List, Optional, Tuple

from wordspy.store.models import Room


def cast_vote(room: Room, voter_id: str, target_id: str) -> bool:
    """
    Record one vote. Rejected when the voter is unknown, dead or has already
    voted, or when the target was eliminated earlier in the game.
    Voting for yourself is allowed.
    """
    voter = room.players.get(voter_id)
    if voter is None or voter.has_voted or not voter.is_alive:
        return False
    if target_id in room.state.eliminated_players:
        return False

    voter.has_voted = True
    voter.voted_for = target_id
    room.state.votes[voter_id] = target_id
    return True


def all_votes_cast(room: Room) -> bool:
    return all(p.has_voted for p in room.players.values() if p.is_alive)


def tally_votes(room: Room) -> Tuple[Optional[str], bool]:
    """
    Returns (eliminated_id, tie).
    Only a strict maximum eliminates; a shared maximum (or no votes) is a tie.
    No tie-break rule is applied.
    """
    counts = Counter(room.state.votes.values())
    if not counts:
        return None, True

    top = max(counts.values())
    leaders: List[str] = [pid for pid, n in counts.items() if n == top]
    if len(leaders) != 1:
        return None, True
    return leaders[0], False
