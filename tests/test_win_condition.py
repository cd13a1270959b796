import pytest

from wordspy.domain.game.engine import check_win_condition
from wordspy.store.models import GameSettings, Player, Room


def build(mode, roles, dead=()):
    players = {}
    for i, role in enumerate(roles):
        pid = f"p{i}"
        players[pid] = Player(id=pid, name=pid, is_host=i == 0, role=role, is_alive=pid not in dead)
    room = Room(id="ABCDEF", host_id="p0", players=players, settings=GameSettings(mode=mode), created_at=0)
    room.state.phase = "elimination"
    return room


@pytest.mark.parametrize(
    "mode, odd, majority, winner",
    [
        ("infiltrator", "infiltrator", "citizen", "citizens"),
        ("spy", "spy", "agent", "agents"),
    ],
)
def test_odd_player_eliminated_majority_wins(mode, odd, majority, winner):
    room = build(mode, [odd, majority, majority, majority], dead=("p0",))
    assert check_win_condition(room) == (True, winner)
    assert room.state.phase == "game_over"
    assert room.state.winner == winner


@pytest.mark.parametrize(
    "mode, odd, majority, winner",
    [
        ("infiltrator", "infiltrator", "citizen", "infiltrator"),
        ("spy", "spy", "agent", "spy"),
    ],
)
def test_odd_player_wins_when_two_remain(mode, odd, majority, winner):
    room = build(mode, [odd, majority, majority, majority], dead=("p2", "p3"))
    assert check_win_condition(room) == (True, winner)
    assert room.state.winner == winner


def test_game_continues_with_three_alive():
    room = build("infiltrator", ["citizen", "infiltrator", "citizen", "citizen"], dead=("p3",))
    assert check_win_condition(room) == (False, None)
    assert room.state.phase == "elimination"
    assert room.state.winner is None


def test_departed_odd_player_counts_as_gone():
    room = build("spy", ["agent", "agent", "agent", "spy"])
    del room.players["p3"]
    assert check_win_condition(room) == (True, "agents")
