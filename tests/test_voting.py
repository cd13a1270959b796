from wordspy.domain.game.engine import eliminate_player, start_game, start_voting_phase
from wordspy.domain.game.voting import all_votes_cast, cast_vote, tally_votes
from wordspy.store.registry import RoomRegistry


def voting_room(words, n=4):
    registry = RoomRegistry()
    room = registry.create_room("p0", "Host")
    for i in range(1, n):
        registry.join_room(room.id, f"p{i}", f"Player{i}")
    start_game(room, "infiltrator", words)
    start_voting_phase(room)
    return room


def test_vote_is_recorded_once(words):
    room = voting_room(words)
    assert cast_vote(room, "p0", "p1") is True
    assert room.state.votes == {"p0": "p1"}
    assert room.players["p0"].has_voted
    assert room.players["p0"].voted_for == "p1"

    assert cast_vote(room, "p0", "p2") is False
    assert room.state.votes == {"p0": "p1"}


def test_unknown_voter_rejected(words):
    room = voting_room(words)
    assert cast_vote(room, "ghost", "p1") is False
    assert room.state.votes == {}


def test_dead_players_cannot_vote_or_be_voted(words):
    room = voting_room(words, n=5)
    eliminate_player(room, "p4")
    start_voting_phase(room)

    assert cast_vote(room, "p4", "p1") is False
    assert cast_vote(room, "p1", "p4") is False
    assert room.state.votes == {}


def test_self_vote_allowed(words):
    room = voting_room(words)
    assert cast_vote(room, "p2", "p2") is True


def test_all_votes_cast_counts_alive_only(words):
    room = voting_room(words, n=5)
    eliminate_player(room, "p4")
    start_voting_phase(room)

    for voter in ("p0", "p1", "p2"):
        cast_vote(room, voter, "p3")
        assert all_votes_cast(room) is False
    cast_vote(room, "p3", "p0")
    assert all_votes_cast(room) is True


def test_tally_strict_majority(words):
    room = voting_room(words)
    room.state.votes = {"p0": "p1", "p1": "p2", "p2": "p1", "p3": "p1"}
    assert tally_votes(room) == ("p1", False)


def test_tally_plurality_without_majority(words):
    room = voting_room(words, n=5)
    room.state.votes = {"p0": "p1", "p1": "p1", "p2": "p2", "p3": "p3", "p4": "p4"}
    assert tally_votes(room) == ("p1", False)


def test_tally_shared_maximum_is_tie(words):
    room = voting_room(words)
    room.state.votes = {"p0": "p1", "p1": "p0", "p2": "p1", "p3": "p0"}
    assert tally_votes(room) == (None, True)


def test_tally_without_votes_is_tie(words):
    room = voting_room(words)
    assert tally_votes(room) == (None, True)
