import pytest
from pydantic import ValidationError

from wordspy.transport.protocols import (
    InCastVote,
    OutGameStarted,
    OutPhaseChanged,
    dump_events,
    error,
    parse_incoming,
    targeted,
)


def test_parse_incoming_create_room():
    msg = parse_incoming({"type": "create_room", "player_name": "Ann"})
    assert msg.type == "create_room"
    assert msg.player_name == "Ann"


def test_parse_incoming_start_game_mode():
    assert parse_incoming({"type": "start_game", "mode": "spy"}).mode == "spy"
    with pytest.raises(ValidationError):
        parse_incoming({"type": "start_game", "mode": "werewolf"})


def test_parse_incoming_name_bounds():
    with pytest.raises(ValidationError):
        parse_incoming({"type": "create_room", "player_name": ""})
    with pytest.raises(ValidationError):
        parse_incoming({"type": "join_room", "room_code": "ABCDEF", "player_name": "x" * 25})


def test_parse_incoming_cast_vote():
    msg = parse_incoming({"type": "cast_vote", "target_id": "p2"})
    assert isinstance(msg, InCastVote)
    assert msg.target_id == "p2"


def test_parse_incoming_rejects_unknown_or_missing_type():
    with pytest.raises(ValueError, match="Unknown message type"):
        parse_incoming({"type": "draw_op"})
    with pytest.raises(ValueError):
        parse_incoming({"player_name": "Ann"})
    with pytest.raises(ValueError):
        parse_incoming(["not", "a", "dict"])


def test_error_event_shape():
    assert error("NOT_HOST", "Only the host can start the game").model_dump() == {
        "type": "room_error",
        "code": "NOT_HOST",
        "message": "Only the host can start the game",
    }


def test_targeted_and_dump_events():
    private = targeted(OutGameStarted(role="infiltrator"), ["p1"])
    assert private == {"type": "game_started", "role": "infiltrator", "word": None, "targets": ["p1"]}

    dumped = dump_events([OutPhaseChanged(phase="voting"), private])
    assert dumped[0] == {"type": "phase_changed", "phase": "voting", "speaking_order": None}
    assert dumped[1] is private
