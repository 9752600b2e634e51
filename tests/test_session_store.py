"""Tests for SessionStore — in-memory per-user dialogue history."""

import pytest

from parley.session.models import Role, Turn
from parley.session.store import SessionStore


def test_unknown_user_has_no_turns(sessions: SessionStore):
    assert sessions.get_turns(1) == ()
    assert not sessions.has_session(1)


def test_append_exchange_creates_session_lazily(sessions: SessionStore):
    sessions.append_exchange(1, Turn.user("Hello"), Turn.assistant("Hi!"))
    assert sessions.has_session(1)
    assert sessions.get_turns(1) == (
        Turn(Role.USER, "Hello"),
        Turn(Role.ASSISTANT, "Hi!"),
    )


def test_turns_keep_insertion_order(sessions: SessionStore):
    sessions.append_exchange(1, Turn.user("a"), Turn.assistant("b"))
    sessions.append_exchange(1, Turn.user("c"), Turn.assistant("d"))
    assert [t.content for t in sessions.get_turns(1)] == ["a", "b", "c", "d"]


def test_users_do_not_see_each_other(sessions: SessionStore):
    sessions.append_exchange(1, Turn.user("mine"), Turn.assistant("yours"))
    assert sessions.get_turns(2) == ()


def test_get_turns_is_a_snapshot(sessions: SessionStore):
    sessions.append_exchange(1, Turn.user("a"), Turn.assistant("b"))
    snapshot = sessions.get_turns(1)
    sessions.append_exchange(1, Turn.user("c"), Turn.assistant("d"))
    assert len(snapshot) == 2


def test_append_rejects_swapped_roles(sessions: SessionStore):
    with pytest.raises(ValueError):
        sessions.append_exchange(1, Turn.assistant("x"), Turn.user("y"))
    assert sessions.get_turns(1) == ()
    assert not sessions.has_session(1)


def test_reset_clears_turns(sessions: SessionStore):
    sessions.append_exchange(1, Turn.user("a"), Turn.assistant("b"))
    sessions.append_exchange(1, Turn.user("c"), Turn.assistant("d"))
    sessions.reset(1)
    assert sessions.get_turns(1) == ()


def test_reset_is_idempotent(sessions: SessionStore):
    sessions.reset(1)
    sessions.reset(1)
    assert sessions.get_turns(1) == ()


def test_turns_are_frozen():
    turn = Turn.user("x")
    with pytest.raises(Exception):
        turn.content = "y"  # type: ignore


def test_turn_to_openai_message():
    assert Turn.assistant("hey").to_openai_message() == {
        "role": "assistant",
        "content": "hey",
    }
