import pytest

from presenter.core.errors import UnknownSession
from presenter.memory.models import ConversationTurn, Role
from presenter.memory.store import DEFAULT_SESSION_ID, ConversationSession, InMemorySessionStore


def turn(index: int) -> ConversationTurn:
    role = Role.USER if index % 2 else Role.ASSISTANT
    return ConversationTurn(role=role, content=f"turn {index}")


def test_append_keeps_most_recent_turns_in_order():
    session = ConversationSession(max_turns=6)
    for index in range(4):
        session.append(turn(index))

    for index in range(4, 7):
        session.append(turn(index))

    snapshot = session.snapshot()
    assert len(snapshot) == 6
    assert [t.content for t in snapshot] == [f"turn {i}" for i in range(1, 7)]


def test_length_never_exceeds_cap():
    session = ConversationSession(max_turns=3)
    for index in range(20):
        session.append(turn(index))
        assert len(session.snapshot()) <= 3

    assert [t.content for t in session.snapshot()] == ["turn 17", "turn 18", "turn 19"]


def test_reset_empties_the_session():
    session = ConversationSession(max_turns=10)
    session.extend(turn(index) for index in range(5))

    session.reset()

    assert session.snapshot() == []
    assert len(session) == 0


def test_snapshot_is_a_copy():
    session = ConversationSession(max_turns=6)
    session.append(turn(0))

    snapshot = session.snapshot()
    snapshot.append(turn(1))

    assert len(session.snapshot()) == 1


def test_turn_as_message():
    assert ConversationTurn(role=Role.ASSISTANT, content="Hi").as_message() == {
        "role": "assistant",
        "content": "Hi",
    }


def test_store_partitions_sessions_by_id(session_store):
    first = session_store.start()
    second = session_store.start()

    session_store.get(first).append(turn(0))

    assert len(session_store.get(first).snapshot()) == 1
    assert session_store.get(second).snapshot() == []
    assert session_store.get(None).snapshot() == []


def test_store_without_id_uses_shared_default(session_store):
    session_store.get(None).append(turn(0))

    assert len(session_store.get(DEFAULT_SESSION_ID).snapshot()) == 1
    assert len(session_store) == 0

    session_store.reset(None)
    assert session_store.get(None).snapshot() == []


def test_unknown_session_id_is_rejected_without_registering(session_store):
    with pytest.raises(UnknownSession) as exc_info:
        session_store.get("never-started")

    assert exc_info.value.status_code == 400
    assert "never-started" not in session_store
    assert len(session_store) == 0


def test_store_drops_least_recently_used_session_past_cap():
    store = InMemorySessionStore(max_turns=6, max_sessions=2)
    first = store.start()
    second = store.start()
    store.get(first).append(turn(0))

    third = store.start()

    assert len(store) == 2
    assert first in store
    assert second not in store
    assert third in store
    assert len(store.get(first)) == 1


def test_default_session_survives_eviction():
    store = InMemorySessionStore(max_turns=6, max_sessions=1)
    store.get(None).append(turn(0))

    for _ in range(3):
        store.start()

    assert len(store) == 1
    assert len(store.get(None)) == 1


def test_starting_a_known_id_clears_it(session_store):
    session_id = session_store.start("client-chosen")
    session_store.get(session_id).append(turn(0))

    assert session_store.start("client-chosen") == "client-chosen"
    assert session_store.get("client-chosen").snapshot() == []
    assert len(session_store) == 1
