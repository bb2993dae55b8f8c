# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-13
# Description: test_conversation_store.py
# -----------------------------------------------------------------------------
import threading

import pytest

from conversation.ConversationStore import (
    ROLE_ASSISTANT,
    ROLE_CALLER,
    ConversationSession,
    ConversationStore,
    ConversationTurn,
)


def test_append_then_read_preserves_order():
    store = ConversationStore()
    store.append(1, ConversationTurn.caller("hello"))
    store.append(1, ConversationTurn.assistant("hi there"))

    turns = store.read(1)
    assert [(t.role, t.text) for t in turns] == [(ROLE_CALLER, "hello"), (ROLE_ASSISTANT, "hi there")]


def test_read_unknown_user_is_empty_and_creates_nothing():
    store = ConversationStore()
    assert store.read(42) == ()
    assert store.session_count() == 0
    assert 42 not in store


def test_read_returns_a_snapshot():
    store = ConversationStore()
    store.append(1, ConversationTurn.caller("first"))
    snapshot = store.read(1)
    store.append(1, ConversationTurn.caller("second"))
    assert len(snapshot) == 1
    assert len(store.read(1)) == 2


def test_concurrent_first_appends_share_one_session():
    for _ in range(20):
        store = ConversationStore()
        barrier = threading.Barrier(2)

        def worker(text):
            barrier.wait()
            store.append("new-user", ConversationTurn.caller(text))

        threads = [threading.Thread(target=worker, args=(t,)) for t in ("a", "b")]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert store.session_count() == 1
        assert sorted(t.text for t in store.read("new-user")) == ["a", "b"]


def test_many_concurrent_appends_lose_nothing():
    store = ConversationStore(max_turns=10_000)

    def worker(n):
        for i in range(100):
            store.append(1, ConversationTurn.caller(f"{n}-{i}"))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store.read(1)) == 800


def test_turn_cap_drops_oldest_turns():
    store = ConversationStore(max_turns=3)
    for i in range(5):
        store.append(1, ConversationTurn.caller(str(i)))
    assert [t.text for t in store.read(1)] == ["2", "3", "4"]


def test_least_recently_used_session_is_evicted():
    store = ConversationStore(max_sessions=2)
    store.append(1, ConversationTurn.caller("a"))
    store.append(2, ConversationTurn.caller("b"))
    store.read(1)  # 1 is now most recent
    store.append(3, ConversationTurn.caller("c"))

    assert store.session_count() == 2
    assert 2 not in store
    assert 1 in store and 3 in store


def test_clear_drops_session():
    store = ConversationStore()
    store.append(1, ConversationTurn.caller("a"))
    assert store.clear(1) is True
    assert store.clear(1) is False
    assert store.read(1) == ()


def test_invalid_bounds_rejected():
    with pytest.raises(ValueError):
        ConversationStore(max_sessions=0)
    with pytest.raises(ValueError):
        ConversationStore(max_turns=0)


def test_append_happens_while_session_is_registered(monkeypatch):
    store = ConversationStore()
    seen = []
    original_append = ConversationSession.append

    def checking_append(session, turn):
        # clear() and eviction need the map lock, so they cannot run here
        seen.append((store._lock.locked(), store._sessions.get(session.user_id) is session))
        original_append(session, turn)

    monkeypatch.setattr(ConversationSession, "append", checking_append)

    store.append(1, ConversationTurn.caller("first"))
    store.clear(1)
    store.append(1, ConversationTurn.caller("again"))

    assert seen == [(True, True), (True, True)]
    assert [t.text for t in store.read(1)] == ["again"]
