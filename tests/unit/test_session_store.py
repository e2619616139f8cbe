"""
Test suite for the session store boundary.

Verifies:
- find_or_create is idempotent per user and unique across users
- Contexts are copied in and out
- Unknown session ids raise
"""

import pytest

from bot.sessions import InMemorySessionStore, SessionNotFoundError, SessionStore


class TestFindOrCreate:
    """Tests for session creation and lookup."""

    def test_same_user_same_session(self):
        """Calling twice with the same user returns the same id."""
        store = InMemorySessionStore()

        first = store.find_or_create("user-1")
        second = store.find_or_create("user-1")

        assert first == second
        assert len(store) == 1

    def test_different_users_different_sessions(self):
        """Different users never share a session."""
        store = InMemorySessionStore()

        ids = {store.find_or_create(f"user-{n}") for n in range(50)}

        assert len(ids) == 50
        assert len(store) == 50

    def test_new_session_starts_empty(self):
        store = InMemorySessionStore()

        session_id = store.find_or_create("user-1")
        session = store.get(session_id)

        assert session.id == session_id
        assert session.external_user_id == "user-1"
        assert session.context == {}

    def test_custom_id_factory(self):
        ids = iter(["s-1", "s-2"])
        store = InMemorySessionStore(id_factory=lambda: next(ids))

        assert store.find_or_create("a") == "s-1"
        assert store.find_or_create("b") == "s-2"
        assert store.find_or_create("a") == "s-1"

    def test_id_collision_rejected(self):
        """A generator handing out a used id can't overwrite a session."""
        store = InMemorySessionStore(id_factory=lambda: "same")
        store.find_or_create("a")

        with pytest.raises(ValueError):
            store.find_or_create("b")

        assert store.get("same").external_user_id == "a"

    def test_is_a_session_store(self):
        assert isinstance(InMemorySessionStore(), SessionStore)


class TestContext:
    """Tests for context accessors."""

    def test_set_then_get(self):
        store = InMemorySessionStore()
        session_id = store.find_or_create("user-1")

        store.set_context(session_id, {"forecast": "sunny in Madrid"})

        assert store.get_context(session_id) == {"forecast": "sunny in Madrid"}

    def test_get_context_returns_copy(self):
        """Mutating a returned context leaves the stored one alone."""
        store = InMemorySessionStore()
        session_id = store.find_or_create("user-1")
        store.set_context(session_id, {"nested": {"a": 1}})

        context = store.get_context(session_id)
        context["nested"]["a"] = 2
        context["extra"] = True

        assert store.get_context(session_id) == {"nested": {"a": 1}}

    def test_set_context_stores_copy(self):
        store = InMemorySessionStore()
        session_id = store.find_or_create("user-1")
        context = {"missingLocation": True}

        store.set_context(session_id, context)
        context.clear()

        assert store.get_context(session_id) == {"missingLocation": True}


class TestUnknownSession:
    """Lookups on ids the store never produced."""

    def test_get_unknown_raises(self):
        with pytest.raises(SessionNotFoundError):
            InMemorySessionStore().get("nope")

    def test_get_context_unknown_raises(self):
        with pytest.raises(SessionNotFoundError):
            InMemorySessionStore().get_context("nope")

    def test_set_context_unknown_raises(self):
        with pytest.raises(SessionNotFoundError):
            InMemorySessionStore().set_context("nope", {})

    def test_error_is_a_key_error(self):
        with pytest.raises(KeyError):
            InMemorySessionStore().get("nope")
