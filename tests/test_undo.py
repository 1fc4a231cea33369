"""
Tests for the delete undo window
"""
import asyncio

import pytest

from followuply.errors import TransientError
from followuply.models.schemas import ClientCreate

run = asyncio.run


def test_undo_within_window_restores_the_client(clients, undo_registry, undo_clock, user_id):
    client = run(clients.create(user_id, ClientCreate(name="Jane Doe")))
    snapshot = run(clients.delete(user_id, client.id))
    token = undo_registry.register(user_id, "client", snapshot, clients.restore)

    undo_clock.advance(5.9)
    restored = run(undo_registry.undo(user_id, token))

    assert restored.id == client.id
    assert [c.id for c in run(clients.list(user_id))] == [client.id]


def test_undo_after_window_is_a_no_op(clients, undo_registry, undo_clock, user_id):
    client = run(clients.create(user_id, ClientCreate(name="Jane Doe")))
    snapshot = run(clients.delete(user_id, client.id))
    token = undo_registry.register(user_id, "client", snapshot, clients.restore)

    undo_clock.advance(6)
    assert run(undo_registry.undo(user_id, token)) is None
    assert run(clients.list(user_id)) == []


def test_token_only_works_once(undo_registry, user_id):
    calls = []

    async def restore(owner, snapshot):
        calls.append(snapshot)
        return snapshot

    token = undo_registry.register(user_id, "client", "snap", restore)
    assert run(undo_registry.undo(user_id, token)) == "snap"
    assert run(undo_registry.undo(user_id, token)) is None
    assert calls == ["snap"]


def test_other_users_cannot_use_the_token(undo_registry, user_id, other_user_id):
    async def restore(owner, snapshot):
        return snapshot

    token = undo_registry.register(user_id, "client", "snap", restore)
    assert run(undo_registry.undo(other_user_id, token)) is None
    assert undo_registry.is_open(token)


def test_close_drops_pending_entries(undo_registry, user_id):
    async def restore(owner, snapshot):
        return snapshot

    token = undo_registry.register(user_id, "client", "snap", restore)
    undo_registry.close()
    assert not undo_registry.is_open(token)
    assert run(undo_registry.undo(user_id, token)) is None


def test_failed_restore_keeps_the_token(undo_registry, undo_clock, user_id):
    attempts = []

    async def restore(owner, snapshot):
        attempts.append(snapshot)
        if len(attempts) == 1:
            raise TransientError("database is locked")
        return snapshot

    token = undo_registry.register(user_id, "client", "snap", restore)
    with pytest.raises(TransientError):
        run(undo_registry.undo(user_id, token))
    assert undo_registry.is_open(token)

    undo_clock.advance(2)
    assert run(undo_registry.undo(user_id, token)) == "snap"
    assert not undo_registry.is_open(token)
    assert attempts == ["snap", "snap"]
