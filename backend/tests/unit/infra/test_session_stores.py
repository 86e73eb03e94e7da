# tests/unit/infra/test_session_stores.py
"""
Unit tests for the session store adapters.

- In-memory double (thread-safe dictionary)
- Redis adapter, exercised against fakeredis
"""

from __future__ import annotations

from datetime import timedelta

import fakeredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from vidshare.infra.redis.redis_session_store import RedisSessionStore
from vidshare.services._shared.errors import StorageUnavailable
from vidshare.services._shared.ports import InMemorySessionStore


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture(params=["memory", "redis"])
def store(request, fake_redis):
    if request.param == "memory":
        return InMemorySessionStore()
    return RedisSessionStore(r=fake_redis, ttl=timedelta(days=10))


# ---- Shared contract ----


def test_empty_store_has_no_session(store):
    assert store.current_refresh_token(1) is None


def test_persist_then_read(store):
    store.persist_refresh_token(1, "rt-1")
    assert store.current_refresh_token(1) == "rt-1"


def test_persist_overwrites_previous_token(store):
    store.persist_refresh_token(1, "rt-1")
    store.persist_refresh_token(1, "rt-2")
    assert store.current_refresh_token(1) == "rt-2"


def test_sessions_are_per_identity(store):
    store.persist_refresh_token(1, "rt-1")
    store.persist_refresh_token(2, "rt-2")
    store.clear_refresh_token(1)
    assert store.current_refresh_token(1) is None
    assert store.current_refresh_token(2) == "rt-2"


def test_clear_is_idempotent(store):
    store.clear_refresh_token(5)
    store.persist_refresh_token(5, "rt")
    store.clear_refresh_token(5)
    store.clear_refresh_token(5)
    assert store.current_refresh_token(5) is None


# ---- Redis specifics ----


def test_redis_key_layout_and_ttl(fake_redis):
    store = RedisSessionStore(r=fake_redis, ttl=timedelta(minutes=10))
    store.persist_refresh_token(9, "rt")

    assert fake_redis.get("session:rt:9") == b"rt"
    assert 0 < fake_redis.ttl("session:rt:9") <= 600


def test_redis_errors_become_storage_unavailable(fake_redis, monkeypatch):
    store = RedisSessionStore(r=fake_redis, ttl=timedelta(minutes=10))

    def boom(*args, **kwargs):
        raise RedisConnectionError("down")

    monkeypatch.setattr(fake_redis, "set", boom)
    monkeypatch.setattr(fake_redis, "get", boom)
    monkeypatch.setattr(fake_redis, "delete", boom)

    with pytest.raises(StorageUnavailable):
        store.persist_refresh_token(1, "rt")
    with pytest.raises(StorageUnavailable):
        store.current_refresh_token(1)
    with pytest.raises(StorageUnavailable):
        store.clear_refresh_token(1)


def test_in_memory_outage_flag():
    store = InMemorySessionStore()
    store.available = False
    with pytest.raises(StorageUnavailable):
        store.persist_refresh_token(1, "rt")
