import pytest

from filestore.errors import InternalError
from filestore.services.sessions import SessionStore


def test_create_then_resolve_returns_user(fake_redis):
    sessions = SessionStore(fake_redis, ttl=86400)
    token = sessions.create(42)
    assert sessions.resolve(token) == "42"
    assert f"auth_{token}" in fake_redis.data


def test_tokens_are_unique(fake_redis):
    sessions = SessionStore(fake_redis)
    assert sessions.create(1) != sessions.create(1)


def test_resolve_is_none_after_ttl(fake_redis):
    sessions = SessionStore(fake_redis, ttl=86400)
    token = sessions.create(7)
    fake_redis.advance(86399)
    assert sessions.resolve(token) == "7"
    fake_redis.advance(1)
    assert sessions.resolve(token) is None


def test_invalidate_removes_binding_and_is_idempotent(fake_redis):
    sessions = SessionStore(fake_redis)
    token = sessions.create(7)
    sessions.invalidate(token)
    assert sessions.resolve(token) is None
    sessions.invalidate(token)
    sessions.invalidate("never-issued")


def test_unknown_or_empty_token_resolves_to_none(fake_redis):
    sessions = SessionStore(fake_redis)
    assert sessions.resolve("nope") is None
    assert sessions.resolve(None) is None
    assert sessions.resolve("") is None


@pytest.mark.parametrize("op", ["create", "resolve", "invalidate"])
def test_store_outage_is_internal_error(fake_redis, op):
    sessions = SessionStore(fake_redis)
    fake_redis.down = True
    with pytest.raises(InternalError):
        getattr(sessions, op)("abc")
