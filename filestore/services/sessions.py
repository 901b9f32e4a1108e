from typing import Optional
from uuid import uuid4

from redis.exceptions import RedisError

from ..errors import InternalError

SESSION_TTL = 24 * 3600


def _key(token):
    return f"auth_{token}"


class SessionStore:
    """Binds opaque tokens to user ids in redis for a fixed lifetime.

    Expiry is left to redis: an expired key simply reads back as absent, so
    no sweeping is needed. Store failures are raised as ``InternalError`` and
    never read as "no session".
    """

    def __init__(self, client, ttl: int = SESSION_TTL):
        self.client = client
        self.ttl = ttl

    def create(self, user_id) -> str:
        token = str(uuid4())
        try:
            self.client.setex(_key(token), self.ttl, str(user_id))
        except RedisError as e:
            raise InternalError() from e
        return token

    def resolve(self, token) -> Optional[str]:
        if not token:
            return None
        try:
            value = self.client.get(_key(token))
        except RedisError as e:
            raise InternalError() from e
        if value is None:
            return None
        return value.decode("utf-8") if isinstance(value, bytes) else str(value)

    def invalidate(self, token) -> None:
        if not token:
            return
        try:
            self.client.delete(_key(token))
        except RedisError as e:
            raise InternalError() from e
