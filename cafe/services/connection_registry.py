import json

import redis

from cafe.utils.retry import redis_retry
from cafe.utils.settings import REDIS_URL
from cafe.utils.logging import get_logger

logger = get_logger(__name__)

CONNECTIONS_KEY = "connections:users"
BROADCAST_CHANNEL = "notify:broadcast"

ORDER_STATUS_UPDATED = "orderStatusUpdated"
NEW_ADMIN_NOTIFICATION = "newAdminNotification"

#drop the user -> connection entry only if it still points at this connection,
#a late disconnect of an old tab must not unregister the new one
_UNREGISTER_LUA = """
local user = redis.call('GET', KEYS[2])
redis.call('DEL', KEYS[2])
if user and redis.call('HGET', KEYS[1], user) == ARGV[1] then
    redis.call('HDEL', KEYS[1], user)
    return user
end
return false
"""


def _connection_key(connection_id: str) -> str:
    return f"connections:{connection_id}:user"


def _channel(connection_id: str) -> str:
    return f"notify:{connection_id}"


class ConnectionRegistry:
    """
    -which live connection belongs to which user
    -publishing events to one connection or to everybody
    delivery from the channel to the socket is the gateway's job
    """

    def __init__(self, url: str | None = None, client: redis.Redis | None = None):
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    @redis_retry()
    def register(self, user_id: int, connection_id: str) -> None:
        logger.info(f"User {user_id} joined with connection {connection_id}")
        pipe = self.redis.pipeline()
        pipe.hset(CONNECTIONS_KEY, str(user_id), connection_id)
        pipe.set(_connection_key(connection_id), str(user_id))
        pipe.execute()

    @redis_retry()
    def unregister(self, connection_id: str) -> int | None:
        user = self.redis.eval(
            _UNREGISTER_LUA, 2, CONNECTIONS_KEY, _connection_key(connection_id), connection_id
        )
        if user:
            logger.info(f"User {user} disconnected from {connection_id}")
            return int(user)
        return None

    @redis_retry()
    def lookup(self, user_id: int) -> str | None:
        return self.redis.hget(CONNECTIONS_KEY, str(user_id))

    @redis_retry()
    def publish(self, connection_id: str, event: str, payload: dict) -> int:
        message = json.dumps({"event": event, "data": payload}, default=str)
        return self.redis.publish(_channel(connection_id), message)

    @redis_retry()
    def broadcast(self, event: str, payload: dict) -> int:
        message = json.dumps({"event": event, "data": payload}, default=str)
        return self.redis.publish(BROADCAST_CHANNEL, message)
