import logging
from typing import TYPE_CHECKING
from fastapi import Request
from redis import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

RedisClient = Redis
if TYPE_CHECKING:
    RedisClient = Redis[str]  # type: ignore

KEY_SEPARATOR = ":"


def create_redis_client(redis_url: str) -> RedisClient:
    # No connection is opened until the first command
    try:
        return Redis.from_url(redis_url, decode_responses=True)
    except (RedisError, ValueError) as e:
        raise RuntimeError(f"Invalid Redis configuration: {e}") from e


def build_key(prefix: str, *parts: str) -> str:
    """Join a namespace prefix and key parts, e.g. ``tasks:owner:user-1``."""
    return KEY_SEPARATOR.join((prefix, *parts))


def get_redis_client(request: Request) -> RedisClient:
    return request.app.state.redis_client
