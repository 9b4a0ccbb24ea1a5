from sqlalchemy import Engine

from task_api.auth.users.base import UserStore
from task_api.auth.users.postgres.store import PostgresUserStore
from task_api.auth.users.redis.store import RedisUserStore
from task_api.common.redis import RedisClient
from task_api.config import Settings


def get_user_store_backend(
    redis_client: RedisClient,
    engine: Engine | None,
    settings: Settings,
) -> UserStore:
    if settings.STORE_BACKEND == "postgres":
        if engine is None:
            raise ValueError("Postgres backend selected but no database engine exists")
        return PostgresUserStore(engine)
    elif settings.STORE_BACKEND == "redis":
        return RedisUserStore(
            redis_client=redis_client,
            key_prefix=settings.USERS_NAMESPACE,
        )
    else:
        raise ValueError(f"Unsupported store backend: {settings.STORE_BACKEND}")
