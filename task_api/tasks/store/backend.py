from sqlalchemy import Engine

from task_api.common.redis import RedisClient
from task_api.config import Settings
from task_api.tasks.store.base import TaskStore
from task_api.tasks.store.postgres.store import PostgresTaskStore
from task_api.tasks.store.redis.store import RedisTaskStore


def get_task_store_backend(
    redis_client: RedisClient,
    engine: Engine | None,
    settings: Settings,
) -> TaskStore:
    if settings.STORE_BACKEND == "postgres":
        if engine is None:
            raise ValueError("Postgres backend selected but no database engine exists")
        return PostgresTaskStore(engine)
    elif settings.STORE_BACKEND == "redis":
        return RedisTaskStore(
            redis_client=redis_client,
            key_prefix=settings.TASKS_NAMESPACE,
        )
    else:
        raise ValueError(f"Unsupported store backend: {settings.STORE_BACKEND}")
