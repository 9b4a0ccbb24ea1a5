from fastapi import Depends
from sqlalchemy import Engine

from task_api.common.database import get_db_engine
from task_api.common.redis import RedisClient, get_redis_client
from task_api.config import Settings, get_settings
from task_api.tasks.store.backend import get_task_store_backend
from task_api.tasks.store.base import TaskStore


def get_task_store(
    redis_client: RedisClient = Depends(get_redis_client),
    engine: Engine | None = Depends(get_db_engine),
    settings: Settings = Depends(get_settings),
) -> TaskStore:
    return get_task_store_backend(redis_client, engine, settings)
