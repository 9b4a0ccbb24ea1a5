from fastapi import Depends
from sqlalchemy import Engine

from task_api.auth.users.backend import get_user_store_backend
from task_api.auth.users.base import UserStore
from task_api.common.database import get_db_engine
from task_api.common.redis import RedisClient, get_redis_client
from task_api.config import Settings, get_settings


def get_user_store(
    redis_client: RedisClient = Depends(get_redis_client),
    engine: Engine | None = Depends(get_db_engine),
    settings: Settings = Depends(get_settings),
) -> UserStore:
    return get_user_store_backend(redis_client, engine, settings)
