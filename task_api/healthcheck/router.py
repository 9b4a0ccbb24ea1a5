from typing import Any
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import Engine, text

from task_api.cache.dependencies import get_response_cache
from task_api.cache.service import ResponseCache
from task_api.common.database import get_db_engine
from task_api.common.redis import RedisClient, get_redis_client
from task_api.config import Settings, get_settings

router = APIRouter()

ComponentStatus = dict[str, Any]


def check_redis(redis_client: RedisClient) -> ComponentStatus:
    try:
        redis_client.ping()
    except Exception as e:
        return {"status": "error", "message": str(e)}
    return {"status": "ok"}


def check_postgres(engine: Engine | None) -> ComponentStatus:
    if engine is None:
        return {"status": "error", "message": "Database engine is not initialised"}
    try:
        with engine.connect() as connection:
            if connection.execute(text("SELECT 1")).scalar() != 1:
                return {"status": "error", "message": "Unexpected result from SELECT 1"}
    except Exception as e:
        return {"status": "error", "message": str(e)}
    return {"status": "ok"}


@router.get(
    "/healthcheck",
    tags=["Healthcheck"],
    status_code=status.HTTP_200_OK,
    responses={
        200: {
            "description": "Every component is reachable",
            "content": {
                "application/json": {
                    "example": {
                        "api": {"status": "ok"},
                        "postgres": {"status": "ok"},
                        "cache": {"status": "ok", "keys": 3, "hits": 10, "misses": 4},
                    }
                }
            },
        },
        503: {
            "description": "The configured store is unreachable",
            "content": {
                "application/json": {
                    "example": {
                        "api": {"status": "ok"},
                        "postgres": {
                            "status": "error",
                            "message": "connection refused",
                        },
                        "cache": {"status": "ok", "keys": 0, "hits": 0, "misses": 0},
                    }
                }
            },
        },
    },
)
def healthcheck(
    settings: Settings = Depends(get_settings),
    redis_client: RedisClient = Depends(get_redis_client),
    engine: Engine | None = Depends(get_db_engine),
    response_cache: ResponseCache = Depends(get_response_cache),
) -> JSONResponse:
    """Report store connectivity for the configured backend and cache statistics."""
    if settings.STORE_BACKEND == "redis":
        store_name, store_status = "redis", check_redis(redis_client)
    else:
        store_name, store_status = "postgres", check_postgres(engine)

    health_status: dict[str, ComponentStatus] = {
        "api": {"status": "ok"},
        store_name: store_status,
        "cache": {"status": "ok", **response_cache.stats()},
    }
    status_code = (
        status.HTTP_200_OK
        if store_status["status"] == "ok"
        else status.HTTP_503_SERVICE_UNAVAILABLE
    )
    return JSONResponse(status_code=status_code, content=health_status)
