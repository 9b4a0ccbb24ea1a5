import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from opentelemetry.sdk.trace import TracerProvider
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from task_api.auth.exceptions import AuthException, auth_exception_handler
from task_api.cache.service import ResponseCache
from task_api.common.database import create_db_engine, init_database
from task_api.common.exceptions import (
    ResourceNotFoundException,
    ValidationException,
    internal_error_response,
    request_validation_error_response,
    request_validation_exception_handler,
    resource_not_found_handler,
    store_exception_handler,
    unexpected_exception_handler,
    validation_handler,
)
from task_api.common.opentelemetry import setup_opentelemetry
from task_api.common.redis import create_redis_client
from task_api.config import get_settings
from task_api.healthcheck.router import router as health_router
from task_api.tasks.router import router as tasks_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.redis_client = create_redis_client(settings.REDIS_URL)
    app.state.db_engine = None
    if settings.STORE_BACKEND == "postgres":
        app.state.db_engine = create_db_engine(settings.POSTGRES_URL)
        init_database(app.state.db_engine)

    app.state.response_cache = ResponseCache(ttl_seconds=settings.CACHE_TTL)
    purge_task = asyncio.create_task(
        app.state.response_cache.run_periodic_purge(settings.CACHE_CHECK_PERIOD)
    )
    logger.info(
        f"Task API started with {settings.STORE_BACKEND} backend, cache TTL {settings.CACHE_TTL}s"
    )

    yield

    purge_task.cancel()
    with suppress(asyncio.CancelledError):
        await purge_task
    app.state.response_cache.clear()
    if app.state.db_engine is not None:
        app.state.db_engine.dispose()
    app.state.redis_client.close()
    if tracer_provider is not None:
        tracer_provider.shutdown()


app = FastAPI(
    title=settings.API_NAME,
    summary=settings.API_SUMMARY,
    lifespan=lifespan,
    responses={
        **internal_error_response,
        **request_validation_error_response,
    },
    version=settings.TASK_API_VERSION,
)

tracer_provider: TracerProvider | None = None
if settings.OTEL_ENABLED:
    tracer_provider = setup_opentelemetry(app, settings)

if settings.CORS_ENABLED:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.exception_handler(RequestValidationError)(request_validation_exception_handler)
app.exception_handler(AuthException)(auth_exception_handler)
app.exception_handler(ValidationException)(validation_handler)
app.exception_handler(ResourceNotFoundException)(resource_not_found_handler)
app.exception_handler(SQLAlchemyError)(store_exception_handler)
app.exception_handler(RedisError)(store_exception_handler)
app.exception_handler(Exception)(unexpected_exception_handler)


app.include_router(health_router)
app.include_router(tasks_router, prefix=settings.API_PREFIX)
