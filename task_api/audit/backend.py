from sqlalchemy import Engine

from task_api.audit.base import AuditSink
from task_api.audit.postgres.store import PostgresAuditSink
from task_api.audit.redis.store import RedisAuditSink
from task_api.common.redis import RedisClient
from task_api.config import Settings


def get_audit_sink_backend(
    redis_client: RedisClient,
    engine: Engine | None,
    settings: Settings,
) -> AuditSink:
    if settings.STORE_BACKEND == "postgres":
        if engine is None:
            raise ValueError("Postgres backend selected but no database engine exists")
        return PostgresAuditSink(engine)
    elif settings.STORE_BACKEND == "redis":
        return RedisAuditSink(
            redis_client=redis_client,
            key_prefix=settings.AUDIT_NAMESPACE,
        )
    else:
        raise ValueError(f"Unsupported store backend: {settings.STORE_BACKEND}")
