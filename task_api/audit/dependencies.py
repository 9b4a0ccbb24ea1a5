from fastapi import BackgroundTasks, Depends
from sqlalchemy import Engine

from task_api.audit.backend import get_audit_sink_backend
from task_api.audit.base import AuditSink
from task_api.audit.service import AuditService
from task_api.common.database import get_db_engine
from task_api.common.redis import RedisClient, get_redis_client
from task_api.config import Settings, get_settings


def get_audit_sink(
    redis_client: RedisClient = Depends(get_redis_client),
    engine: Engine | None = Depends(get_db_engine),
    settings: Settings = Depends(get_settings),
) -> AuditSink:
    return get_audit_sink_backend(redis_client, engine, settings)


def get_audit_service(
    background_tasks: BackgroundTasks,
    audit_sink: AuditSink = Depends(get_audit_sink),
    settings: Settings = Depends(get_settings),
) -> AuditService:
    return AuditService(
        audit_sink=audit_sink,
        background_tasks=background_tasks,
        enabled=settings.AUDIT_ENABLED,
    )
