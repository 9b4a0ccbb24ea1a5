from fastapi import Depends

from task_api.audit.dependencies import get_audit_service
from task_api.audit.service import AuditService
from task_api.cache.dependencies import get_response_cache
from task_api.cache.service import ResponseCache
from task_api.config import Settings, get_settings
from task_api.tasks.service import TaskService
from task_api.tasks.store.base import TaskStore
from task_api.tasks.store.dependencies import get_task_store

TASKS_ROUTE_PREFIX = "/tasks"


def get_task_service(
    task_store: TaskStore = Depends(get_task_store),
    response_cache: ResponseCache = Depends(get_response_cache),
    audit_service: AuditService = Depends(get_audit_service),
    settings: Settings = Depends(get_settings),
) -> TaskService:
    return TaskService(
        task_store=task_store,
        response_cache=response_cache,
        audit_service=audit_service,
        cache_prefix=f"{settings.API_PREFIX}{TASKS_ROUTE_PREFIX}",
    )
