import logging
from collections.abc import Mapping
from typing import Any
from uuid import uuid4

from task_api.audit.schemas import AuditAction, EntityType
from task_api.audit.service import AuditService
from task_api.auth.schemas import Claims
from task_api.cache.service import ResponseCache
from task_api.common.current_datetime import get_current_datetime
from task_api.common.exceptions import ValidationException
from task_api.tasks.query import build_task_query
from task_api.tasks.schemas import (
    CreateTaskRequest,
    DeleteTaskResponse,
    Task,
    TaskDetail,
    TaskListResponse,
    TaskStatus,
    TaskSummary,
    TaskUpdate,
    UpdateTaskRequest,
)
from task_api.tasks.store.base import TaskStore

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(
        self,
        *,
        task_store: TaskStore,
        response_cache: ResponseCache,
        audit_service: AuditService,
        cache_prefix: str,
    ) -> None:
        self.task_store = task_store
        self.response_cache = response_cache
        self.audit_service = audit_service
        self.cache_prefix = cache_prefix

    def _map_summary(self, task: Task) -> TaskSummary:
        return TaskSummary(
            id=task.id,
            title=task.title,
            status=task.status,
            due_date=task.due_date,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )

    def _map_detail(self, task: Task) -> TaskDetail:
        return TaskDetail(
            id=task.id,
            title=task.title,
            description=task.description,
            status=task.status,
            due_date=task.due_date,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )

    def _parse_status(self, status: str | None) -> TaskStatus | None:
        if not status:
            return None
        try:
            return TaskStatus(status)
        except ValueError as e:
            raise ValidationException("Invalid status") from e

    def _invalidate(self, task_id: str | None = None) -> None:
        self.response_cache.invalidate(self.cache_prefix)
        if task_id:
            self.response_cache.invalidate(f"{self.cache_prefix}/{task_id}")

    def list_tasks(
        self, claims: Claims, cache_key: str, params: Mapping[str, str]
    ) -> dict[str, Any]:
        cached = self.response_cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for {cache_key}")
            return cached

        query = build_task_query(params, owner_id=claims.sub)
        result = self.task_store.list_tasks(query)

        payload = TaskListResponse(
            tasks=[self._map_summary(task) for task in result.tasks],
            page=query.page,
            limit=query.limit,
            total=result.total,
        ).model_dump(mode="json", by_alias=True)
        self.response_cache.set(cache_key, payload)

        logger.info(f"Retrieved {len(result.tasks)} tasks for user {claims.username}")
        return payload

    def get_task(self, claims: Claims, cache_key: str, task_id: str) -> dict[str, Any]:
        cached = self.response_cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for {cache_key}")
            return cached

        task = self.task_store.get_task(task_id, owner_id=claims.sub)

        payload = self._map_detail(task).model_dump(mode="json", by_alias=True)
        self.response_cache.set(cache_key, payload)

        logger.info(f"Retrieved task {task.id} for user {claims.username}")
        return payload

    def create_task(self, claims: Claims, task_input: CreateTaskRequest) -> TaskDetail:
        if not task_input.title or not task_input.title.strip():
            raise ValidationException("Title is required")

        status = self._parse_status(task_input.status)
        timestamp = get_current_datetime()

        task = self.task_store.create_task(
            Task(
                id=str(uuid4()),
                title=task_input.title,
                description=task_input.description,
                status=status or TaskStatus.PENDING,
                due_date=task_input.due_date,
                owner_id=claims.sub,
                created_at=timestamp,
                updated_at=timestamp,
            )
        )

        self._invalidate()
        self.audit_service.record(
            action=AuditAction.CREATE,
            entity_type=EntityType.TASK,
            entity_id=task.id,
            user_id=claims.sub,
            username=claims.username,
            details=f"Created task: {task.title}",
        )

        logger.info(f"Task created: {task.title} by user {claims.username}")
        return self._map_detail(task)

    def update_task(
        self, claims: Claims, task_id: str, task_input: UpdateTaskRequest
    ) -> TaskDetail:
        status = self._parse_status(task_input.status)
        provided = task_input.model_fields_set

        changes: dict[str, Any] = {}
        # An empty title leaves the current one in place
        if task_input.title:
            changes["title"] = task_input.title
        if "description" in provided:
            changes["description"] = task_input.description
        if status:
            changes["status"] = status
        if "due_date" in provided:
            changes["due_date"] = task_input.due_date

        task = self.task_store.update_task(
            task_id,
            owner_id=claims.sub,
            updates=TaskUpdate(**changes),
            timestamp=get_current_datetime(),
        )

        self._invalidate(task_id)
        self.audit_service.record(
            action=AuditAction.UPDATE,
            entity_type=EntityType.TASK,
            entity_id=task.id,
            user_id=claims.sub,
            username=claims.username,
            details=f"Updated task: {task.title}",
        )

        logger.info(f"Updated task {task.id} by user {claims.username}")
        return self._map_detail(task)

    def delete_task(self, claims: Claims, task_id: str) -> DeleteTaskResponse:
        task = self.task_store.delete_task(task_id, owner_id=claims.sub)

        self._invalidate(task_id)
        self.audit_service.record(
            action=AuditAction.DELETE,
            entity_type=EntityType.TASK,
            entity_id=task_id,
            user_id=claims.sub,
            username=claims.username,
            details=f"Deleted task: {task.title}",
        )

        logger.info(f"Deleted task {task_id} by user {claims.username}")
        return DeleteTaskResponse(message="Task successfully deleted")
