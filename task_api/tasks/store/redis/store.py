from datetime import datetime
from typing import Any

from task_api.common.current_datetime import as_utc
from task_api.common.exceptions import ResourceNotFoundException, ResourceType
from task_api.common.redis import RedisClient, build_key
from task_api.tasks.schemas import (
    SortDirection,
    Task,
    TaskQuery,
    TaskQueryResult,
    TaskUpdate,
)
from task_api.tasks.store.base import TaskStore


class RedisTaskStore(TaskStore):
    """
    Stores each task as a JSON document with a per-owner index set.

    Filtering, sorting and paging run in Python over the owner's tasks.
    """

    def __init__(self, *, redis_client: RedisClient, key_prefix: str):
        self.client = redis_client
        self.key_prefix = key_prefix

    def _get_task_key(self, task_id: str) -> str:
        return build_key(self.key_prefix, task_id)

    def _get_owner_key(self, owner_id: str) -> str:
        return build_key(self.key_prefix, "owner", owner_id)

    def _matches(self, task: Task, query: TaskQuery) -> bool:
        if query.status is not None and task.status.value != query.status:
            return False

        if query.has_due_date_range:
            if task.due_date is None:
                return False
            if query.due_date_after and task.due_date < query.due_date_after:
                return False
            if query.due_date_before and task.due_date > query.due_date_before:
                return False

        if query.search:
            needle = query.search.casefold()
            haystack = f"{task.title} {task.description or ''}".casefold()
            if needle not in haystack:
                return False

        return True

    def _sort_key(self, query: TaskQuery):
        field = query.sort_field.value

        def key(task: Task) -> tuple[Any, ...]:
            value = getattr(task, field)
            if hasattr(value, "value"):
                value = value.value
            # Missing values sort before present ones
            return (value is not None, value, task.id)

        return key

    def create_task(self, task: Task) -> Task:
        self.client.set(self._get_task_key(task.id), task.model_dump_json())
        self.client.sadd(self._get_owner_key(task.owner_id), task.id)
        return task

    def get_task(self, task_id: str, owner_id: str) -> Task:
        task_json = self.client.get(self._get_task_key(task_id))
        if not task_json:
            raise ResourceNotFoundException(ResourceType.TASK, task_id)

        task = Task.model_validate_json(task_json)
        if task.owner_id != owner_id:
            raise ResourceNotFoundException(ResourceType.TASK, task_id)

        return task

    def update_task(
        self,
        task_id: str,
        owner_id: str,
        updates: TaskUpdate,
        timestamp: datetime,
    ) -> Task:
        task = self.get_task(task_id, owner_id)

        changes: dict[str, Any] = {
            field: value
            for field, value in updates.model_dump(exclude_unset=True).items()
            if value is not None or field in ("description", "due_date")
        }
        if changes.get("due_date"):
            changes["due_date"] = as_utc(changes["due_date"])
        changes["updated_at"] = as_utc(timestamp)

        updated_task = Task.model_validate({**task.model_dump(), **changes})
        self.client.set(self._get_task_key(task_id), updated_task.model_dump_json())
        return updated_task

    def delete_task(self, task_id: str, owner_id: str) -> Task:
        task = self.get_task(task_id, owner_id)
        self.client.delete(self._get_task_key(task_id))
        self.client.srem(self._get_owner_key(owner_id), task_id)
        return task

    def list_tasks(self, query: TaskQuery) -> TaskQueryResult:
        task_ids = sorted(self.client.smembers(self._get_owner_key(query.owner_id)))
        if not task_ids:
            return TaskQueryResult(tasks=[], total=0)

        documents = self.client.mget([self._get_task_key(id) for id in task_ids])
        tasks = [
            Task.model_validate_json(document) for document in documents if document
        ]
        matching = [task for task in tasks if self._matches(task, query)]
        matching.sort(
            key=self._sort_key(query),
            reverse=query.sort_direction == SortDirection.DESC,
        )

        return TaskQueryResult(
            tasks=matching[query.offset : query.offset + query.limit],
            total=len(matching),
        )
