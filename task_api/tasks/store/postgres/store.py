from datetime import datetime
from typing import Any
from sqlalchemy import ColumnElement, Engine, func, or_
from sqlalchemy.orm import sessionmaker

from task_api.common.current_datetime import as_utc
from task_api.common.exceptions import ResourceNotFoundException, ResourceType
from task_api.tasks.schemas import (
    SortDirection,
    Task,
    TaskQuery,
    TaskQueryResult,
    TaskStatus,
    TaskUpdate,
)
from task_api.tasks.store.base import TaskStore
from task_api.tasks.store.postgres.model import TaskModel

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the search term matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )


class PostgresTaskStore(TaskStore):
    def __init__(self, engine: Engine):
        self.engine = engine
        self.Session = sessionmaker(bind=engine)

    def _map_task(self, task: TaskModel) -> Task:
        return Task(
            id=task.id,
            title=task.title,
            description=task.description,
            status=TaskStatus(task.status),
            due_date=as_utc(task.due_date) if task.due_date else None,
            owner_id=task.owner_id,
            created_at=as_utc(task.created_at),
            updated_at=as_utc(task.updated_at),
        )

    def _search_filter(self, search: str) -> ColumnElement[bool]:
        if self.engine.dialect.name == "postgresql":
            document = func.to_tsvector(
                "english",
                func.coalesce(TaskModel.title, "")
                + " "
                + func.coalesce(TaskModel.description, ""),
            )
            return document.op("@@")(func.websearch_to_tsquery("english", search))  # type: ignore

        pattern = f"%{escape_like(search)}%"
        return or_(
            TaskModel.title.ilike(pattern, escape=LIKE_ESCAPE),
            TaskModel.description.ilike(pattern, escape=LIKE_ESCAPE),
        )

    def _build_filters(self, query: TaskQuery) -> list[ColumnElement[bool]]:
        filters: list[ColumnElement[bool]] = [TaskModel.owner_id == query.owner_id]

        if query.status is not None:
            filters.append(TaskModel.status == query.status)
        if query.due_date_after is not None:
            filters.append(TaskModel.due_date >= as_utc(query.due_date_after))
        if query.due_date_before is not None:
            filters.append(TaskModel.due_date <= as_utc(query.due_date_before))
        if query.search:
            filters.append(self._search_filter(query.search))

        return filters

    def create_task(self, task: Task) -> Task:
        with self.Session() as session:
            new_task = TaskModel(
                id=task.id,
                title=task.title,
                description=task.description,
                status=task.status.value,
                due_date=as_utc(task.due_date) if task.due_date else None,
                owner_id=task.owner_id,
                created_at=as_utc(task.created_at),
                updated_at=as_utc(task.updated_at),
            )
            session.add(new_task)
            session.commit()
            return self._map_task(new_task)

    def get_task(self, task_id: str, owner_id: str) -> Task:
        with self.Session() as session:
            task = (
                session.query(TaskModel)
                .filter_by(id=task_id, owner_id=owner_id)
                .first()
            )

            if not task:
                raise ResourceNotFoundException(ResourceType.TASK, task_id)

            return self._map_task(task)

    def update_task(
        self,
        task_id: str,
        owner_id: str,
        updates: TaskUpdate,
        timestamp: datetime,
    ) -> Task:
        with self.Session() as session:
            task = (
                session.query(TaskModel)
                .filter_by(id=task_id, owner_id=owner_id)
                .first()
            )

            if not task:
                raise ResourceNotFoundException(ResourceType.TASK, task_id)

            changes: dict[str, Any] = updates.model_dump(exclude_unset=True)

            if "title" in changes and changes["title"] is not None:
                task.title = changes["title"]
            if "description" in changes:
                task.description = changes["description"]
            if "status" in changes and changes["status"] is not None:
                task.status = TaskStatus(changes["status"]).value
            if "due_date" in changes:
                due_date = changes["due_date"]
                task.due_date = as_utc(due_date) if due_date else None

            task.updated_at = as_utc(timestamp)
            session.commit()

            return self._map_task(task)

    def delete_task(self, task_id: str, owner_id: str) -> Task:
        with self.Session() as session:
            task = (
                session.query(TaskModel)
                .filter_by(id=task_id, owner_id=owner_id)
                .first()
            )

            if not task:
                raise ResourceNotFoundException(ResourceType.TASK, task_id)

            deleted = self._map_task(task)
            session.delete(task)
            session.commit()
            return deleted

    def list_tasks(self, query: TaskQuery) -> TaskQueryResult:
        with self.Session() as session:
            filters = self._build_filters(query)
            sort_column = getattr(TaskModel, query.sort_field.value)

            if query.sort_direction == SortDirection.ASC:
                order_by = [sort_column.asc(), TaskModel.id.asc()]
            else:
                order_by = [sort_column.desc(), TaskModel.id.desc()]

            total = session.query(TaskModel).filter(*filters).count()
            if query.offset >= total:
                return TaskQueryResult(tasks=[], total=total)

            results = (
                session.query(TaskModel)
                .filter(*filters)
                .order_by(*order_by)
                .offset(query.offset)
                .limit(query.limit)
                .all()
            )

            return TaskQueryResult(
                tasks=[self._map_task(task) for task in results],
                total=total,
            )
