from datetime import datetime, timedelta, timezone
import pytest
from sqlalchemy import Engine

from task_api.common.exceptions import ResourceNotFoundException
from task_api.tasks.schemas import (
    SortDirection,
    SortField,
    TaskQuery,
    TaskStatus,
    TaskUpdate,
)
from task_api.tasks.store.postgres.store import PostgresTaskStore
from tests.helpers import make_task

TEST_TIMESTAMP = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
UPDATED_TIMESTAMP = datetime(2024, 1, 1, 13, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def task_store(db_engine: Engine) -> PostgresTaskStore:
    return PostgresTaskStore(db_engine)


def test_create_and_get_task(task_store: PostgresTaskStore) -> None:
    task = make_task(
        "t1",
        title="Buy milk",
        description="2 litres",
        due_date=datetime(2024, 1, 5, tzinfo=timezone.utc),
    )

    created = task_store.create_task(task)
    fetched = task_store.get_task("t1", owner_id="user-1")

    assert created == task
    assert fetched == task


def test_get_task_scoped_by_owner(task_store: PostgresTaskStore) -> None:
    task_store.create_task(make_task("t1", owner_id="user-1"))

    with pytest.raises(ResourceNotFoundException) as exc_info:
        task_store.get_task("t1", owner_id="user-2")

    assert str(exc_info.value) == "Task not found"


def test_get_missing_task(task_store: PostgresTaskStore) -> None:
    with pytest.raises(ResourceNotFoundException):
        task_store.get_task("missing", owner_id="user-1")


def test_update_applies_only_provided_fields(task_store: PostgresTaskStore) -> None:
    task_store.create_task(
        make_task(
            "t1",
            title="Original",
            description="Keep me?",
            due_date=datetime(2024, 1, 5, tzinfo=timezone.utc),
        )
    )

    updated = task_store.update_task(
        "t1",
        owner_id="user-1",
        updates=TaskUpdate(status=TaskStatus.IN_PROGRESS, description=None),
        timestamp=UPDATED_TIMESTAMP,
    )

    assert updated.title == "Original"
    assert updated.description is None
    assert updated.status == TaskStatus.IN_PROGRESS
    assert updated.due_date == datetime(2024, 1, 5, tzinfo=timezone.utc)
    assert updated.owner_id == "user-1"
    assert updated.created_at == TEST_TIMESTAMP
    assert updated.updated_at == UPDATED_TIMESTAMP
    assert task_store.get_task("t1", owner_id="user-1") == updated


def test_update_other_owner_not_found(task_store: PostgresTaskStore) -> None:
    task_store.create_task(make_task("t1", owner_id="user-1", title="Mine"))

    with pytest.raises(ResourceNotFoundException):
        task_store.update_task(
            "t1",
            owner_id="user-2",
            updates=TaskUpdate(title="Stolen"),
            timestamp=UPDATED_TIMESTAMP,
        )

    assert task_store.get_task("t1", owner_id="user-1").title == "Mine"


def test_delete_task(task_store: PostgresTaskStore) -> None:
    task_store.create_task(make_task("t1", title="Doomed"))

    deleted = task_store.delete_task("t1", owner_id="user-1")

    assert deleted.title == "Doomed"
    with pytest.raises(ResourceNotFoundException):
        task_store.get_task("t1", owner_id="user-1")


def test_delete_other_owner_not_found(task_store: PostgresTaskStore) -> None:
    task_store.create_task(make_task("t1", owner_id="user-1"))

    with pytest.raises(ResourceNotFoundException):
        task_store.delete_task("t1", owner_id="user-2")

    assert task_store.get_task("t1", owner_id="user-1").id == "t1"


def test_list_tasks_scoped_to_owner(task_store: PostgresTaskStore) -> None:
    task_store.create_task(make_task("t1", owner_id="user-1"))
    task_store.create_task(make_task("t2", owner_id="user-2"))

    result = task_store.list_tasks(TaskQuery(owner_id="user-1"))

    assert [task.id for task in result.tasks] == ["t1"]
    assert result.total == 1


def test_list_tasks_status_filter(task_store: PostgresTaskStore) -> None:
    task_store.create_task(make_task("t1", status=TaskStatus.COMPLETED))
    task_store.create_task(make_task("t2", status=TaskStatus.PENDING))

    result = task_store.list_tasks(TaskQuery(owner_id="user-1", status="Completed"))

    assert [task.id for task in result.tasks] == ["t1"]


def test_list_tasks_due_date_range_is_inclusive(task_store: PostgresTaskStore) -> None:
    task_store.create_task(make_task("start", due_date=datetime(2024, 1, 1, tzinfo=timezone.utc)))
    task_store.create_task(make_task("middle", due_date=datetime(2024, 1, 15, tzinfo=timezone.utc)))
    task_store.create_task(make_task("end", due_date=datetime(2024, 1, 31, tzinfo=timezone.utc)))
    task_store.create_task(make_task("late", due_date=datetime(2024, 2, 1, tzinfo=timezone.utc)))
    task_store.create_task(make_task("undated"))

    result = task_store.list_tasks(
        TaskQuery(
            owner_id="user-1",
            due_date_after=datetime(2024, 1, 1, tzinfo=timezone.utc),
            due_date_before=datetime(2024, 1, 31, tzinfo=timezone.utc),
            sort_field=SortField.DUE_DATE,
            sort_direction=SortDirection.ASC,
        )
    )

    assert [task.id for task in result.tasks] == ["start", "middle", "end"]
    assert result.total == 3


def test_list_tasks_single_bound_excludes_undated(task_store: PostgresTaskStore) -> None:
    task_store.create_task(make_task("dated", due_date=datetime(2024, 3, 1, tzinfo=timezone.utc)))
    task_store.create_task(make_task("undated"))

    result = task_store.list_tasks(
        TaskQuery(
            owner_id="user-1",
            due_date_after=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
    )

    assert [task.id for task in result.tasks] == ["dated"]


def test_list_tasks_search(task_store: PostgresTaskStore) -> None:
    task_store.create_task(make_task("t1", title="Buy milk"))
    task_store.create_task(make_task("t2", title="Call mum", description="About the MILK"))
    task_store.create_task(make_task("t3", title="Walk dog"))

    result = task_store.list_tasks(
        TaskQuery(
            owner_id="user-1",
            search="milk",
            sort_field=SortField.TITLE,
            sort_direction=SortDirection.ASC,
        )
    )

    assert [task.id for task in result.tasks] == ["t1", "t2"]


def test_list_tasks_sort_and_paginate(task_store: PostgresTaskStore) -> None:
    for i in range(5):
        task_store.create_task(
            make_task(f"t{i}", created_at=TEST_TIMESTAMP + timedelta(minutes=i))
        )

    first_page = task_store.list_tasks(TaskQuery(owner_id="user-1", page=1, limit=2))
    last_page = task_store.list_tasks(TaskQuery(owner_id="user-1", page=3, limit=2))

    assert [task.id for task in first_page.tasks] == ["t4", "t3"]
    assert [task.id for task in last_page.tasks] == ["t0"]
    assert first_page.total == 5
    assert last_page.total == 5


def test_list_tasks_sort_by_title_ascending(task_store: PostgresTaskStore) -> None:
    task_store.create_task(make_task("t1", title="Charlie"))
    task_store.create_task(make_task("t2", title="Alpha"))
    task_store.create_task(make_task("t3", title="Bravo"))

    result = task_store.list_tasks(
        TaskQuery(
            owner_id="user-1",
            sort_field=SortField.TITLE,
            sort_direction=SortDirection.ASC,
        )
    )

    assert [task.title for task in result.tasks] == ["Alpha", "Bravo", "Charlie"]


def test_list_tasks_page_past_end(task_store: PostgresTaskStore) -> None:
    task_store.create_task(make_task("t1"))

    result = task_store.list_tasks(
        TaskQuery(owner_id="user-1", page=99999999999999999999, limit=10)
    )

    assert result.tasks == []
    assert result.total == 1


@pytest.mark.parametrize(
    ("search", "expected"),
    [("100%", ["t1"]), ("a_b", ["t3"]), ("\\", ["t4"])],
)
def test_list_tasks_search_treats_wildcards_literally(
    task_store: PostgresTaskStore, search: str, expected: list[str]
) -> None:
    task_store.create_task(make_task("t1", title="100% done"))
    task_store.create_task(make_task("t2", title="1000 done"))
    task_store.create_task(make_task("t3", title="a_b"))
    task_store.create_task(make_task("t4", title="back\\slash"))
    task_store.create_task(make_task("t5", title="axb"))

    result = task_store.list_tasks(TaskQuery(owner_id="user-1", search=search))

    assert [task.id for task in result.tasks] == expected
