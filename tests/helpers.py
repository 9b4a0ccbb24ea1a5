from datetime import datetime, timezone

from task_api.tasks.schemas import Task, TaskStatus

JWT_SECRET = "test-secret"
ALICE_ID = "user-1"
BOB_ID = "user-2"


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_task(
    id: str,
    *,
    owner_id: str = "user-1",
    title: str | None = None,
    description: str | None = None,
    status: TaskStatus = TaskStatus.PENDING,
    due_date: datetime | None = None,
    created_at: datetime | None = None,
) -> Task:
    created_at = created_at or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    return Task(
        id=id,
        title=title or f"Task {id}",
        description=description,
        status=status,
        due_date=due_date,
        owner_id=owner_id,
        created_at=created_at,
        updated_at=created_at,
    )
