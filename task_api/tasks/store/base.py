from abc import ABC, abstractmethod
from datetime import datetime

from task_api.tasks.schemas import Task, TaskQuery, TaskQueryResult, TaskUpdate


class TaskStore(ABC):
    """
    Persistence boundary for tasks.

    Every lookup is scoped by owner. A task that exists under another owner
    raises ``ResourceNotFoundException`` exactly like a missing one.
    """

    @abstractmethod
    def create_task(self, task: Task) -> Task:
        pass

    @abstractmethod
    def get_task(self, task_id: str, owner_id: str) -> Task:
        pass

    @abstractmethod
    def update_task(
        self,
        task_id: str,
        owner_id: str,
        updates: TaskUpdate,
        timestamp: datetime,
    ) -> Task:
        pass

    @abstractmethod
    def delete_task(self, task_id: str, owner_id: str) -> Task:
        pass

    @abstractmethod
    def list_tasks(self, query: TaskQuery) -> TaskQueryResult:
        pass
