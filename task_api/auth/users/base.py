from abc import ABC, abstractmethod
from datetime import datetime

from task_api.auth.schemas import User


class UserStore(ABC):
    @abstractmethod
    def get_user(self, user_id: str) -> User | None:
        pass

    @abstractmethod
    def create_user(self, id: str, username: str, timestamp: datetime) -> User:
        pass
