from datetime import datetime
from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.exc import IntegrityError

from task_api.auth.schemas import User
from task_api.auth.users.base import UserStore
from task_api.auth.users.postgres.model import UserModel
from task_api.common.current_datetime import as_utc


class PostgresUserStore(UserStore):
    def __init__(self, engine: Engine):
        self.Session = sessionmaker(bind=engine)

    def _map_user(self, user: UserModel) -> User:
        return User(
            id=user.id,
            username=user.username,
            created_at=as_utc(user.created_at),
        )

    def get_user(self, user_id: str) -> User | None:
        with self.Session() as session:
            user = session.get(UserModel, user_id)
            return self._map_user(user) if user else None

    def create_user(self, id: str, username: str, timestamp: datetime) -> User:
        with self.Session() as session:
            user = UserModel(id=id, username=username, created_at=as_utc(timestamp))
            try:
                session.add(user)
                session.commit()
            except IntegrityError:
                session.rollback()
                raise
            return self._map_user(user)
