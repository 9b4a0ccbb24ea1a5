from datetime import datetime

from task_api.auth.schemas import User
from task_api.auth.users.base import UserStore
from task_api.common.current_datetime import as_utc
from task_api.common.redis import RedisClient, build_key


class RedisUserStore(UserStore):
    def __init__(self, *, redis_client: RedisClient, key_prefix: str):
        self.client = redis_client
        self.key_prefix = key_prefix

    def _get_user_key(self, user_id: str) -> str:
        return build_key(self.key_prefix, user_id)

    def get_user(self, user_id: str) -> User | None:
        user_json = self.client.get(self._get_user_key(user_id))
        if not user_json:
            return None
        return User.model_validate_json(user_json)

    def create_user(self, id: str, username: str, timestamp: datetime) -> User:
        user = User(id=id, username=username, created_at=as_utc(timestamp))
        self.client.set(self._get_user_key(id), user.model_dump_json())
        return user
