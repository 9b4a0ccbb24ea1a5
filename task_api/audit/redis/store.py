from task_api.audit.base import AuditSink
from task_api.audit.schemas import AuditEvent
from task_api.common.redis import RedisClient


class RedisAuditSink(AuditSink):
    def __init__(self, *, redis_client: RedisClient, key_prefix: str):
        self.client = redis_client
        self.key_prefix = key_prefix

    def write_event(self, event: AuditEvent) -> None:
        self.client.rpush(self.key_prefix, event.model_dump_json())
