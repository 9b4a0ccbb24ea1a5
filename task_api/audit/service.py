import logging
from fastapi import BackgroundTasks
from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError

from task_api.audit.base import AuditSink
from task_api.audit.schemas import AuditAction, AuditEvent, EntityType
from task_api.common.current_datetime import get_current_datetime

logger = logging.getLogger(__name__)


class AuditService:
    """Schedules audit events to be written after the response is sent."""

    def __init__(
        self,
        *,
        audit_sink: AuditSink,
        background_tasks: BackgroundTasks,
        enabled: bool = True,
    ) -> None:
        self.audit_sink = audit_sink
        self.background_tasks = background_tasks
        self.enabled = enabled

    def record(
        self,
        *,
        action: AuditAction,
        entity_type: EntityType,
        entity_id: str,
        user_id: str,
        username: str,
        details: str | None = None,
    ) -> None:
        if not self.enabled:
            return

        event = AuditEvent(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=user_id,
            username=username,
            details=details,
            timestamp=get_current_datetime(),
        )
        self.background_tasks.add_task(self.write_event, event)

    def write_event(self, event: AuditEvent) -> None:
        try:
            self.audit_sink.write_event(event)
        except (SQLAlchemyError, RedisError):
            logger.exception(
                f"Failed to write audit event {event.action.value} for {event.entity_id}"
            )
