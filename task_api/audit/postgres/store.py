from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker

from task_api.audit.base import AuditSink
from task_api.audit.postgres.model import AuditLogModel
from task_api.audit.schemas import AuditEvent


class PostgresAuditSink(AuditSink):
    def __init__(self, engine: Engine):
        self.Session = sessionmaker(bind=engine)

    def write_event(self, event: AuditEvent) -> None:
        with self.Session() as session:
            session.add(
                AuditLogModel(
                    action=event.action.value,
                    entity_type=event.entity_type.value,
                    entity_id=event.entity_id,
                    user_id=event.user_id,
                    username=event.username,
                    details=event.details,
                    timestamp=event.timestamp,
                )
            )
            session.commit()
