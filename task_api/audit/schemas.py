from datetime import datetime
from enum import Enum
from pydantic import BaseModel


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"


class EntityType(str, Enum):
    TASK = "TASK"
    USER = "USER"


class AuditEvent(BaseModel):
    action: AuditAction
    entity_type: EntityType
    entity_id: str
    user_id: str
    username: str
    details: str | None = None
    timestamp: datetime
