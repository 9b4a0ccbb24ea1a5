from abc import ABC, abstractmethod

from task_api.audit.schemas import AuditEvent


class AuditSink(ABC):
    @abstractmethod
    def write_event(self, event: AuditEvent) -> None:
        pass
