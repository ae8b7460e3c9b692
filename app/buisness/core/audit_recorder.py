"""
Audit Recorder

Appends before/after snapshots for mutations of tracked entities. Events are
added to the caller's session and commit or roll back with the mutation they
describe.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Optional

from app import db
from app.data.core.audit_event import AuditEvent
from app.data.core.constants import AuditAction, AuditEntity


def _json_safe(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_json_safe(v) for v in value]
    return value


class AuditRecorder:

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    @staticmethod
    def snapshot(model, fields: Iterable[str]) -> dict:
        """Capture the named attributes of ``model`` as a JSON-safe dict"""
        return {field: _json_safe(getattr(model, field)) for field in fields}

    def write_audit_event(
        self,
        entity_type: str,
        entity_id: int,
        action: str,
        old_value: Optional[dict] = None,
        new_value: Optional[dict] = None,
        actor_id: Optional[int] = None,
    ) -> AuditEvent:
        """
        Append an audit event.

        Raises:
            ValueError: unknown entity/action, a CREATE carrying an old value,
                or a DELETE carrying a new value
        """
        if entity_type not in AuditEntity.ALL:
            raise ValueError(f"Unknown audit entity type: {entity_type}")
        if action not in AuditAction.ALL:
            raise ValueError(f"Unknown audit action: {action}")
        if action == AuditAction.CREATE and old_value is not None:
            raise ValueError("CREATE audit events cannot carry an old value")
        if action == AuditAction.DELETE and new_value is not None:
            raise ValueError("DELETE audit events cannot carry a new value")

        event = AuditEvent(
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            old_value=_json_safe(old_value) if old_value is not None else None,
            new_value=_json_safe(new_value) if new_value is not None else None,
            actor_id=actor_id,
        )
        self.session.add(event)
        return event
