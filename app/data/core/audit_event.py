from app import db
from datetime import datetime
from app.buisness.core.data_insertion_mixin import DataInsertionMixin
from app.data.core.append_only import AppendOnlyMixin

class AuditEvent(AppendOnlyMixin, DataInsertionMixin, db.Model):
    """
    Before/after snapshot of a mutation to a tracked entity.

    Rows are written through AuditRecorder and never change afterwards.
    """
    __tablename__ = 'audit_events'
    __table_args__ = (
        db.Index('ix_audit_events_entity', 'entity_type', 'entity_id'),
    )

    id = db.Column(db.Integer, primary_key=True)
    entity_type = db.Column(db.String(20), nullable=False)
    entity_id = db.Column(db.Integer, nullable=False)
    action = db.Column(db.String(10), nullable=False)
    old_value = db.Column(db.JSON, nullable=True)
    new_value = db.Column(db.JSON, nullable=True)
    actor_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    actor = db.relationship('User')

    def __repr__(self):
        return f'<AuditEvent {self.entity_type}:{self.entity_id} {self.action}>'
