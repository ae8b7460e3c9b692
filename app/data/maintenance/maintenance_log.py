from app import db
from datetime import datetime
from app.buisness.core.data_insertion_mixin import DataInsertionMixin
from app.data.core.append_only import AppendOnlyMixin

class MaintenanceLog(AppendOnlyMixin, DataInsertionMixin, db.Model):
    __tablename__ = 'maintenance_logs'

    id = db.Column(db.Integer, primary_key=True)
    ticket_id = db.Column(db.Integer, db.ForeignKey('maintenance_tickets.id'), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False)
    note = db.Column(db.Text, nullable=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    ticket = db.relationship('MaintenanceTicket', back_populates='logs')

    def __repr__(self):
        return f'<MaintenanceLog ticket={self.ticket_id} {self.status}>'
