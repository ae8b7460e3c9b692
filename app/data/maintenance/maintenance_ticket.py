from app.data.core.user_created_base import UserCreatedBase
from app.data.core.constants import TicketStatus
from app import db
from datetime import datetime

class MaintenanceTicket(UserCreatedBase):
    """
    Repair ticket for one asset.

    While a ticket is open the asset is UNDER_MAINTENANCE and cannot be
    issued. Status changes go through MaintenanceContext.
    """
    __tablename__ = 'maintenance_tickets'

    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id'), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default=TicketStatus.REPORTED)
    problem = db.Column(db.Text, nullable=False)
    vendor_name = db.Column(db.String(160), nullable=True)
    estimated_cost = db.Column(db.Numeric(12, 2), nullable=True)
    actual_cost = db.Column(db.Numeric(12, 2), nullable=True)
    opened_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    closed_at = db.Column(db.DateTime, nullable=True)

    # Relationships
    asset = db.relationship('Asset')
    logs = db.relationship('MaintenanceLog', back_populates='ticket', order_by='MaintenanceLog.id')

    @property
    def is_open(self):
        return self.status not in TicketStatus.TERMINAL

    def __repr__(self):
        return f'<MaintenanceTicket {self.id} asset={self.asset_id} {self.status}>'
