from app import db
from datetime import datetime
from app.buisness.core.data_insertion_mixin import DataInsertionMixin
from app.data.core.append_only import AppendOnlyMixin

class Slip(AppendOnlyMixin, DataInsertionMixin, db.Model):
    """
    Issue, return or transfer document.

    A slip is written once by SlipEngine together with its lines, signature,
    stock adjustments, movement logs and audit event, and is never edited.
    """
    __tablename__ = 'slips'

    id = db.Column(db.Integer, primary_key=True)
    slip_no = db.Column(db.String(40), unique=True, nullable=False)
    slip_type = db.Column(db.String(10), nullable=False, index=True)
    property_id = db.Column(db.Integer, db.ForeignKey('properties.id'), nullable=False, index=True)
    from_location_id = db.Column(db.Integer, db.ForeignKey('locations.id'), nullable=True)
    to_location_id = db.Column(db.Integer, db.ForeignKey('locations.id'), nullable=False)
    department = db.Column(db.String(20), nullable=False)
    requested_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    issued_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    received_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    source_slip_id = db.Column(db.Integer, db.ForeignKey('slips.id'), nullable=True, index=True)
    notes = db.Column(db.Text, nullable=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    # Relationships (no backrefs)
    property = db.relationship('Property')
    from_location = db.relationship('Location', foreign_keys=[from_location_id])
    to_location = db.relationship('Location', foreign_keys=[to_location_id])
    requested_by = db.relationship('User', foreign_keys=[requested_by_id])
    issued_by = db.relationship('User', foreign_keys=[issued_by_id])
    received_by = db.relationship('User', foreign_keys=[received_by_id])
    created_by = db.relationship('User', foreign_keys=[created_by_id])
    source_slip = db.relationship('Slip', remote_side=[id])
    lines = db.relationship('SlipLine', back_populates='slip', order_by='SlipLine.line_no')
    signature = db.relationship('Signature', back_populates='slip', uselist=False)

    def __repr__(self):
        return f'<Slip {self.slip_no} ({self.slip_type})>'
