from app import db
from datetime import datetime
from app.buisness.core.data_insertion_mixin import DataInsertionMixin
from app.data.core.append_only import AppendOnlyMixin

class MovementLog(AppendOnlyMixin, DataInsertionMixin, db.Model):
    """
    Append-only record of every physical or quantity change.

    Conventions:
    - `qty_delta` is signed for stock moves and null for asset-only moves.
    - `location_id` is the ledger location the delta was applied to; a quantity
      transfer writes one row for each side.
    - `slip_id` is null for maintenance moves.
    """
    __tablename__ = 'movement_logs'

    id = db.Column(db.Integer, primary_key=True)
    movement_type = db.Column(db.String(20), nullable=False)
    slip_id = db.Column(db.Integer, db.ForeignKey('slips.id'), nullable=True, index=True)
    item_id = db.Column(db.Integer, db.ForeignKey('items.id'), nullable=True, index=True)
    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id'), nullable=True, index=True)
    location_id = db.Column(db.Integer, db.ForeignKey('locations.id'), nullable=True)
    from_location_id = db.Column(db.Integer, db.ForeignKey('locations.id'), nullable=True)
    to_location_id = db.Column(db.Integer, db.ForeignKey('locations.id'), nullable=True)
    qty_delta = db.Column(db.Numeric(12, 2), nullable=True)
    condition = db.Column(db.String(30), nullable=True)
    note = db.Column(db.Text, nullable=True)
    created_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)

    # Relationships (no backrefs)
    slip = db.relationship('Slip')
    item = db.relationship('Item')
    asset = db.relationship('Asset')
    location = db.relationship('Location', foreign_keys=[location_id])
    from_location = db.relationship('Location', foreign_keys=[from_location_id])
    to_location = db.relationship('Location', foreign_keys=[to_location_id])

    def __repr__(self):
        return f'<MovementLog {self.movement_type} slip={self.slip_id} delta={self.qty_delta}>'
