from app import db
from app.buisness.core.data_insertion_mixin import DataInsertionMixin
from app.data.core.append_only import AppendOnlyMixin

class SlipLine(AppendOnlyMixin, DataInsertionMixin, db.Model):
    """
    One line of a slip: either a quantity of a STOCK item or one Asset.

    For asset lines `item_id` holds the asset's item for reporting and `qty`
    is null. `condition_at_move` is the asset condition observed when the
    line was applied.
    """
    __tablename__ = 'slip_lines'
    __table_args__ = (
        db.UniqueConstraint('slip_id', 'line_no', name='uq_slip_line_no'),
        db.CheckConstraint('qty IS NULL OR qty > 0', name='ck_slip_line_qty_positive'),
    )

    id = db.Column(db.Integer, primary_key=True)
    slip_id = db.Column(db.Integer, db.ForeignKey('slips.id'), nullable=False, index=True)
    line_no = db.Column(db.Integer, nullable=False)
    item_id = db.Column(db.Integer, db.ForeignKey('items.id'), nullable=False)
    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id'), nullable=True)
    qty = db.Column(db.Numeric(12, 2), nullable=True)
    condition_at_move = db.Column(db.String(30), nullable=True)
    new_condition = db.Column(db.String(30), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    # Relationships
    slip = db.relationship('Slip', back_populates='lines')
    item = db.relationship('Item')
    asset = db.relationship('Asset')

    @property
    def is_asset_line(self):
        return self.asset_id is not None

    def __repr__(self):
        return f'<SlipLine {self.slip_id}#{self.line_no}>'
