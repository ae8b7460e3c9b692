from app import db
from datetime import datetime
from decimal import Decimal
from sqlalchemy import event, select, func
from app.buisness.core.data_insertion_mixin import DataInsertionMixin
from app.buisness.core.errors import ValidationError

class StockBalance(DataInsertionMixin, db.Model):
    """
    Quantity on hand for one (item, location) pair.

    Conventions:
    - Rows are created lazily on the first movement into the pair.
    - `qty_on_hand` is only written by StockLedger.adjust_stock.
    - `version` is bumped on every update; a stale write raises StaleDataError.
    """
    __tablename__ = 'stock_balances'
    __table_args__ = (
        db.UniqueConstraint('item_id', 'location_id', name='uq_stock_balance_item_location'),
        db.CheckConstraint('qty_on_hand >= 0', name='ck_stock_balance_non_negative'),
    )

    id = db.Column(db.Integer, primary_key=True)
    item_id = db.Column(db.Integer, db.ForeignKey('items.id'), nullable=False, index=True)
    location_id = db.Column(db.Integer, db.ForeignKey('locations.id'), nullable=False, index=True)
    qty_on_hand = db.Column(db.Numeric(12, 2), nullable=False, default=Decimal('0'))
    version = db.Column(db.Integer, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __mapper_args__ = {'version_id_col': version}

    # Relationships (no backrefs)
    item = db.relationship('Item')
    location = db.relationship('Location')

    def __repr__(self):
        return f'<StockBalance item={self.item_id} location={self.location_id} qty={self.qty_on_hand}>'


def count_balance_references(connection, item_id, location_id):
    """
    Count slip lines and movement logs that reference an (item, location) pair.

    Takes a Connection so it can run inside flush-time mapper events.
    """
    from app.data.slips.slip import Slip
    from app.data.slips.slip_line import SlipLine
    from app.data.inventory.movement_log import MovementLog

    movement_count = connection.execute(
        select(func.count(MovementLog.id)).where(
            MovementLog.item_id == item_id,
            MovementLog.location_id == location_id,
        )
    ).scalar()

    line_count = connection.execute(
        select(func.count(SlipLine.id))
        .join(Slip, Slip.id == SlipLine.slip_id)
        .where(
            SlipLine.item_id == item_id,
            SlipLine.qty.isnot(None),
            (Slip.from_location_id == location_id) | (Slip.to_location_id == location_id),
        )
    ).scalar()

    return (movement_count or 0) + (line_count or 0)


@event.listens_for(StockBalance, 'before_delete')
def _guard_referenced_balance(mapper, connection, target):
    references = count_balance_references(connection, target.item_id, target.location_id)
    if references:
        raise ValidationError(
            'stock_balance',
            f"balance for item {target.item_id} at location {target.location_id} "
            f"is referenced by {references} slip line(s) or movement(s)",
        )
