from app.data.core.user_created_base import UserCreatedBase
from app.data.core.constants import ItemType
from app import db

class Item(UserCreatedBase):
    """
    Catalogue entry. STOCK items are counted in the stock ledger;
    ASSET items are tracked one physical unit at a time through Asset.
    """
    __tablename__ = 'items'

    name = db.Column(db.String(160), nullable=False, index=True)
    item_type = db.Column(db.String(10), nullable=False, default=ItemType.STOCK)
    unit = db.Column(db.String(20), nullable=False, default='pcs')
    reorder_level = db.Column(db.Numeric(12, 2), nullable=True)
    is_active = db.Column(db.Boolean, default=True)

    @property
    def is_stock(self):
        return self.item_type == ItemType.STOCK

    def __repr__(self):
        return f'<Item {self.name} ({self.item_type})>'
