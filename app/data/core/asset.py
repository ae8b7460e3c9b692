from app.data.core.user_created_base import UserCreatedBase
from app.data.core.constants import Condition
from app import db

class Asset(UserCreatedBase):
    """
    A single tagged physical unit of an ASSET item.

    `condition` and `current_location_id` change only through slips and the
    maintenance workflow.
    """
    __tablename__ = 'assets'

    tag = db.Column(db.String(60), unique=True, nullable=False)
    item_id = db.Column(db.Integer, db.ForeignKey('items.id'), nullable=False, index=True)
    property_id = db.Column(db.Integer, db.ForeignKey('properties.id'), nullable=True)
    serial_no = db.Column(db.String(120), nullable=True)
    condition = db.Column(db.String(30), nullable=False, default=Condition.GOOD)
    current_location_id = db.Column(db.Integer, db.ForeignKey('locations.id'), nullable=True)
    purchase_date = db.Column(db.Date, nullable=True)

    # Relationships (no backrefs)
    item = db.relationship('Item')
    property = db.relationship('Property')
    current_location = db.relationship('Location')

    def __repr__(self):
        return f'<Asset {self.tag} ({self.condition})>'
