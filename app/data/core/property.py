from app.data.core.user_created_base import UserCreatedBase
from app import db

class Property(UserCreatedBase):
    __tablename__ = 'properties'

    name = db.Column(db.String(120), unique=True, nullable=False)
    address = db.Column(db.Text, nullable=True)
    is_active = db.Column(db.Boolean, default=True)

    # Relationships (no backrefs)
    locations = db.relationship('Location', back_populates='property', order_by='Location.name')

    def __repr__(self):
        return f'<Property {self.name}>'
