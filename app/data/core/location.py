from app.data.core.user_created_base import UserCreatedBase
from app import db

class Location(UserCreatedBase):
    __tablename__ = 'locations'
    __table_args__ = (
        db.UniqueConstraint('property_id', 'name', name='uq_location_property_name'),
    )

    property_id = db.Column(db.Integer, db.ForeignKey('properties.id'), nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    floor = db.Column(db.String(40), nullable=True)
    room = db.Column(db.String(40), nullable=True)
    area = db.Column(db.String(80), nullable=True)
    is_active = db.Column(db.Boolean, default=True)

    property = db.relationship('Property', back_populates='locations')

    def __repr__(self):
        return f'<Location {self.name} (property {self.property_id})>'
