from app import db
from datetime import datetime
from app.buisness.core.data_insertion_mixin import DataInsertionMixin
from app.data.core.append_only import AppendOnlyMixin
from app.data.core.constants import SignatureMethod

class Signature(AppendOnlyMixin, DataInsertionMixin, db.Model):
    __tablename__ = 'signatures'

    id = db.Column(db.Integer, primary_key=True)
    slip_id = db.Column(db.Integer, db.ForeignKey('slips.id'), nullable=False, unique=True)
    signed_by_name = db.Column(db.String(120), nullable=False)
    signed_by_user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    method = db.Column(db.String(10), nullable=False, default=SignatureMethod.TYPED)
    signed_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    slip = db.relationship('Slip', back_populates='signature')
    signed_by_user = db.relationship('User')

    def __repr__(self):
        return f'<Signature slip={self.slip_id} by {self.signed_by_name}>'
