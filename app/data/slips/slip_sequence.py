from app import db

class SlipSequence(db.Model):
    """Per-prefix counter for generated slip numbers (ISS, RET, TRF)"""
    __tablename__ = 'slip_sequences'

    prefix = db.Column(db.String(10), primary_key=True)
    current_value = db.Column(db.Integer, nullable=False, default=0)

    def __repr__(self):
        return f'<SlipSequence {self.prefix}={self.current_value}>'
