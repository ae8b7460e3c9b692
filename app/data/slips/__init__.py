"""
Slip models: header, lines, signature and the slip number counter
"""

from app.data.slips.slip import Slip
from app.data.slips.slip_line import SlipLine
from app.data.slips.signature import Signature
from app.data.slips.slip_sequence import SlipSequence

__all__ = [
    'Slip',
    'SlipLine',
    'Signature',
    'SlipSequence',
]
