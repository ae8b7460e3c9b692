"""
Slips business layer.

Main entry point: SlipEngine.create_slip

- slip_request: payload parsing into QuantityLine / AssetLine requests
- slip_numbers: ISS-/RET-/TRF- numbering
- return_policy: RETURN slips raised against an ISSUE slip
"""

from app.buisness.slips.slip_engine import SlipEngine
from app.buisness.slips.slip_request import SlipRequest, QuantityLine, AssetLine, SignatureRequest
from app.buisness.slips.slip_numbers import SlipNumberGenerator
from app.buisness.slips.return_policy import ReturnAgainstIssuePolicy

__all__ = [
    'SlipEngine',
    'SlipRequest',
    'QuantityLine',
    'AssetLine',
    'SignatureRequest',
    'SlipNumberGenerator',
    'ReturnAgainstIssuePolicy',
]
