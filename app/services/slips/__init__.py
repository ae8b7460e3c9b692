"""
Slip Services
Presentation services for slip read-back and listings.
"""

from .slip_service import SlipService

__all__ = [
    'SlipService',
]
