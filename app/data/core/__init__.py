"""
Core models package: users, properties, locations, items, assets and the audit trail
"""

from .user_info.user import User
from .property import Property
from .location import Location
from .item import Item
from .asset import Asset
from .audit_event import AuditEvent

__all__ = [
    'User',
    'Property',
    'Location',
    'Item',
    'Asset',
    'AuditEvent',
]
