"""
Inventory movement policies.
"""

from app.buisness.inventory.policies.asset_movability import AssetMovabilityPolicy

__all__ = [
    'AssetMovabilityPolicy',
]
