"""
Inventory domain layer.

- stock_ledger - quantity on hand per (item, location)
- movement_recorder - append-only movement log
- policies/ - movement rules for assets
- ledger_validator - integrity checks over stored data
"""

from app.buisness.inventory.stock_ledger import StockLedger
from app.buisness.inventory.movement_recorder import MovementRecorder
from app.buisness.inventory.policies import AssetMovabilityPolicy

__all__ = [
    'StockLedger',
    'MovementRecorder',
    'AssetMovabilityPolicy',
]
