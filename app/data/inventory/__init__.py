"""
Stock ledger models

- StockBalance: quantity on hand per (item, location)
- MovementLog: append-only record of every physical or quantity change
"""

from app.data.inventory.stock_balance import StockBalance
from app.data.inventory.movement_log import MovementLog

__all__ = [
    'StockBalance',
    'MovementLog',
]
