"""
Inventory Services
Presentation services for stock balances and movement history.
"""

from .stock_balance_service import StockBalanceService
from .movement_log_service import MovementLogService

__all__ = [
    'StockBalanceService',
    'MovementLogService',
]
