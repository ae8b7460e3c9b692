"""
Stock Balance Service
Presentation service for quantity-on-hand listings and the low-stock report.
"""

from typing import Any, Dict, Optional
from flask_sqlalchemy.pagination import Pagination
from app.data.core.item import Item
from app.data.core.location import Location
from app.data.inventory.stock_balance import StockBalance


class StockBalanceService:
    """
    Read-only queries over StockBalance. Balances are always read from the
    database, never cached.
    """

    @staticmethod
    def get_list_data(
        page: int = 1,
        per_page: int = 50,
        item_id: Optional[int] = None,
        location_id: Optional[int] = None,
        property_id: Optional[int] = None,
        include_zero: bool = True
    ) -> Pagination:
        """
        Get paginated balances ordered by item name, then location name.
        """
        query = (
            StockBalance.query
            .join(Item, Item.id == StockBalance.item_id)
            .join(Location, Location.id == StockBalance.location_id)
        )

        if item_id:
            query = query.filter(StockBalance.item_id == item_id)

        if location_id:
            query = query.filter(StockBalance.location_id == location_id)

        if property_id:
            query = query.filter(Location.property_id == property_id)

        if not include_zero:
            query = query.filter(StockBalance.qty_on_hand > 0)

        query = query.order_by(Item.name, Location.name)

        return query.paginate(page=page, per_page=per_page, error_out=False)

    @staticmethod
    def get_low_stock(
        page: int = 1,
        per_page: int = 100,
        property_id: Optional[int] = None
    ) -> Pagination:
        """
        Balances at or below their item's reorder level.

        Items without a reorder level are never reported.
        """
        query = (
            StockBalance.query
            .join(Item, Item.id == StockBalance.item_id)
            .join(Location, Location.id == StockBalance.location_id)
            .filter(Item.reorder_level.isnot(None))
            .filter(Item.is_active.is_(True))
            .filter(StockBalance.qty_on_hand <= Item.reorder_level)
        )

        if property_id:
            query = query.filter(Location.property_id == property_id)

        query = query.order_by(StockBalance.qty_on_hand, Item.name)

        return query.paginate(page=page, per_page=per_page, error_out=False)

    @staticmethod
    def serialize(balance: StockBalance) -> Dict[str, Any]:
        return {
            'id': balance.id,
            'item_id': balance.item_id,
            'item_name': balance.item.name,
            'unit': balance.item.unit,
            'location_id': balance.location_id,
            'location_name': balance.location.name,
            'qty_on_hand': str(balance.qty_on_hand),
            'reorder_level': str(balance.item.reorder_level) if balance.item.reorder_level is not None else None,
            'version': balance.version,
        }
