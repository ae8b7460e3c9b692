"""
Asset Search Service
Lookup used by slip forms to pick assets by tag or item name.
"""

from typing import Any, Dict, List, Optional
from app.data.core.asset import Asset
from app.data.core.item import Item


class AssetSearchService:
    """
    Case-insensitive substring search over asset tags and item names.
    """

    MAX_RESULTS = 50

    @staticmethod
    def search(query: Optional[str], item_type: Optional[str] = None) -> List[Asset]:
        """
        Search assets.

        Args:
            query: Text to match against the asset tag or item name
            item_type: Optional ItemType filter on the asset's item

        Returns:
            Up to MAX_RESULTS assets ordered by tag; empty for a blank query
        """
        query = (query or '').strip()
        if not query:
            return []

        pattern = f"%{query}%"
        assets = Asset.query.join(Item, Item.id == Asset.item_id).filter(
            Asset.tag.ilike(pattern) | Item.name.ilike(pattern)
        )

        if item_type:
            assets = assets.filter(Item.item_type == item_type)

        return assets.order_by(Asset.tag).limit(AssetSearchService.MAX_RESULTS).all()

    @staticmethod
    def serialize(asset: Asset) -> Dict[str, Any]:
        return {
            'id': asset.id,
            'tag': asset.tag,
            'item_id': asset.item_id,
            'item_name': asset.item.name,
            'condition': asset.condition,
            'current_location_name': asset.current_location.name if asset.current_location else None,
        }
