"""
Movement Log Service
Presentation service for movement history queries.
"""

from typing import Any, Dict, Optional, Tuple
from datetime import datetime
from flask_sqlalchemy.pagination import Pagination
from app.data.core.constants import MovementType
from app.data.inventory.movement_log import MovementLog


class MovementLogService:
    """
    Service for movement history presentation data.

    Provides methods for:
    - Building filtered, paginated movement queries
    - Serializing movements for JSON responses
    """

    @staticmethod
    def get_list_data(
        page: int = 1,
        per_page: int = 50,
        item_id: Optional[int] = None,
        asset_id: Optional[int] = None,
        location_id: Optional[int] = None,
        slip_id: Optional[int] = None,
        movement_type: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None
    ) -> Tuple[Pagination, Dict[str, Any]]:
        """
        Get paginated movements with filters, most recent first.

        Returns:
            Tuple of (pagination_object, form_options_dict)
        """
        query = MovementLog.query

        if item_id:
            query = query.filter_by(item_id=item_id)

        if asset_id:
            query = query.filter_by(asset_id=asset_id)

        if location_id:
            query = query.filter(
                (MovementLog.location_id == location_id)
                | (MovementLog.from_location_id == location_id)
                | (MovementLog.to_location_id == location_id)
            )

        if slip_id:
            query = query.filter_by(slip_id=slip_id)

        if movement_type:
            query = query.filter_by(movement_type=movement_type)

        if date_from:
            query = query.filter(MovementLog.created_at >= date_from)

        if date_to:
            query = query.filter(MovementLog.created_at <= date_to)

        query = query.order_by(MovementLog.created_at.desc(), MovementLog.id.desc())

        pagination = query.paginate(page=page, per_page=per_page, error_out=False)

        form_options = {
            'movement_types': list(MovementType.ALL)
        }

        return pagination, form_options

    @staticmethod
    def serialize(movement: MovementLog) -> Dict[str, Any]:
        data = movement.to_dict()
        data['item_name'] = movement.item.name if movement.item else None
        data['asset_tag'] = movement.asset.tag if movement.asset else None
        data['slip_no'] = movement.slip.slip_no if movement.slip else None
        return data
