"""
Slip Service
Presentation service for slip read-back and slip listings.
"""

from typing import Any, Dict, Optional, Tuple
from datetime import datetime
from flask_sqlalchemy.pagination import Pagination
from app import db
from app.buisness.core.errors import NotFoundError
from app.data.core.constants import Department, SlipType
from app.data.slips.slip import Slip


class SlipService:
    """
    Service for slip presentation data.

    Provides methods for:
    - Loading a slip with its lines and signature
    - Paginated slip lists with type/property/date filters
    """

    @staticmethod
    def get_slip(slip_id: int) -> Slip:
        slip = db.session.get(Slip, slip_id)
        if slip is None:
            raise NotFoundError('Slip', slip_id)
        return slip

    @staticmethod
    def get_list_data(
        page: int = 1,
        per_page: int = 50,
        slip_type: Optional[str] = None,
        property_id: Optional[int] = None,
        department: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None
    ) -> Tuple[Pagination, Dict[str, Any]]:
        """
        Get paginated slips, newest first.

        Returns:
            Tuple of (pagination_object, form_options_dict)
        """
        query = Slip.query

        if slip_type:
            query = query.filter_by(slip_type=slip_type)

        if property_id:
            query = query.filter_by(property_id=property_id)

        if department:
            query = query.filter_by(department=department)

        if date_from:
            query = query.filter(Slip.created_at >= date_from)

        if date_to:
            query = query.filter(Slip.created_at <= date_to)

        query = query.order_by(Slip.created_at.desc(), Slip.id.desc())

        pagination = query.paginate(page=page, per_page=per_page, error_out=False)

        form_options = {
            'slip_types': list(SlipType.ALL),
            'departments': list(Department.ALL),
        }

        return pagination, form_options

    @staticmethod
    def serialize_header(slip: Slip) -> Dict[str, Any]:
        return {
            'id': slip.id,
            'slip_no': slip.slip_no,
            'slip_type': slip.slip_type,
            'property_id': slip.property_id,
            'from_location_id': slip.from_location_id,
            'to_location_id': slip.to_location_id,
            'department': slip.department,
            'requested_by_id': slip.requested_by_id,
            'issued_by_id': slip.issued_by_id,
            'received_by_id': slip.received_by_id,
            'source_slip_id': slip.source_slip_id,
            'notes': slip.notes,
            'created_by_id': slip.created_by_id,
            'created_at': slip.created_at.isoformat() if slip.created_at else None,
        }

    @staticmethod
    def serialize(slip: Slip) -> Dict[str, Any]:
        """Full read-back: header, ordered lines and signature"""
        data = SlipService.serialize_header(slip)
        data['lines'] = [
            {
                'line_no': line.line_no,
                'item_id': line.item_id,
                'item_name': line.item.name if line.item else None,
                'asset_id': line.asset_id,
                'asset_tag': line.asset.tag if line.asset else None,
                'qty': str(line.qty) if line.qty is not None else None,
                'condition_at_move': line.condition_at_move,
                'new_condition': line.new_condition,
                'notes': line.notes,
            }
            for line in slip.lines
        ]
        signature = slip.signature
        data['signature'] = {
            'signed_by_name': signature.signed_by_name,
            'signed_by_user_id': signature.signed_by_user_id,
            'method': signature.method,
            'signed_at': signature.signed_at.isoformat() if signature.signed_at else None,
        } if signature is not None else None
        return data
