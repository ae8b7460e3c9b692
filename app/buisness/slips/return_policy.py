"""
Return Against Issue Policy

Validates a RETURN slip raised against an earlier ISSUE slip.
"""

from collections import defaultdict
from decimal import Decimal

from sqlalchemy import select, func

from app import db
from app.buisness.core.errors import NotFoundError, ValidationError
from app.buisness.inventory.stock_ledger import to_quantity
from app.data.core.constants import SlipType
from app.data.slips.slip import Slip
from app.data.slips.slip_line import SlipLine


class ReturnAgainstIssuePolicy:
    """
    Rules:
    1. The source slip exists and is an ISSUE
    2. Both slips belong to the same property
    3. Locations are reversed: return source = issue destination, return
       destination = issue source (checked where both sides are set)
    4. Every returned asset was on the source slip
    5. Per item, returned quantity <= issued - already returned against the source
    """

    @classmethod
    def check(cls, request, session=None) -> Slip:
        """
        Validate ``request`` (a RETURN SlipRequest) against its source slip.

        The source slip row is locked so concurrent returns against the same
        issue are checked one after the other.

        Returns:
            Slip: the source slip

        Raises:
            NotFoundError: if the source slip does not exist
            ValidationError: if any rule is violated
        """
        session = session if session is not None else db.session

        source = session.execute(
            select(Slip).where(Slip.id == request.source_slip_id).with_for_update()
        ).scalar_one_or_none()
        if source is None:
            raise NotFoundError('Slip', request.source_slip_id)

        if source.slip_type != SlipType.ISSUE:
            raise ValidationError('source_slip_id', 'returns can only be raised against an ISSUE slip')

        if source.property_id != request.property_id:
            raise ValidationError('source_slip_id', 'source slip belongs to a different property')

        if source.from_location_id is not None and request.to_location_id != source.from_location_id:
            raise ValidationError('to_location_id', 'must be the location the items were issued from')

        if request.from_location_id is not None and request.from_location_id != source.to_location_id:
            raise ValidationError('from_location_id', 'must be the location the items were issued to')

        cls._check_assets(request, source)
        cls._check_quantities(request, source, session)
        return source

    @staticmethod
    def _check_assets(request, source):
        issued_assets = {line.asset_id for line in source.lines if line.asset_id is not None}
        for line in request.asset_lines:
            if line.asset_id not in issued_assets:
                raise ValidationError(
                    'lines', f"asset {line.asset_id} was not issued on slip {source.slip_no}"
                )

    @staticmethod
    def _check_quantities(request, source, session):
        requested = defaultdict(lambda: Decimal('0'))
        for line in request.quantity_lines:
            requested[line.item_id] += line.qty
        if not requested:
            return

        issued = defaultdict(lambda: Decimal('0'))
        for line in source.lines:
            if line.asset_id is None and line.qty is not None:
                issued[line.item_id] += to_quantity(line.qty)

        rows = session.execute(
            select(SlipLine.item_id, func.sum(SlipLine.qty))
            .join(Slip, Slip.id == SlipLine.slip_id)
            .where(
                Slip.source_slip_id == source.id,
                Slip.slip_type == SlipType.RETURN,
                SlipLine.asset_id.is_(None),
            )
            .group_by(SlipLine.item_id)
        ).all()
        already_returned = {item_id: to_quantity(total or 0) for item_id, total in rows}

        for item_id, qty in requested.items():
            remaining = issued[item_id] - already_returned.get(item_id, Decimal('0'))
            if qty > remaining:
                raise ValidationError(
                    'lines',
                    f"item {item_id}: returning {qty} but only {max(remaining, Decimal('0'))} "
                    f"outstanding on slip {source.slip_no}",
                )
