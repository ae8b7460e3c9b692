"""
Slip Engine

Turns an issue, return or transfer request into one atomic change to the
inventory: stock balances, asset positions, movement logs, the slip with its
lines and signature, and the SLIP audit event all commit together or not at
all.
"""

from __future__ import annotations

from sqlalchemy import select

from app import db
from app.buisness.core.audit_recorder import AuditRecorder
from app.buisness.core.errors import (
    InventoryDomainError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.buisness.core.permissions import Actor, can_adjust_stock, can_create_slip
from app.buisness.core.unit_of_work import UnitOfWork
from app.buisness.inventory.movement_recorder import MovementRecorder
from app.buisness.inventory.policies import AssetMovabilityPolicy
from app.buisness.inventory.stock_ledger import StockLedger
from app.buisness.slips.return_policy import ReturnAgainstIssuePolicy
from app.buisness.slips.slip_numbers import SlipNumberGenerator
from app.buisness.slips.slip_request import AssetLine, QuantityLine, SlipRequest
from app.data.core.asset import Asset
from app.data.core.constants import AuditAction, AuditEntity, ItemType, MovementType, SlipType
from app.data.core.item import Item
from app.data.core.location import Location
from app.data.core.property import Property
from app.data.core.user_info.user import User
from app.data.slips.signature import Signature
from app.data.slips.slip import Slip
from app.data.slips.slip_line import SlipLine
from app.logger import get_logger
from app.utils.logging_sanitizer import sanitize_payload

logger = get_logger("stock_ledger.slips.engine")

ASSET_AUDIT_FIELDS = ('tag', 'condition', 'current_location_id')

ASSET_MOVEMENT_TYPES = {
    SlipType.ISSUE: MovementType.ISSUE_OUT,
    SlipType.RETURN: MovementType.RETURN_IN,
    SlipType.TRANSFER: MovementType.TRANSFER_IN,
}


class _ResolvedReferences:
    """Entities loaded for one slip request"""

    def __init__(self):
        self.property = None
        self.from_location = None
        self.to_location = None
        self.items = {}
        self.assets = {}


class SlipEngine:
    """
    Orchestrates slip creation.

    Steps:
    1. Authorize the actor, then parse the payload into a SlipRequest
    2. Reserve a generated slip number in its own short transaction

    Everything below runs inside one UnitOfWork:
    3. Resolve property, locations, users, items and assets
    4. Check a RETURN against its source ISSUE slip
    5. Lock every ledger row the slip touches, in a fixed order
    6. Write the slip header, then apply each line in request order
    7. Write the signature and the SLIP CREATE audit event
    """

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    def create_slip(self, payload, actor: Actor) -> Slip:
        """
        Create a slip from ``payload`` (a dict or a SlipRequest) on behalf of ``actor``.

        Raises:
            PermissionDeniedError, ValidationError, NotFoundError, InsufficientStock,
            AssetNotMovable, LedgerConflictError
        """
        if actor.id is None or not (can_create_slip(actor.role) and can_adjust_stock(actor.role)):
            logger.warning(f"Slip creation denied for user {actor.id} with role {actor.role}")
            raise PermissionDeniedError()

        try:
            request = payload if isinstance(payload, SlipRequest) else SlipRequest.from_dict(payload)
        except ValidationError as e:
            logger.warning(f"Rejected slip payload from user {actor.id}: {e.message}")
            logger.debug(f"Rejected payload: {sanitize_payload(payload)}")
            raise

        try:
            slip_no = self._slip_number(request)
            with UnitOfWork(self.session) as uow:
                slip = self._post(uow, request, actor, slip_no)
            slip_id, slip_no = slip.id, slip.slip_no
        except InventoryDomainError as e:
            logger.warning(f"{request.slip_type} slip rejected for user {actor.id}: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Unexpected error while creating {request.slip_type} slip: {e}", exc_info=True)
            raise

        logger.info(
            f"Created {request.slip_type} slip {slip_no} (id {slip_id}) "
            f"with {len(request.lines)} line(s) by user {actor.id}"
        )
        return slip

    def _post(self, uow: UnitOfWork, request: SlipRequest, actor: Actor, slip_no: str) -> Slip:
        session = uow.session
        ledger = StockLedger(session)
        recorder = MovementRecorder(session, actor_id=actor.id)
        auditor = AuditRecorder(session)

        refs = self._resolve(request)

        if request.slip_no is not None and SlipNumberGenerator(session).is_taken(request.slip_no):
            raise ValidationError('slip_no', f"slip number {request.slip_no} is already in use")

        if request.source_slip_id is not None:
            ReturnAgainstIssuePolicy.check(request, session)

        ledger.lock_balances(self._ledger_pairs(request))

        slip = Slip(
            slip_no=slip_no,
            slip_type=request.slip_type,
            property_id=request.property_id,
            from_location_id=request.from_location_id,
            to_location_id=request.to_location_id,
            department=request.department,
            requested_by_id=request.requested_by_id,
            issued_by_id=request.issued_by_id,
            received_by_id=request.received_by_id,
            source_slip_id=request.source_slip_id,
            notes=request.notes,
            created_by_id=actor.id,
        )
        uow.add(slip)
        uow.flush()

        for line_no, line in enumerate(request.lines, start=1):
            if isinstance(line, QuantityLine):
                self._apply_quantity_line(uow, ledger, recorder, slip, line_no, line, refs)
            else:
                self._apply_asset_line(uow, recorder, auditor, slip, line_no, line, refs, actor)

        uow.add(Signature(
            slip_id=slip.id,
            signed_by_name=request.signature.signed_by_name,
            signed_by_user_id=request.signature.signed_by_user_id,
            method=request.signature.method,
        ))

        auditor.write_audit_event(
            AuditEntity.SLIP,
            slip.id,
            AuditAction.CREATE,
            new_value={
                'slip_no': slip.slip_no,
                'slip_type': slip.slip_type,
                'property_id': slip.property_id,
                'from_location_id': slip.from_location_id,
                'to_location_id': slip.to_location_id,
                'department': slip.department,
                'line_count': len(request.lines),
                'has_signature': True,
                'source_slip_id': slip.source_slip_id,
            },
            actor_id=actor.id,
        )
        uow.flush()
        return slip

    # Resolution

    def _get(self, model, entity_id, entity_name):
        instance = self.session.get(model, entity_id)
        if instance is None:
            raise NotFoundError(entity_name, entity_id)
        return instance

    def _resolve(self, request: SlipRequest) -> _ResolvedReferences:
        refs = _ResolvedReferences()
        refs.property = self._get(Property, request.property_id, 'Property')

        if request.from_location_id is not None:
            refs.from_location = self._get(Location, request.from_location_id, 'Location')
            if refs.from_location.property_id != request.property_id:
                raise ValidationError('from_location_id', 'location does not belong to the property')

        refs.to_location = self._get(Location, request.to_location_id, 'Location')
        if refs.to_location.property_id != request.property_id:
            raise ValidationError('to_location_id', 'location does not belong to the property')

        for user_id in (
            request.requested_by_id,
            request.issued_by_id,
            request.received_by_id,
            request.signature.signed_by_user_id,
        ):
            if user_id is not None:
                self._get(User, user_id, 'User')

        for index, line in enumerate(request.lines):
            if isinstance(line, QuantityLine) and line.item_id not in refs.items:
                item = self._get(Item, line.item_id, 'Item')
                if item.item_type != ItemType.STOCK:
                    raise ValidationError(f"lines[{index}].item_id", 'quantity lines must reference a STOCK item')
                if not item.is_active:
                    raise ValidationError(f"lines[{index}].item_id", 'item is inactive')
                refs.items[item.id] = item

        asset_ids = sorted(line.asset_id for line in request.asset_lines)
        if asset_ids:
            # Lock asset rows in id order alongside the ledger rows
            assets = self.session.execute(
                select(Asset).where(Asset.id.in_(asset_ids)).order_by(Asset.id).with_for_update()
            ).scalars().all()
            refs.assets = {asset.id: asset for asset in assets}
            for asset_id in asset_ids:
                if asset_id not in refs.assets:
                    raise NotFoundError('Asset', asset_id)

        if request.from_location_id is not None:
            for index, line in enumerate(request.lines):
                if isinstance(line, AssetLine):
                    asset = refs.assets[line.asset_id]
                    if asset.current_location_id not in (None, request.from_location_id):
                        raise ValidationError(
                            f"lines[{index}].asset_id",
                            f"asset {asset.tag} is at location {asset.current_location_id}, "
                            f"not at the slip's source location",
                        )

        return refs

    @staticmethod
    def _ledger_pairs(request: SlipRequest) -> list:
        pairs = []
        for line in request.quantity_lines:
            if request.slip_type in (SlipType.ISSUE, SlipType.TRANSFER):
                pairs.append((line.item_id, request.from_location_id))
            if request.slip_type in (SlipType.RETURN, SlipType.TRANSFER):
                pairs.append((line.item_id, request.to_location_id))
        return pairs

    def _slip_number(self, request: SlipRequest) -> str:
        if request.slip_no is not None:
            return request.slip_no
        return SlipNumberGenerator(self.session).reserve_slip_no(request.slip_type)

    # Line application

    def _apply_quantity_line(self, uow, ledger, recorder, slip, line_no, line, refs):
        item = refs.items[line.item_id]
        qty = line.qty

        if slip.slip_type == SlipType.ISSUE:
            ledger.adjust_stock(item.id, slip.from_location_id, -qty)
            recorder.record_movement(
                slip, item, slip.from_location_id, slip.to_location_id, -qty,
                MovementType.ISSUE_OUT, location_id=slip.from_location_id, note=line.notes,
            )
        elif slip.slip_type == SlipType.RETURN:
            ledger.adjust_stock(item.id, slip.to_location_id, qty)
            recorder.record_movement(
                slip, item, slip.from_location_id, slip.to_location_id, qty,
                MovementType.RETURN_IN, location_id=slip.to_location_id, note=line.notes,
            )
        else:
            ledger.adjust_stock(item.id, slip.from_location_id, -qty)
            ledger.adjust_stock(item.id, slip.to_location_id, qty)
            recorder.record_movement(
                slip, item, slip.from_location_id, slip.to_location_id, -qty,
                MovementType.TRANSFER_OUT, location_id=slip.from_location_id, note=line.notes,
            )
            recorder.record_movement(
                slip, item, slip.from_location_id, slip.to_location_id, qty,
                MovementType.TRANSFER_IN, location_id=slip.to_location_id, note=line.notes,
            )

        uow.add(SlipLine(
            slip_id=slip.id,
            line_no=line_no,
            item_id=item.id,
            qty=qty,
            notes=line.notes,
        ))

    def _apply_asset_line(self, uow, recorder, auditor, slip, line_no, line: AssetLine, refs, actor):
        asset = refs.assets[line.asset_id]

        if slip.slip_type == SlipType.ISSUE:
            AssetMovabilityPolicy.check(asset, slip.slip_type)
        condition_at_move = asset.condition

        before = AuditRecorder.snapshot(asset, ASSET_AUDIT_FIELDS)
        from_location_id = asset.current_location_id or slip.from_location_id

        asset.current_location_id = slip.to_location_id
        if line.new_condition is not None and slip.slip_type in (SlipType.ISSUE, SlipType.RETURN):
            asset.condition = line.new_condition
        asset.updated_by_id = actor.id

        recorder.record_movement(
            slip, asset, from_location_id, slip.to_location_id, None,
            ASSET_MOVEMENT_TYPES[slip.slip_type], condition=asset.condition, note=line.notes,
        )
        auditor.write_audit_event(
            AuditEntity.ASSET,
            asset.id,
            AuditAction.UPDATE,
            old_value=before,
            new_value=AuditRecorder.snapshot(asset, ASSET_AUDIT_FIELDS),
            actor_id=actor.id,
        )

        uow.add(SlipLine(
            slip_id=slip.id,
            line_no=line_no,
            item_id=asset.item_id,
            asset_id=asset.id,
            condition_at_move=condition_at_move,
            new_condition=line.new_condition,
            notes=line.notes,
        ))
