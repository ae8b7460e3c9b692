from __future__ import annotations

from decimal import Decimal

from app import db
from app.data.core.asset import Asset
from app.data.core.item import Item
from app.data.core.constants import MovementType
from app.data.inventory.movement_log import MovementLog


class MovementRecorder:
    """
    Appends MovementLog rows.

    One call per applied effect:
    - quantity ISSUE or RETURN: one row at the ledger location
    - quantity TRANSFER: two rows, TRANSFER_OUT at the source and TRANSFER_IN at the destination
    - asset line or maintenance move: one row with a null delta

    No validation and no reads of prior state happen here.
    """

    def __init__(self, session=None, actor_id: int | None = None):
        self.session = session if session is not None else db.session
        self.actor_id = actor_id

    def record_movement(
        self,
        slip,
        subject: Item | Asset,
        from_location_id: int | None,
        to_location_id: int | None,
        delta: Decimal | None,
        movement_type: str,
        location_id: int | None = None,
        condition: str | None = None,
        note: str | None = None,
    ) -> MovementLog:
        if movement_type not in MovementType.ALL:
            raise ValueError(f"Unknown movement type: {movement_type}")

        if isinstance(subject, Asset):
            item_id, asset_id = subject.item_id, subject.id
        else:
            item_id, asset_id = subject.id, None

        movement = MovementLog(
            movement_type=movement_type,
            slip_id=slip.id if slip is not None else None,
            item_id=item_id,
            asset_id=asset_id,
            location_id=location_id,
            from_location_id=from_location_id,
            to_location_id=to_location_id,
            qty_delta=delta,
            condition=condition,
            note=note,
            created_by_id=self.actor_id,
        )
        self.session.add(movement)
        return movement
