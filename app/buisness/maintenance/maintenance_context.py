"""
MaintenanceContext - Domain Facade for a maintenance ticket

Opening a ticket takes the asset out of service (UNDER_MAINTENANCE, MAINT_OUT
movement); closing it brings the asset back with its final condition
(MAINT_IN movement). These are the only asset moves that happen without a slip.
"""

from datetime import datetime
from typing import Any, Mapping, Optional

from sqlalchemy import select

from app import db
from app.buisness.core.audit_recorder import AuditRecorder
from app.buisness.core.errors import (
    MaintenanceTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from app.buisness.core.permissions import Actor, can_close_maintenance
from app.buisness.core.unit_of_work import UnitOfWork
from app.buisness.inventory.movement_recorder import MovementRecorder
from app.buisness.maintenance.state_machine import TicketStateMachine
from app.buisness.slips.slip_request import parse_quantity
from app.data.core.asset import Asset
from app.data.core.constants import AuditAction, AuditEntity, Condition, MovementType, TicketStatus
from app.data.maintenance.maintenance_log import MaintenanceLog
from app.data.maintenance.maintenance_ticket import MaintenanceTicket
from app.logger import get_logger

logger = get_logger("stock_ledger.maintenance.context")

ASSET_AUDIT_FIELDS = ('tag', 'condition', 'current_location_id')


def _text(payload: Mapping, field: str, min_len: int, max_len: int, required: bool = False) -> Optional[str]:
    value = payload.get(field)
    value = str(value).strip() if value is not None else ''
    if not value:
        if required:
            raise ValidationError(field, 'is required')
        return None
    if not (min_len <= len(value) <= max_len):
        raise ValidationError(field, f"must be {min_len}-{max_len} characters")
    return value


def _cost(payload: Mapping, field: str):
    if payload.get(field) in (None, ''):
        return None
    return parse_quantity(payload.get(field), field)


def _require_permission(actor: Actor) -> None:
    if not can_close_maintenance(actor.role):
        logger.warning(f"Maintenance action denied for user {actor.id} with role {actor.role}")
        raise PermissionDeniedError()


class MaintenanceContext:
    """
    Domain Facade for the maintenance ticket aggregate.

    Holds the ticket and its asset and exposes the workflow operations. Every
    operation runs in its own UnitOfWork.
    """

    def __init__(self, ticket_id: Optional[int] = None, ticket: Optional[MaintenanceTicket] = None, session=None):
        self.session = session if session is not None else db.session
        if ticket is not None:
            self.ticket = ticket
        elif ticket_id is not None:
            self.ticket = self.session.get(MaintenanceTicket, ticket_id)
            if self.ticket is None:
                raise NotFoundError('MaintenanceTicket', ticket_id)
        else:
            raise ValueError("Either ticket_id or ticket must be provided")
        self.ticket_id = self.ticket.id

    @property
    def asset(self) -> Asset:
        return self.ticket.asset

    @classmethod
    def load(cls, ticket_id: int) -> 'MaintenanceContext':
        return cls(ticket_id=ticket_id)

    # Workflow

    @classmethod
    def open_ticket(cls, payload: Mapping[str, Any], actor: Actor, session=None) -> 'MaintenanceContext':
        """
        Open a ticket for an asset and take the asset out of service.

        Raises:
            PermissionDeniedError, ValidationError, NotFoundError
        """
        _require_permission(actor)
        session = session if session is not None else db.session

        asset_id = payload.get('asset_id')
        try:
            asset_id = int(asset_id)
        except (TypeError, ValueError):
            raise ValidationError('asset_id', 'is required')
        problem = _text(payload, 'problem', 10, 1000, required=True)
        vendor_name = _text(payload, 'vendor_name', 2, 200)
        estimated_cost = _cost(payload, 'estimated_cost')

        with UnitOfWork(session) as uow:
            asset = session.execute(
                select(Asset).where(Asset.id == asset_id).with_for_update()
            ).scalar_one_or_none()
            if asset is None:
                raise NotFoundError('Asset', asset_id)
            if asset.condition == Condition.SCRAP:
                raise ValidationError('asset_id', 'cannot open a maintenance ticket for a scrapped asset')

            open_ticket = session.execute(
                select(MaintenanceTicket.id).where(
                    MaintenanceTicket.asset_id == asset.id,
                    MaintenanceTicket.status.notin_(TicketStatus.TERMINAL),
                )
            ).first()
            if open_ticket is not None:
                raise ValidationError('asset_id', 'asset already has an open maintenance ticket')

            ticket = MaintenanceTicket(
                asset_id=asset.id,
                status=TicketStatus.REPORTED,
                problem=problem,
                vendor_name=vendor_name,
                estimated_cost=estimated_cost,
                created_by_id=actor.id,
                updated_by_id=actor.id,
            )
            uow.add(ticket)
            uow.flush()

            uow.add(MaintenanceLog(
                ticket_id=ticket.id, status=TicketStatus.REPORTED, note=problem, created_by_id=actor.id,
            ))

            auditor = AuditRecorder(session)
            before = AuditRecorder.snapshot(asset, ASSET_AUDIT_FIELDS)
            asset.condition = Condition.UNDER_MAINTENANCE
            asset.updated_by_id = actor.id

            MovementRecorder(session, actor_id=actor.id).record_movement(
                None, asset, asset.current_location_id, None, None, MovementType.MAINT_OUT,
                condition=Condition.UNDER_MAINTENANCE, note=f"Ticket #{ticket.id}",
            )
            auditor.write_audit_event(
                AuditEntity.TICKET, ticket.id, AuditAction.CREATE,
                new_value={'asset_tag': asset.tag, 'status': ticket.status, 'problem': problem},
                actor_id=actor.id,
            )
            auditor.write_audit_event(
                AuditEntity.ASSET, asset.id, AuditAction.UPDATE,
                old_value=before, new_value=AuditRecorder.snapshot(asset, ASSET_AUDIT_FIELDS),
                actor_id=actor.id,
            )

        logger.info(f"Opened maintenance ticket {ticket.id} for asset {asset.tag}")
        return cls(ticket=ticket, session=session)

    def update_status(self, payload: Mapping[str, Any], actor: Actor) -> MaintenanceTicket:
        """
        Move the ticket to a new work status. SCRAPPED also scraps the asset.

        Raises:
            PermissionDeniedError, ValidationError, MaintenanceTransitionError
        """
        _require_permission(actor)

        status = str(payload.get('status') or '').strip().upper()
        if status not in TicketStatus.ALL:
            raise ValidationError('status', f"must be one of {', '.join(TicketStatus.ALL)}")
        note = _text(payload, 'note', 1, 500)
        vendor_name = _text(payload, 'vendor_name', 2, 200)
        estimated_cost = _cost(payload, 'estimated_cost')
        actual_cost = _cost(payload, 'actual_cost')

        ticket = self.ticket
        with UnitOfWork(self.session) as uow:
            TicketStateMachine.validate_transition(ticket.status, status, ticket.id)
            old_status = ticket.status
            auditor = AuditRecorder(self.session)

            ticket.status = status
            ticket.updated_by_id = actor.id
            if vendor_name is not None:
                ticket.vendor_name = vendor_name
            if estimated_cost is not None:
                ticket.estimated_cost = estimated_cost
            if actual_cost is not None:
                ticket.actual_cost = actual_cost

            if status == TicketStatus.SCRAPPED:
                ticket.closed_at = datetime.utcnow()
                asset = ticket.asset
                before = AuditRecorder.snapshot(asset, ASSET_AUDIT_FIELDS)
                asset.condition = Condition.SCRAP
                asset.updated_by_id = actor.id
                auditor.write_audit_event(
                    AuditEntity.ASSET, asset.id, AuditAction.UPDATE,
                    old_value=before, new_value=AuditRecorder.snapshot(asset, ASSET_AUDIT_FIELDS),
                    actor_id=actor.id,
                )

            uow.add(MaintenanceLog(ticket_id=ticket.id, status=status, note=note, created_by_id=actor.id))
            auditor.write_audit_event(
                AuditEntity.TICKET, ticket.id, AuditAction.UPDATE,
                old_value={'status': old_status},
                new_value={'status': status, 'note': note},
                actor_id=actor.id,
            )

        logger.info(f"Maintenance ticket {ticket.id}: {old_status} -> {status}")
        return ticket

    def close_ticket(self, payload: Mapping[str, Any], actor: Actor) -> MaintenanceTicket:
        """
        Close the ticket and return the asset to service.

        The final condition defaults to GOOD for FIXED tickets, POOR for
        UNREPAIRABLE ones, and otherwise leaves the asset's condition as is.
        An asset still UNDER_MAINTENANCE with no default needs an explicit
        final condition.

        Raises:
            PermissionDeniedError, ValidationError, MaintenanceTransitionError
        """
        _require_permission(actor)

        final_condition = payload.get('final_condition')
        if final_condition not in (None, ''):
            final_condition = str(final_condition).strip().upper()
            if final_condition not in Condition.ALL or final_condition == Condition.UNDER_MAINTENANCE:
                allowed = [c for c in Condition.ALL if c != Condition.UNDER_MAINTENANCE]
                raise ValidationError('final_condition', f"must be one of {', '.join(allowed)}")
        else:
            final_condition = None
        note = _text(payload, 'note', 1, 500)
        actual_cost = _cost(payload, 'actual_cost')

        ticket = self.ticket
        with UnitOfWork(self.session) as uow:
            if not TicketStateMachine.can_close(ticket.status):
                raise MaintenanceTransitionError(ticket.id, ticket.status, TicketStatus.CLOSED)

            asset = ticket.asset
            if final_condition is None:
                if ticket.status == TicketStatus.FIXED:
                    final_condition = Condition.GOOD
                elif ticket.status == TicketStatus.UNREPAIRABLE:
                    final_condition = Condition.POOR
                elif asset.condition != Condition.UNDER_MAINTENANCE:
                    final_condition = asset.condition
                else:
                    raise ValidationError('final_condition', f"is required when closing a {ticket.status} ticket")

            old_status = ticket.status
            ticket.status = TicketStatus.CLOSED
            ticket.closed_at = datetime.utcnow()
            ticket.updated_by_id = actor.id
            if actual_cost is not None:
                ticket.actual_cost = actual_cost

            uow.add(MaintenanceLog(
                ticket_id=ticket.id, status=TicketStatus.CLOSED, note=note or "Ticket closed",
                created_by_id=actor.id,
            ))

            auditor = AuditRecorder(self.session)
            before = AuditRecorder.snapshot(asset, ASSET_AUDIT_FIELDS)
            asset.condition = final_condition
            asset.updated_by_id = actor.id

            MovementRecorder(self.session, actor_id=actor.id).record_movement(
                None, asset, None, asset.current_location_id, None, MovementType.MAINT_IN,
                condition=final_condition, note=note or f"Ticket #{ticket.id} closed",
            )
            auditor.write_audit_event(
                AuditEntity.TICKET, ticket.id, AuditAction.UPDATE,
                old_value={'status': old_status, 'closed_at': None},
                new_value={
                    'status': TicketStatus.CLOSED,
                    'closed_at': ticket.closed_at,
                    'final_condition': final_condition,
                },
                actor_id=actor.id,
            )
            auditor.write_audit_event(
                AuditEntity.ASSET, asset.id, AuditAction.UPDATE,
                old_value=before, new_value=AuditRecorder.snapshot(asset, ASSET_AUDIT_FIELDS),
                actor_id=actor.id,
            )

        logger.info(f"Closed maintenance ticket {ticket.id}; asset {asset.tag} now {final_condition}")
        return ticket
