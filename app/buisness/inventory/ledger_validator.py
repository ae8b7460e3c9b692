"""
Ledger Validator

Re-checks the ledger invariants against stored data. Used by
`app.py --validate-ledger` after imports, restores or manual database work.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from sqlalchemy import func, select

from app import db
from app.buisness.inventory.policies import AssetMovabilityPolicy
from app.buisness.inventory.stock_ledger import to_quantity
from app.data.core.asset import Asset
from app.data.core.audit_event import AuditEvent
from app.data.core.constants import AuditAction, AuditEntity, SlipType
from app.data.inventory.movement_log import MovementLog
from app.data.inventory.stock_balance import StockBalance
from app.data.slips.slip import Slip
from app.data.slips.slip_line import SlipLine
from app.logger import get_logger

logger = get_logger("stock_ledger.inventory.validator")


@dataclass
class Finding:
    code: str
    message: str


@dataclass
class ValidationReport:
    errors: List[Finding] = field(default_factory=list)
    warnings: List[Finding] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def error(self, code: str, message: str) -> None:
        self.errors.append(Finding(code, message))

    def warning(self, code: str, message: str) -> None:
        self.warnings.append(Finding(code, message))

    def to_dict(self) -> dict:
        return {
            'ok': self.ok,
            'errors': [f.__dict__ for f in self.errors],
            'warnings': [f.__dict__ for f in self.warnings],
        }


class LedgerValidator:
    """
    Checks:
    - no negative balances
    - each balance equals the sum of its movement deltas
    - no SCRAP or UNDER_MAINTENANCE asset on an ISSUE slip
    - exactly one SLIP CREATE audit event per slip
    - at least one movement per slip
    """

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    def run(self) -> ValidationReport:
        report = ValidationReport()
        self.check_negative_balances(report)
        self.check_balance_drift(report)
        self.check_issued_assets(report)
        self.check_slip_audit_events(report)
        self.check_slip_movements(report)

        for finding in report.errors:
            logger.error(f"[{finding.code}] {finding.message}")
        for finding in report.warnings:
            logger.warning(f"[{finding.code}] {finding.message}")
        logger.info(f"Ledger validation finished: {len(report.errors)} error(s), {len(report.warnings)} warning(s)")
        return report

    def check_negative_balances(self, report: ValidationReport) -> None:
        rows = self.session.execute(
            select(StockBalance).where(StockBalance.qty_on_hand < 0)
        ).scalars().all()
        for balance in rows:
            report.error(
                'negative_balance',
                f"item {balance.item_id} at location {balance.location_id} has {balance.qty_on_hand} on hand",
            )

    def check_balance_drift(self, report: ValidationReport) -> None:
        movement_totals = {
            (item_id, location_id): to_quantity(total or 0)
            for item_id, location_id, total in self.session.execute(
                select(MovementLog.item_id, MovementLog.location_id, func.sum(MovementLog.qty_delta))
                .where(MovementLog.qty_delta.isnot(None), MovementLog.location_id.isnot(None))
                .group_by(MovementLog.item_id, MovementLog.location_id)
            ).all()
        }
        for balance in self.session.execute(select(StockBalance)).scalars():
            key = (balance.item_id, balance.location_id)
            expected = movement_totals.pop(key, Decimal('0.00'))
            if to_quantity(balance.qty_on_hand) != expected:
                report.error(
                    'balance_drift',
                    f"item {balance.item_id} at location {balance.location_id}: balance "
                    f"{to_quantity(balance.qty_on_hand)} but movements sum to {expected}",
                )
        for (item_id, location_id), total in movement_totals.items():
            if total != 0:
                report.error(
                    'balance_missing',
                    f"item {item_id} at location {location_id}: movements sum to {total} but no balance row exists",
                )

    def check_issued_assets(self, report: ValidationReport) -> None:
        rows = self.session.execute(
            select(Slip.slip_no, SlipLine.line_no, SlipLine.condition_at_move, Asset)
            .join(SlipLine, SlipLine.slip_id == Slip.id)
            .join(Asset, Asset.id == SlipLine.asset_id)
            .where(Slip.slip_type == SlipType.ISSUE)
        ).all()
        blocked = AssetMovabilityPolicy.BLOCKED_FOR_ISSUE
        for slip_no, line_no, condition_at_move, asset in rows:
            if condition_at_move is not None:
                if condition_at_move in blocked:
                    report.error(
                        'blocked_asset_issued',
                        f"slip {slip_no} line {line_no} issued asset {asset.tag} while {condition_at_move}",
                    )
            elif asset.condition in blocked:
                # No snapshot: the current condition says nothing about the condition at issue time
                report.warning(
                    'blocked_asset_unverified',
                    f"slip {slip_no} line {line_no} has no condition snapshot; asset {asset.tag} "
                    f"is currently {asset.condition}",
                )

    def check_slip_audit_events(self, report: ValidationReport) -> None:
        audit_counts = dict(self.session.execute(
            select(AuditEvent.entity_id, func.count(AuditEvent.id))
            .where(AuditEvent.entity_type == AuditEntity.SLIP, AuditEvent.action == AuditAction.CREATE)
            .group_by(AuditEvent.entity_id)
        ).all())
        for slip_id, slip_no in self.session.execute(select(Slip.id, Slip.slip_no)).all():
            count = audit_counts.get(slip_id, 0)
            if count != 1:
                report.error(
                    'slip_audit_count',
                    f"slip {slip_no} has {count} SLIP CREATE audit event(s), expected 1",
                )

    def check_slip_movements(self, report: ValidationReport) -> None:
        rows = self.session.execute(
            select(Slip.slip_no)
            .outerjoin(MovementLog, MovementLog.slip_id == Slip.id)
            .group_by(Slip.id, Slip.slip_no)
            .having(func.count(MovementLog.id) == 0)
        ).scalars().all()
        for slip_no in rows:
            report.error('slip_without_movements', f"slip {slip_no} has no movement log entries")
