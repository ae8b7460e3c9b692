from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from sqlalchemy import select

from app import db
from app.buisness.core.errors import InsufficientStock, ValidationError
from app.data.inventory.stock_balance import StockBalance, count_balance_references
from app.logger import get_logger

logger = get_logger("stock_ledger.inventory.ledger")

QTY_PLACES = Decimal('0.01')


def to_quantity(value) -> Decimal:
    """Normalise a quantity to a two-place Decimal"""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(QTY_PLACES)


class StockLedger:
    """
    Quantity on hand per (item, location).

    Responsibilities:
    - Apply signed deltas under a row lock, never letting a balance go below zero
    - Create balance rows lazily on the first movement into a pair
    - Never commit; the caller's unit of work owns the transaction
    """

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    def _locked_balance(self, item_id: int, location_id: int) -> StockBalance | None:
        stmt = (
            select(StockBalance)
            .where(StockBalance.item_id == item_id, StockBalance.location_id == location_id)
            .with_for_update()
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def lock_balances(self, pairs: Iterable[tuple[int, int]]) -> dict[tuple[int, int], StockBalance | None]:
        """
        Lock every existing balance row a multi-line operation will touch.

        Rows are locked in (item_id, location_id) order so two slips touching
        the same pairs always acquire locks in the same sequence.
        """
        locked = {}
        for item_id, location_id in sorted(set(pairs)):
            locked[(item_id, location_id)] = self._locked_balance(item_id, location_id)
        return locked

    def get_balance(self, item_id: int, location_id: int) -> Decimal:
        balance = self.session.execute(
            select(StockBalance.qty_on_hand).where(
                StockBalance.item_id == item_id,
                StockBalance.location_id == location_id,
            )
        ).scalar_one_or_none()
        return to_quantity(balance) if balance is not None else Decimal('0.00')

    def adjust_stock(self, item_id: int, location_id: int, delta) -> StockBalance:
        """
        Apply ``delta`` to the balance of (item_id, location_id).

        Raises:
            InsufficientStock: if the result would be negative; nothing is written
        """
        delta = to_quantity(delta)
        balance = self._locked_balance(item_id, location_id)
        current = to_quantity(balance.qty_on_hand) if balance is not None else Decimal('0.00')
        next_qty = current + delta

        if next_qty < 0:
            logger.warning(
                f"Rejected adjustment item={item_id} location={location_id} "
                f"current={current} delta={delta}"
            )
            raise InsufficientStock(item_id, location_id, delta, current)

        if balance is None:
            balance = StockBalance(item_id=item_id, location_id=location_id, qty_on_hand=next_qty)
            self.session.add(balance)
        else:
            balance.qty_on_hand = next_qty

        # Surfaces unique/version conflicts at the line that caused them
        self.session.flush()
        logger.debug(f"Balance item={item_id} location={location_id}: {current} -> {next_qty}")
        return balance

    def assert_removable(self, item_id: int, location_id: int) -> None:
        """
        Raises:
            ValidationError: if any slip line or movement references the pair
        """
        references = count_balance_references(self.session.connection(), item_id, location_id)
        if references:
            raise ValidationError(
                'stock_balance',
                f"balance for item {item_id} at location {location_id} "
                f"is referenced by {references} slip line(s) or movement(s)",
            )
