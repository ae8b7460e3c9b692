"""
Slip Number Generator
Hands out human-facing slip numbers such as ISS-000042 from per-prefix
counter rows.
"""

import threading

from sqlalchemy import select

from app import db
from app.buisness.core.unit_of_work import UnitOfWork
from app.data.core.constants import SlipType
from app.data.slips.slip import Slip
from app.data.slips.slip_sequence import SlipSequence


class SlipNumberGenerator:
    """
    Counter rows live in slip_sequences. next_slip_no increments inside the
    caller's transaction; reserve_slip_no commits the increment on its own so
    the counter row is never locked while a slip is being posted. Numbers are
    unique but a slip that fails after reserving leaves a gap.
    """

    PREFIXES = {
        SlipType.ISSUE: 'ISS',
        SlipType.RETURN: 'RET',
        SlipType.TRANSFER: 'TRF',
    }
    WIDTH = 6

    _lock = threading.Lock()

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    def _sequence_row(self, prefix):
        sequence = self.session.execute(
            select(SlipSequence).where(SlipSequence.prefix == prefix).with_for_update()
        ).scalar_one_or_none()
        if sequence is None:
            sequence = SlipSequence(prefix=prefix, current_value=0)
            self.session.add(sequence)
        return sequence

    def format(self, prefix, value):
        return f"{prefix}-{value:0{self.WIDTH}d}"

    def next_slip_no(self, slip_type):
        """
        Get the next slip number for a slip type.

        Numbers already taken by externally supplied slip numbers are skipped.
        """
        prefix = self.PREFIXES[slip_type]
        with self._lock:
            sequence = self._sequence_row(prefix)
            while True:
                sequence.current_value = (sequence.current_value or 0) + 1
                candidate = self.format(prefix, sequence.current_value)
                if not self.is_taken(candidate):
                    break
            self.session.flush()
            return candidate

    def reserve_slip_no(self, slip_type):
        """
        Take the next number in a short transaction of its own and commit it.

        Must be called before the caller starts writing, since the commit
        covers the whole session.
        """
        with UnitOfWork(self.session):
            return self.next_slip_no(slip_type)

    def is_taken(self, slip_no):
        return self.session.execute(
            select(Slip.id).where(Slip.slip_no == slip_no)
        ).first() is not None

    def get_current_sequence_value(self, slip_type):
        prefix = self.PREFIXES[slip_type]
        sequence = self.session.get(SlipSequence, prefix)
        return sequence.current_value if sequence is not None else 0

    def reset_sequence(self, slip_type, start_value=1):
        """
        Reset the counter so the next number is ``start_value``.
        Useful for testing or data migration; does not commit.
        """
        with self._lock:
            sequence = self._sequence_row(self.PREFIXES[slip_type])
            sequence.current_value = start_value - 1
            self.session.flush()
