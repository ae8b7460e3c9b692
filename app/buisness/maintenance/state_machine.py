"""
State machine for maintenance ticket lifecycles

Encodes valid transitions and keeps "what is allowed" separate from
"how persistence occurs".
"""

from typing import Dict, Optional, Set

from app.buisness.core.errors import MaintenanceTransitionError
from app.data.core.constants import TicketStatus


class TicketStateMachine:
    """
    State machine for MaintenanceTicket.status transitions.

    Work statuses can move back and forth freely, except that a ticket must be
    looked at (DIAGNOSING) before it goes to a vendor, into repair or is
    marked FIXED. CLOSED is only reached through closing the ticket; CLOSED
    and SCRAPPED are terminal.
    """

    REPORTED = TicketStatus.REPORTED
    DIAGNOSING = TicketStatus.DIAGNOSING
    SENT_TO_VENDOR = TicketStatus.SENT_TO_VENDOR
    IN_REPAIR = TicketStatus.IN_REPAIR
    FIXED = TicketStatus.FIXED
    UNREPAIRABLE = TicketStatus.UNREPAIRABLE
    CLOSED = TicketStatus.CLOSED
    SCRAPPED = TicketStatus.SCRAPPED

    TERMINAL_STATES = {CLOSED, SCRAPPED}

    WORK_STATES = {REPORTED, DIAGNOSING, SENT_TO_VENDOR, IN_REPAIR, FIXED, UNREPAIRABLE}

    # Target status -> source statuses it cannot be reached from
    BLOCKED_SOURCES: Dict[str, Set[str]] = {
        SENT_TO_VENDOR: {REPORTED},
        IN_REPAIR: {REPORTED},
        FIXED: {REPORTED},
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        if from_status in cls.TERMINAL_STATES:
            return False
        if to_status == cls.CLOSED:
            return False
        if to_status not in cls.WORK_STATES and to_status != cls.SCRAPPED:
            return False
        return from_status not in cls.BLOCKED_SOURCES.get(to_status, set())

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str, ticket_id: Optional[int] = None) -> None:
        """
        Raises:
            MaintenanceTransitionError: If the transition is not allowed
        """
        if not cls.can_transition(from_status, to_status):
            raise MaintenanceTransitionError(ticket_id, from_status, to_status)

    @classmethod
    def can_close(cls, from_status: str) -> bool:
        return from_status not in cls.TERMINAL_STATES

    @classmethod
    def get_allowed_transitions(cls, from_status: str) -> Set[str]:
        """Get set of allowed target statuses from current status"""
        return {
            status for status in TicketStatus.ALL
            if status != from_status and cls.can_transition(from_status, status)
        }
