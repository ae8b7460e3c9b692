"""
Role predicates for the authorization gate.

The engine asks yes/no questions about a role; who the user is and how the
role was assigned is the login layer's concern.
"""

from dataclasses import dataclass
from typing import Optional

from app.data.core.constants import Role


@dataclass(frozen=True)
class Actor:
    """The authenticated principal performing an operation"""
    id: Optional[int]
    role: str

    @classmethod
    def from_user(cls, user) -> "Actor":
        return cls(id=user.id, role=user.role)


SLIP_CREATORS = frozenset({Role.ADMIN, Role.STORE_MANAGER})
STOCK_ADJUSTERS = frozenset({Role.ADMIN, Role.STORE_MANAGER})
MAINTENANCE_CLOSERS = frozenset({Role.ADMIN, Role.STORE_MANAGER, Role.TECHNICIAN})


def can_create_slip(role: str) -> bool:
    return role in SLIP_CREATORS


def can_adjust_stock(role: str) -> bool:
    return role in STOCK_ADJUSTERS


def can_close_maintenance(role: str) -> bool:
    return role in MAINTENANCE_CLOSERS
