"""
Maintenance business layer.

Main entry point: MaintenanceContext (ticket facade)
- state_machine: valid ticket status transitions
"""

from app.buisness.maintenance.maintenance_context import MaintenanceContext
from app.buisness.maintenance.state_machine import TicketStateMachine

__all__ = [
    'MaintenanceContext',
    'TicketStateMachine',
]
