from app.data.maintenance.maintenance_ticket import MaintenanceTicket
from app.data.maintenance.maintenance_log import MaintenanceLog

__all__ = [
    'MaintenanceTicket',
    'MaintenanceLog',
]
