"""
String constants stored in model columns.

Values are persisted as plain strings; each class exposes ALL for validation.
"""


class Role:
    ADMIN = 'ADMIN'
    STORE_MANAGER = 'STORE_MANAGER'
    DEPARTMENT_USER = 'DEPARTMENT_USER'
    TECHNICIAN = 'TECHNICIAN'

    ALL = (ADMIN, STORE_MANAGER, DEPARTMENT_USER, TECHNICIAN)


class ItemType:
    ASSET = 'ASSET'
    STOCK = 'STOCK'

    ALL = (ASSET, STOCK)


class Condition:
    GOOD = 'GOOD'
    FAIR = 'FAIR'
    POOR = 'POOR'
    UNDER_MAINTENANCE = 'UNDER_MAINTENANCE'
    SCRAP = 'SCRAP'

    ALL = (GOOD, FAIR, POOR, UNDER_MAINTENANCE, SCRAP)
    # Conditions a slip may set; the other two belong to the maintenance workflow
    IN_SERVICE = (GOOD, FAIR, POOR)


class SlipType:
    ISSUE = 'ISSUE'
    RETURN = 'RETURN'
    TRANSFER = 'TRANSFER'

    ALL = (ISSUE, RETURN, TRANSFER)


class Department:
    KITCHEN = 'KITCHEN'
    ELECTRICAL = 'ELECTRICAL'
    HOUSEKEEPING = 'HOUSEKEEPING'
    FRONT_OFFICE = 'FRONT_OFFICE'
    OTHER = 'OTHER'

    ALL = (KITCHEN, ELECTRICAL, HOUSEKEEPING, FRONT_OFFICE, OTHER)


class SignatureMethod:
    TYPED = 'TYPED'
    DRAWN = 'DRAWN'
    OTP = 'OTP'

    ALL = (TYPED, DRAWN, OTP)


class MovementType:
    ISSUE_OUT = 'ISSUE_OUT'
    RETURN_IN = 'RETURN_IN'
    TRANSFER_OUT = 'TRANSFER_OUT'
    TRANSFER_IN = 'TRANSFER_IN'
    MAINT_OUT = 'MAINT_OUT'
    MAINT_IN = 'MAINT_IN'

    ALL = (ISSUE_OUT, RETURN_IN, TRANSFER_OUT, TRANSFER_IN, MAINT_OUT, MAINT_IN)


class AuditEntity:
    SLIP = 'SLIP'
    ASSET = 'ASSET'
    ITEM = 'ITEM'
    TICKET = 'TICKET'
    PROPERTY = 'PROPERTY'
    LOCATION = 'LOCATION'
    USER = 'USER'

    ALL = (SLIP, ASSET, ITEM, TICKET, PROPERTY, LOCATION, USER)


class AuditAction:
    CREATE = 'CREATE'
    UPDATE = 'UPDATE'
    DELETE = 'DELETE'

    ALL = (CREATE, UPDATE, DELETE)


class TicketStatus:
    REPORTED = 'REPORTED'
    DIAGNOSING = 'DIAGNOSING'
    SENT_TO_VENDOR = 'SENT_TO_VENDOR'
    IN_REPAIR = 'IN_REPAIR'
    FIXED = 'FIXED'
    UNREPAIRABLE = 'UNREPAIRABLE'
    CLOSED = 'CLOSED'
    SCRAPPED = 'SCRAPPED'

    ALL = (REPORTED, DIAGNOSING, SENT_TO_VENDOR, IN_REPAIR, FIXED, UNREPAIRABLE, CLOSED, SCRAPPED)
    TERMINAL = (CLOSED, SCRAPPED)
