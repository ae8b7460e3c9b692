"""
Domain exceptions for slip processing and the stock ledger

These exceptions represent business rule violations and domain-specific errors.
They are raised by the business layer when invariants are violated and are
turned into JSON responses by the error-handler blueprint.
"""

from decimal import Decimal


class InventoryDomainError(Exception):
    """Base exception for all inventory domain errors"""

    kind = 'domain_error'
    http_status = 400

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__

    def details(self):
        return {}

    def to_dict(self):
        payload = {'kind': self.kind, 'message': self.message}
        payload.update(self.details())
        return payload


class PermissionDeniedError(InventoryDomainError):
    """You do not have permission to perform this action"""

    kind = 'permission_denied'
    http_status = 403

    def __init__(self):
        # Generic message only; the role or rule that failed is not disclosed
        super().__init__("You do not have permission to perform this action")


class ValidationError(InventoryDomainError):
    """Raised when a request is structurally or semantically invalid"""

    kind = 'validation'
    http_status = 400

    def __init__(self, field, reason):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")

    def details(self):
        return {'field': self.field, 'reason': self.reason}


class NotFoundError(InventoryDomainError):
    """Raised when a referenced entity does not exist"""

    kind = 'not_found'
    http_status = 404

    def __init__(self, entity, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")

    def details(self):
        return {'entity': self.entity, 'entity_id': self.entity_id}


class InsufficientStock(InventoryDomainError):
    """Raised when a stock adjustment would drive a balance below zero"""

    kind = 'insufficient_stock'
    http_status = 409

    def __init__(self, item_id, location_id, delta, current_qty):
        self.item_id = item_id
        self.location_id = location_id
        self.delta = Decimal(delta)
        self.current_qty = Decimal(current_qty)
        super().__init__(
            f"Insufficient stock for item {item_id} at location {location_id}: "
            f"on hand {self.current_qty}, requested change {self.delta}"
        )

    def details(self):
        return {
            'item_id': self.item_id,
            'location_id': self.location_id,
            'delta': str(self.delta),
            'current_qty': str(self.current_qty),
        }


class AssetNotMovable(InventoryDomainError):
    """Raised when an asset's condition does not allow the requested movement"""

    kind = 'asset_not_movable'
    http_status = 409

    def __init__(self, asset_id, condition):
        self.asset_id = asset_id
        self.condition = condition
        super().__init__(f"Asset {asset_id} cannot be issued while {condition}")

    def details(self):
        return {'asset_id': self.asset_id, 'condition': self.condition}


class LedgerConflictError(InventoryDomainError):
    """The ledger was changed concurrently; retry the request"""

    kind = 'conflict'
    http_status = 409

    def __init__(self):
        super().__init__("The ledger was changed concurrently; retry the request")


class MaintenanceTransitionError(InventoryDomainError):
    """Raised when a maintenance ticket state transition is not allowed"""

    kind = 'invalid_transition'
    http_status = 409

    def __init__(self, ticket_id, from_status, to_status):
        self.ticket_id = ticket_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Ticket {ticket_id} cannot move from {from_status} to {to_status}")

    def details(self):
        return {
            'ticket_id': self.ticket_id,
            'from_status': self.from_status,
            'to_status': self.to_status,
        }


class ImmutableRecordError(InventoryDomainError):
    """Raised when an append-only record is updated or deleted"""

    kind = 'immutable_record'
    http_status = 409

    def __init__(self, model_name, record_id):
        self.model_name = model_name
        self.record_id = record_id
        super().__init__(f"{model_name} {record_id} is append-only and cannot be changed")

    def details(self):
        return {'model': self.model_name, 'record_id': self.record_id}
