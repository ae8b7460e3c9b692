"""
Slip request parsing.

Turns a raw payload (JSON body or form dict) into typed request objects and
rejects anything structurally invalid before the database is touched. Line
content is a tagged variant: QuantityLine or AssetLine, never both.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Union

from app.buisness.core.errors import ValidationError
from app.data.core.constants import Condition, Department, SignatureMethod, SlipType

QTY_PLACES = Decimal('0.01')
MAX_QTY = Decimal('9999999999.99')

SIGNER_NAME_MIN = 2
SIGNER_NAME_MAX = 120
SLIP_NO_MIN = 3
SLIP_NO_MAX = 40


@dataclass(frozen=True)
class QuantityLine:
    item_id: int
    qty: Decimal
    notes: Optional[str] = None


@dataclass(frozen=True)
class AssetLine:
    asset_id: int
    new_condition: Optional[str] = None
    notes: Optional[str] = None


SlipLineRequest = Union[QuantityLine, AssetLine]


@dataclass(frozen=True)
class SignatureRequest:
    signed_by_name: str
    method: str = SignatureMethod.TYPED
    signed_by_user_id: Optional[int] = None


@dataclass(frozen=True)
class SlipRequest:
    slip_type: str
    property_id: int
    to_location_id: int
    department: str
    lines: tuple
    signature: SignatureRequest
    from_location_id: Optional[int] = None
    requested_by_id: Optional[int] = None
    issued_by_id: Optional[int] = None
    received_by_id: Optional[int] = None
    source_slip_id: Optional[int] = None
    slip_no: Optional[str] = None
    notes: Optional[str] = None

    @property
    def quantity_lines(self) -> list:
        return [line for line in self.lines if isinstance(line, QuantityLine)]

    @property
    def asset_lines(self) -> list:
        return [line for line in self.lines if isinstance(line, AssetLine)]

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "SlipRequest":
        """
        Parse and structurally validate a slip payload.

        Raises:
            ValidationError: naming the first offending field
        """
        if not isinstance(payload, Mapping):
            raise ValidationError('payload', 'must be an object')

        slip_type = _clean_str(payload.get('slip_type'))
        slip_type = slip_type.upper() if slip_type else slip_type
        if slip_type not in SlipType.ALL:
            raise ValidationError('slip_type', f"must be one of {', '.join(SlipType.ALL)}")

        property_id = _required_id(payload, 'property_id')
        to_location_id = _required_id(payload, 'to_location_id')

        if slip_type in (SlipType.ISSUE, SlipType.TRANSFER):
            from_location_id = _required_id(payload, 'from_location_id')
        else:
            from_location_id = _optional_id(payload, 'from_location_id')

        if slip_type == SlipType.TRANSFER and from_location_id == to_location_id:
            raise ValidationError('to_location_id', 'must differ from from_location_id for a transfer')

        department = _clean_str(payload.get('department'))
        department = department.upper() if department else department
        if department not in Department.ALL:
            raise ValidationError('department', f"must be one of {', '.join(Department.ALL)}")

        source_slip_id = _optional_id(payload, 'source_slip_id')
        if source_slip_id is not None and slip_type != SlipType.RETURN:
            raise ValidationError('source_slip_id', 'only allowed on RETURN slips')

        slip_no = _clean_str(payload.get('slip_no'))
        if slip_no is not None and not (SLIP_NO_MIN <= len(slip_no) <= SLIP_NO_MAX):
            raise ValidationError('slip_no', f"must be {SLIP_NO_MIN}-{SLIP_NO_MAX} characters")

        lines = _parse_lines(payload.get('lines'), slip_type)
        signature = _parse_signature(payload.get('signature'))

        return cls(
            slip_type=slip_type,
            property_id=property_id,
            from_location_id=from_location_id,
            to_location_id=to_location_id,
            department=department,
            requested_by_id=_optional_id(payload, 'requested_by_id'),
            issued_by_id=_optional_id(payload, 'issued_by_id'),
            received_by_id=_optional_id(payload, 'received_by_id'),
            source_slip_id=source_slip_id,
            slip_no=slip_no,
            notes=_clean_str(payload.get('notes')),
            lines=tuple(lines),
            signature=signature,
        )


def _clean_str(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _to_id(value, field_name: str) -> Optional[int]:
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise ValidationError(field_name, 'must be an integer id')
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(field_name, 'must be an integer id')
    if isinstance(value, float) and value != parsed:
        raise ValidationError(field_name, 'must be an integer id')
    if parsed <= 0:
        raise ValidationError(field_name, 'must be a positive id')
    return parsed


def _optional_id(payload: Mapping, field_name: str) -> Optional[int]:
    return _to_id(payload.get(field_name), field_name)


def _required_id(payload: Mapping, field_name: str) -> int:
    value = _to_id(payload.get(field_name), field_name)
    if value is None:
        raise ValidationError(field_name, 'is required')
    return value


def parse_quantity(value, field_name: str = 'qty') -> Decimal:
    """Positive decimal with at most two decimal places"""
    if isinstance(value, bool) or value is None or value == '':
        raise ValidationError(field_name, 'must be a positive number')
    try:
        qty = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(field_name, 'must be a positive number')
    if not qty.is_finite() or qty <= 0:
        raise ValidationError(field_name, 'must be a positive number')
    if qty > MAX_QTY:
        raise ValidationError(field_name, 'is too large')
    if qty != qty.quantize(QTY_PLACES):
        raise ValidationError(field_name, 'must have at most 2 decimal places')
    return qty.quantize(QTY_PLACES)


def _parse_lines(raw_lines, slip_type: str) -> list:
    if not isinstance(raw_lines, (list, tuple)) or not raw_lines:
        raise ValidationError('lines', 'at least one line is required')

    lines = []
    seen_assets = set()
    for index, raw in enumerate(raw_lines):
        prefix = f"lines[{index}]"
        if not isinstance(raw, Mapping):
            raise ValidationError(prefix, 'must be an object')

        item_id = _to_id(raw.get('item_id'), f"{prefix}.item_id")
        asset_id = _to_id(raw.get('asset_id'), f"{prefix}.asset_id")
        has_qty = raw.get('qty') not in (None, '')
        notes = _clean_str(raw.get('notes'))
        new_condition = _clean_str(raw.get('new_condition'))

        if asset_id is not None:
            if item_id is not None or has_qty:
                raise ValidationError(prefix, 'a line is either item_id + qty or asset_id, not both')
            if asset_id in seen_assets:
                raise ValidationError(f"{prefix}.asset_id", 'asset appears more than once on the slip')
            seen_assets.add(asset_id)

            if new_condition is not None:
                new_condition = new_condition.upper()
                if slip_type not in (SlipType.ISSUE, SlipType.RETURN):
                    raise ValidationError(f"{prefix}.new_condition", 'only allowed on ISSUE and RETURN slips')
                if new_condition not in Condition.IN_SERVICE:
                    raise ValidationError(
                        f"{prefix}.new_condition", f"must be one of {', '.join(Condition.IN_SERVICE)}"
                    )
            lines.append(AssetLine(asset_id=asset_id, new_condition=new_condition, notes=notes))
            continue

        if item_id is None or not has_qty:
            raise ValidationError(prefix, 'a line needs item_id + qty or asset_id')
        if new_condition is not None:
            raise ValidationError(f"{prefix}.new_condition", 'only allowed on asset lines')
        qty = parse_quantity(raw.get('qty'), f"{prefix}.qty")
        lines.append(QuantityLine(item_id=item_id, qty=qty, notes=notes))

    return lines


def _parse_signature(raw) -> SignatureRequest:
    if not isinstance(raw, Mapping):
        raise ValidationError('signature', 'is required')

    name = _clean_str(raw.get('signed_by_name')) or ''
    if not (SIGNER_NAME_MIN <= len(name) <= SIGNER_NAME_MAX):
        raise ValidationError(
            'signature.signed_by_name', f"must be {SIGNER_NAME_MIN}-{SIGNER_NAME_MAX} characters"
        )

    method = (_clean_str(raw.get('method')) or SignatureMethod.TYPED).upper()
    if method not in SignatureMethod.ALL:
        raise ValidationError('signature.method', f"must be one of {', '.join(SignatureMethod.ALL)}")

    return SignatureRequest(
        signed_by_name=name,
        method=method,
        signed_by_user_id=_to_id(raw.get('signed_by_user_id'), 'signature.signed_by_user_id'),
    )
