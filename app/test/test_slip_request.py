"""
Tests for slip payload parsing and structural validation
"""

from decimal import Decimal

import pytest
from app.buisness.core.errors import ValidationError
from app.buisness.slips.slip_request import AssetLine, QuantityLine, SlipRequest, parse_quantity


def payload(**overrides):
    data = {
        'slip_type': 'ISSUE',
        'property_id': 1,
        'from_location_id': 1,
        'to_location_id': 2,
        'department': 'KITCHEN',
        'lines': [{'item_id': 3, 'qty': '4'}],
        'signature': {'signed_by_name': 'Jane Doe'},
    }
    data.update(overrides)
    return data


def field_of(**overrides):
    with pytest.raises(ValidationError) as exc_info:
        SlipRequest.from_dict(payload(**overrides))
    return exc_info.value.field


def test_valid_payload_is_parsed():
    request = SlipRequest.from_dict(payload(
        slip_type='issue',
        department='housekeeping',
        lines=[{'item_id': '3', 'qty': 4.5}, {'asset_id': 7, 'new_condition': 'fair'}],
        notes='  ',
    ))

    assert request.slip_type == 'ISSUE'
    assert request.department == 'HOUSEKEEPING'
    assert request.notes is None
    assert request.lines == (
        QuantityLine(item_id=3, qty=Decimal('4.50')),
        AssetLine(asset_id=7, new_condition='FAIR'),
    )
    assert request.quantity_lines == [QuantityLine(item_id=3, qty=Decimal('4.50'))]
    assert request.asset_lines == [AssetLine(asset_id=7, new_condition='FAIR')]
    assert request.signature.method == 'TYPED'
    assert request.signature.signed_by_user_id is None


def test_unknown_slip_type():
    assert field_of(slip_type='RECEIVE') == 'slip_type'


def test_source_location_required_for_issue_and_transfer():
    assert field_of(from_location_id=None) == 'from_location_id'
    assert field_of(slip_type='TRANSFER', from_location_id=None) == 'from_location_id'


def test_source_location_optional_for_return():
    request = SlipRequest.from_dict(payload(slip_type='RETURN', from_location_id=None))
    assert request.from_location_id is None


def test_transfer_needs_distinct_locations():
    assert field_of(slip_type='TRANSFER', from_location_id=2, to_location_id=2) == 'to_location_id'


def test_required_header_fields():
    assert field_of(property_id=None) == 'property_id'
    assert field_of(to_location_id='') == 'to_location_id'
    assert field_of(department=None) == 'department'
    assert field_of(department='SPA') == 'department'


@pytest.mark.parametrize('bad_id', ['abc', 0, -3, True, 2.5])
def test_ids_must_be_positive_integers(bad_id):
    assert field_of(property_id=bad_id) == 'property_id'


def test_at_least_one_line():
    assert field_of(lines=[]) == 'lines'
    assert field_of(lines=None) == 'lines'


def test_line_must_be_exactly_one_kind():
    assert field_of(lines=[{'item_id': 3, 'qty': '1', 'asset_id': 7}]) == 'lines[0]'
    assert field_of(lines=[{'notes': 'empty'}]) == 'lines[0]'
    assert field_of(lines=[{'item_id': 3}]) == 'lines[0]'


@pytest.mark.parametrize('qty', ['0', '-1', 'ten', '1.234', 'NaN', '10000000000'])
def test_quantity_rules(qty):
    assert field_of(lines=[{'item_id': 3, 'qty': qty}]) == 'lines[0].qty'


def test_parse_quantity_accepts_two_places():
    assert parse_quantity('0.01') == Decimal('0.01')
    assert parse_quantity(7) == Decimal('7.00')


def test_new_condition_rules():
    assert field_of(lines=[{'asset_id': 7, 'new_condition': 'BROKEN'}]) == 'lines[0].new_condition'
    assert field_of(
        slip_type='TRANSFER', lines=[{'asset_id': 7, 'new_condition': 'GOOD'}]
    ) == 'lines[0].new_condition'
    assert field_of(lines=[{'item_id': 3, 'qty': '1', 'new_condition': 'GOOD'}]) == 'lines[0].new_condition'


@pytest.mark.parametrize('condition', ['SCRAP', 'under_maintenance'])
def test_slips_cannot_scrap_or_take_assets_out_of_service(condition):
    assert field_of(
        slip_type='RETURN', lines=[{'asset_id': 7, 'new_condition': condition}]
    ) == 'lines[0].new_condition'


def test_asset_at_most_once_per_slip():
    assert field_of(lines=[{'asset_id': 7}, {'asset_id': 7}]) == 'lines[1].asset_id'


def test_same_item_may_repeat():
    request = SlipRequest.from_dict(payload(lines=[{'item_id': 3, 'qty': '1'}, {'item_id': 3, 'qty': '2'}]))
    assert len(request.quantity_lines) == 2


def test_signature_rules():
    assert field_of(signature=None) == 'signature'
    assert field_of(signature={'signed_by_name': ' J '}) == 'signature.signed_by_name'
    assert field_of(signature={'signed_by_name': 'x' * 121}) == 'signature.signed_by_name'
    assert field_of(signature={'signed_by_name': 'Jane', 'method': 'FAX'}) == 'signature.method'

    request = SlipRequest.from_dict(payload(signature={'signed_by_name': 'Jo', 'method': 'otp'}))
    assert request.signature.method == 'OTP'


def test_source_slip_only_on_returns():
    assert field_of(source_slip_id=5) == 'source_slip_id'
    request = SlipRequest.from_dict(payload(slip_type='RETURN', source_slip_id=5))
    assert request.source_slip_id == 5


def test_external_slip_number_length():
    assert field_of(slip_no='AB') == 'slip_no'
    assert field_of(slip_no='X' * 41) == 'slip_no'
    assert SlipRequest.from_dict(payload(slip_no=' BOOK-7 ')).slip_no == 'BOOK-7'


def test_payload_must_be_an_object():
    with pytest.raises(ValidationError) as exc_info:
        SlipRequest.from_dict(['not', 'a', 'dict'])
    assert exc_info.value.field == 'payload'
    assert exc_info.value.to_dict() == {
        'kind': 'validation',
        'message': 'payload: must be an object',
        'field': 'payload',
        'reason': 'must be an object',
    }
