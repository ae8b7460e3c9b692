"""
Tests for the logging sanitizer utility
"""

from werkzeug.datastructures import ImmutableMultiDict

from app.utils.logging_sanitizer import REDACTED, sanitize_form_data, sanitize_payload


def test_sensitive_fields_are_redacted():
    data = {
        'username': 'admin',
        'password': 'secret123',
        'csrf_token': 'abc123',
        'API_KEY': 'key-1',
    }

    sanitized = sanitize_payload(data)

    assert sanitized == {
        'username': 'admin',
        'password': REDACTED,
        'csrf_token': REDACTED,
        'API_KEY': REDACTED,
    }
    # The original is left untouched
    assert data['password'] == 'secret123'


def test_nested_payloads_are_walked():
    payload = {
        'slip_type': 'ISSUE',
        'lines': [{'item_id': 1, 'qty': '2'}, {'asset_id': 3, 'token': 'x'}],
        'signature': {'signed_by_name': 'Jane Doe', 'method': 'OTP', 'otp': '918273'},
    }

    sanitized = sanitize_payload(payload)

    assert sanitized['lines'][0] == {'item_id': 1, 'qty': '2'}
    assert sanitized['lines'][1]['token'] == REDACTED
    assert sanitized['signature'] == {'signed_by_name': 'Jane Doe', 'method': 'OTP', 'otp': REDACTED}


def test_custom_redaction_text():
    assert sanitize_payload({'new_password': 'x'}, redact_text='***') == {'new_password': '***'}


def test_scalars_pass_through():
    assert sanitize_payload('plain') == 'plain'
    assert sanitize_payload(None) is None
    assert sanitize_payload(['a', 1]) == ['a', 1]


def test_form_data():
    form = ImmutableMultiDict([('username', 'chef'), ('password', 'hunter22')])

    assert sanitize_form_data(form) == {'username': 'chef', 'password': REDACTED}
