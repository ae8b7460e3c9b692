"""
Logging Sanitizer Utility

Strips sensitive values out of request payloads before they are logged.
Slip and maintenance payloads are nested JSON (header, lines, signature), so
sanitization walks dicts and lists.
"""

from typing import Any, Dict, Mapping


# Fields that should never be logged
SENSITIVE_FIELDS = {
    'password',
    'password_confirm',
    'confirm_password',
    'current_password',
    'new_password',
    'secret',
    'token',
    'api_key',
    'auth_token',
    'access_token',
    'refresh_token',
    'session_id',
    'csrf_token',
    'otp',
    'otp_code',
}

REDACTED = '[REDACTED]'


def sanitize_payload(data: Any, redact_text: str = REDACTED) -> Any:
    """
    Return a copy of ``data`` with sensitive field values replaced.

    Keys are matched case-insensitively. Nested dicts and lists are walked;
    scalars are returned unchanged.

    Example:
        >>> sanitize_payload({'username': 'admin', 'password': 'secret123'})
        {'username': 'admin', 'password': '[REDACTED]'}
    """
    if isinstance(data, Mapping):
        sanitized: Dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(key, str) and key.lower() in SENSITIVE_FIELDS:
                sanitized[key] = redact_text
            else:
                sanitized[key] = sanitize_payload(value, redact_text)
        return sanitized
    if isinstance(data, (list, tuple)):
        return [sanitize_payload(item, redact_text) for item in data]
    return data


def sanitize_form_data(form_data: Mapping, redact_text: str = REDACTED) -> Dict[str, Any]:
    """
    Sanitize Flask request.form data for safe logging.

    Args:
        form_data: Flask request.form (ImmutableMultiDict)
        redact_text: Text to use for redacted values

    Returns:
        Plain dict safe for logging
    """
    return sanitize_payload(dict(form_data), redact_text)
