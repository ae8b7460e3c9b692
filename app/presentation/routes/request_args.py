"""
Helpers shared by the JSON blueprints
"""

from datetime import datetime
from flask import current_app, request
from flask_login import current_user
from app.buisness.core.errors import ValidationError
from app.buisness.core.permissions import Actor

MAX_PAGE_SIZE = 200


def current_actor() -> Actor:
    return Actor.from_user(current_user)


def page_args(default_config_key='DEFAULT_PAGE_SIZE'):
    page = request.args.get('page', 1, type=int)
    per_page = request.args.get('per_page', current_app.config.get(default_config_key, 50), type=int)
    return max(page, 1), max(1, min(per_page, MAX_PAGE_SIZE))


def date_arg(name):
    value = request.args.get(name)
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(name, 'must be an ISO 8601 date')


def json_body():
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError('payload', 'must be a JSON object')
    return data


def pagination_meta(pagination):
    return {
        'page': pagination.page,
        'per_page': pagination.per_page,
        'total': pagination.total,
        'pages': pagination.pages,
    }
