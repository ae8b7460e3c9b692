"""
Error handlers: domain errors and HTTP errors become JSON responses
"""

from flask import Blueprint, jsonify
from werkzeug.exceptions import HTTPException
from app.buisness.core.errors import InventoryDomainError
from app.logger import get_logger

logger = get_logger("stock_ledger.routes.errors")
bp = Blueprint('errors', __name__)


@bp.app_errorhandler(InventoryDomainError)
def handle_domain_error(error):
    if error.http_status >= 500:
        logger.error(f"{error.__class__.__name__}: {error.message}")
    else:
        logger.warning(f"{error.__class__.__name__} ({error.http_status}): {error.message}")
    return jsonify(error.to_dict()), error.http_status


@bp.app_errorhandler(HTTPException)
def handle_http_error(error):
    logger.debug(f"HTTP {error.code}: {error.description}")
    return jsonify({'kind': 'http_error', 'message': error.description}), error.code
