"""
Slip routes: create, read back and list slips
"""

from flask import Blueprint, jsonify, request
from flask_login import login_required
from app.buisness.slips.slip_engine import SlipEngine
from app.services.slips.slip_service import SlipService
from app.presentation.routes.request_args import current_actor, date_arg, json_body, page_args, pagination_meta
from app.logger import get_logger

logger = get_logger("stock_ledger.routes.slips")
bp = Blueprint('slips', __name__)


@bp.route('/slips', methods=['POST'])
@login_required
def create_slip():
    """Create an ISSUE, RETURN or TRANSFER slip"""
    payload = json_body()
    slip = SlipEngine().create_slip(payload, current_actor())
    return jsonify(SlipService.serialize(slip)), 201


@bp.route('/slips', methods=['GET'])
@login_required
def list_slips():
    page, per_page = page_args()
    pagination, form_options = SlipService.get_list_data(
        page=page,
        per_page=per_page,
        slip_type=request.args.get('slip_type'),
        property_id=request.args.get('property_id', type=int),
        department=request.args.get('department'),
        date_from=date_arg('date_from'),
        date_to=date_arg('date_to'),
    )
    return jsonify({
        'slips': [SlipService.serialize_header(slip) for slip in pagination.items],
        'pagination': pagination_meta(pagination),
        'options': form_options,
    })


@bp.route('/slips/<int:slip_id>', methods=['GET'])
@login_required
def get_slip(slip_id):
    return jsonify(SlipService.serialize(SlipService.get_slip(slip_id)))
