"""
Inventory routes: stock balances, low-stock report and movement history
"""

from flask import Blueprint, jsonify, request
from flask_login import login_required
from app.services.inventory.stock_balance_service import StockBalanceService
from app.services.inventory.movement_log_service import MovementLogService
from app.presentation.routes.request_args import date_arg, page_args, pagination_meta

bp = Blueprint('stock', __name__)


@bp.route('/stock', methods=['GET'])
@login_required
def stock_balances():
    page, per_page = page_args()
    pagination = StockBalanceService.get_list_data(
        page=page,
        per_page=per_page,
        item_id=request.args.get('item_id', type=int),
        location_id=request.args.get('location_id', type=int),
        property_id=request.args.get('property_id', type=int),
        include_zero=request.args.get('include_zero', 'true').lower() != 'false',
    )
    return jsonify({
        'balances': [StockBalanceService.serialize(b) for b in pagination.items],
        'pagination': pagination_meta(pagination),
    })


@bp.route('/stock/low', methods=['GET'])
@login_required
def low_stock():
    page, per_page = page_args('LOW_STOCK_PAGE_SIZE')
    pagination = StockBalanceService.get_low_stock(
        page=page,
        per_page=per_page,
        property_id=request.args.get('property_id', type=int),
    )
    return jsonify({
        'balances': [StockBalanceService.serialize(b) for b in pagination.items],
        'pagination': pagination_meta(pagination),
    })


@bp.route('/movements', methods=['GET'])
@login_required
def movements():
    page, per_page = page_args()
    pagination, form_options = MovementLogService.get_list_data(
        page=page,
        per_page=per_page,
        item_id=request.args.get('item_id', type=int),
        asset_id=request.args.get('asset_id', type=int),
        location_id=request.args.get('location_id', type=int),
        slip_id=request.args.get('slip_id', type=int),
        movement_type=request.args.get('movement_type'),
        date_from=date_arg('date_from'),
        date_to=date_arg('date_to'),
    )
    return jsonify({
        'movements': [MovementLogService.serialize(m) for m in pagination.items],
        'pagination': pagination_meta(pagination),
        'options': form_options,
    })
