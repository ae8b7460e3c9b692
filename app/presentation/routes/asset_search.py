from flask import Blueprint, jsonify, request
from flask_login import login_required
from app.services.core.asset_search_service import AssetSearchService

bp = Blueprint('asset_search', __name__)


@bp.route('/assets/search', methods=['GET'])
@login_required
def search_assets():
    assets = AssetSearchService.search(request.args.get('q'), request.args.get('item_type'))
    return jsonify({'assets': [AssetSearchService.serialize(a) for a in assets]})
