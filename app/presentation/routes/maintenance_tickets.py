"""
Maintenance routes: open, progress and close tickets
"""

from flask import Blueprint, jsonify
from flask_login import login_required
from app.buisness.maintenance.maintenance_context import MaintenanceContext
from app.presentation.routes.request_args import current_actor, json_body

bp = Blueprint('maintenance_tickets', __name__)


def _ticket_json(ticket):
    data = ticket.to_dict()
    data['asset_tag'] = ticket.asset.tag
    data['asset_condition'] = ticket.asset.condition
    data['logs'] = [log.to_dict() for log in ticket.logs]
    return data


@bp.route('/tickets', methods=['POST'])
@login_required
def open_ticket():
    context = MaintenanceContext.open_ticket(json_body(), current_actor())
    return jsonify(_ticket_json(context.ticket)), 201


@bp.route('/tickets/<int:ticket_id>/status', methods=['POST'])
@login_required
def update_status(ticket_id):
    ticket = MaintenanceContext.load(ticket_id).update_status(json_body(), current_actor())
    return jsonify(_ticket_json(ticket))


@bp.route('/tickets/<int:ticket_id>/close', methods=['POST'])
@login_required
def close_ticket(ticket_id):
    ticket = MaintenanceContext.load(ticket_id).close_ticket(json_body(), current_actor())
    return jsonify(_ticket_json(ticket))
