"""Customer blueprint: claimed items, usage and reminders."""
from flask import Blueprint, request, jsonify, g

from pantrypal.database import get_session
from pantrypal.middleware import require_role
from pantrypal.models import UserRole
from pantrypal.services.customer_item_service import (
    get_customer_items, mark_item_used, set_item_reminder
)
from pantrypal.utils.formatters import customer_item_to_dict
from pantrypal.utils.parsing import MAX_ID

customer_bp = Blueprint('customer', __name__, url_prefix='/api/customer')


@customer_bp.route('/items', methods=['GET'])
@require_role(UserRole.CUSTOMER)
def my_items():
    rows = get_customer_items(get_session(), g.user_id)
    return jsonify([customer_item_to_dict(*row) for row in rows])


@customer_bp.route(f'/items/<int(max={MAX_ID}):item_id>/use', methods=['PUT'])
@require_role(UserRole.CUSTOMER)
def use_item(item_id):
    mark_item_used(get_session(), g.user_id, item_id)
    return jsonify({'message': 'Item marked as USED'})


@customer_bp.route(f'/items/<int(max={MAX_ID}):item_id>/reminder', methods=['PUT'])
@require_role(UserRole.CUSTOMER)
def reminder(item_id):
    data = request.get_json(silent=True) or {}
    set_item_reminder(
        get_session(), g.user_id, item_id,
        data.get('reminder_date'), data.get('reminder_time'),
    )
    return jsonify({'message': 'Reminder set successfully'})
