"""Sales blueprint: checkout against FEFO stock."""
import logging

from flask import Blueprint, request, jsonify, g

from pantrypal.blueprints.metrics import sales_completed_total, sales_failed_total
from pantrypal.database import get_session
from pantrypal.exceptions import PantryError
from pantrypal.middleware import require_role
from pantrypal.models import UserRole
from pantrypal.services.sales_service import create_sale
from pantrypal.utils.formatters import money

logger = logging.getLogger(__name__)

sales_bp = Blueprint('sales', __name__, url_prefix='/api/sales')


@sales_bp.route('', methods=['POST'])
@require_role(UserRole.RETAILER)
def checkout():
    """
    Create a sale: {"items": [{"product_id": 1, "quantity": 2}, ...]}

    Returns 201 with the claim code to hand to the customer.
    """
    data = request.get_json(silent=True) or {}
    try:
        result = create_sale(get_session(), g.user_id, data.get('items'))
    except PantryError as e:
        sales_failed_total.labels(reason=type(e).__name__).inc()
        logger.info(f"Sale rejected for user {g.user_id}: {e.message}")
        raise

    sales_completed_total.inc()
    return jsonify({
        'message': 'Sale completed',
        'claim_code': result.claim_code,
        'total_amount': money(result.total_amount),
    }), 201
