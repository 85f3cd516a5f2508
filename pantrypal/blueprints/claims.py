"""Claims blueprint: customers redeem a sale's claim code."""
import logging

from flask import Blueprint, request, jsonify, g

from pantrypal.blueprints.metrics import claims_completed_total, claims_failed_total
from pantrypal.database import get_session
from pantrypal.exceptions import PantryError
from pantrypal.middleware import require_role
from pantrypal.models import UserRole
from pantrypal.services.claim_service import claim_purchase

logger = logging.getLogger(__name__)

claims_bp = Blueprint('claims', __name__, url_prefix='/api/claim')


@claims_bp.route('', methods=['POST'])
@require_role(UserRole.CUSTOMER)
def claim():
    data = request.get_json(silent=True) or {}
    try:
        items_count = claim_purchase(get_session(), g.user_id, data.get('claim_code'))
    except PantryError as e:
        claims_failed_total.labels(reason=type(e).__name__).inc()
        raise

    claims_completed_total.inc()
    return jsonify({
        'message': 'Purchase claimed successfully',
        'items_count': items_count,
    })
