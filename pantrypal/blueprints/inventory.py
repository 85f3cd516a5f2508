"""Inventory blueprint: add stock and view the retailer's batches."""
from flask import Blueprint, request, jsonify, g

from pantrypal.database import get_session
from pantrypal.middleware import require_role
from pantrypal.models import UserRole
from pantrypal.services.inventory_service import add_stock, get_inventory
from pantrypal.utils.formatters import batch_to_dict, inventory_row_to_dict

inventory_bp = Blueprint('inventory', __name__, url_prefix='/api/inventory')


@inventory_bp.route('', methods=['POST'])
@require_role(UserRole.RETAILER)
def create_batch():
    """Add stock: {product_id, mfd_date, expiry_date, quantity, purchase_price, selling_price}"""
    data = request.get_json(silent=True) or {}
    batch = add_stock(get_session(), g.user_id, data)
    return jsonify({
        'message': 'Stock added successfully',
        'batch': batch_to_dict(batch),
    }), 201


@inventory_bp.route('', methods=['GET'])
@require_role(UserRole.RETAILER)
def list_inventory():
    rows = get_inventory(get_session(), g.user_id)
    return jsonify([inventory_row_to_dict(batch, product) for batch, product in rows])
