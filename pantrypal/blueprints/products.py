"""Products blueprint: catalogue search, barcode lookup and manual entry."""
from flask import Blueprint, request, jsonify, current_app

from pantrypal.database import get_session
from pantrypal.middleware import require_role
from pantrypal.models import UserRole
from pantrypal.services.product_service import add_product, search_products, get_product_by_barcode
from pantrypal.utils.formatters import product_to_dict

products_bp = Blueprint('products', __name__, url_prefix='/api/products')


@products_bp.route('/search', methods=['GET'])
@require_role(UserRole.RETAILER)
def search():
    """Autocomplete search: /api/products/search?q=milk"""
    products = search_products(
        get_session(),
        request.args.get('q', ''),
        limit=current_app.config.get('PRODUCT_SEARCH_LIMIT', 10),
    )
    return jsonify([product_to_dict(p) for p in products])


@products_bp.route('/barcode/<barcode>', methods=['GET'])
@require_role(UserRole.RETAILER)
def by_barcode(barcode):
    product = get_product_by_barcode(get_session(), barcode)
    return jsonify(product_to_dict(product))


@products_bp.route('', methods=['POST'])
@require_role(UserRole.RETAILER)
def create():
    data = request.get_json(silent=True) or {}
    product = add_product(get_session(), data)
    return jsonify(product_to_dict(product)), 201
