"""Main blueprint: liveness endpoints."""
from flask import Blueprint, jsonify
from sqlalchemy import text

from pantrypal.database import get_session

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    return 'PantryPal Backend Running'


@main_bp.route('/health')
def health():
    """Health check, including a round trip to the database."""
    get_session().execute(text('SELECT 1'))
    return jsonify({'status': 'ok'})
