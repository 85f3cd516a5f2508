"""Flask application factory."""
import logging
import traceback

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from pantrypal.database import init_db


def _configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s',
    )
    app.logger.setLevel(level)
    logging.getLogger('pantrypal').setLevel(level)


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    _configure_logging(app)

    # Production: Enable ProxyFix for HTTPS behind a reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    # Initialize database
    init_db(app)

    # Prometheus metrics instrumentation
    from pantrypal.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    # Load authenticated user before each request
    from pantrypal.middleware import load_current_user

    @app.before_request
    def before_request_handler():
        """Load user and role context for each request."""
        load_current_user()

    # Error Handlers
    from pantrypal.exceptions import PantryError

    @app.errorhandler(PantryError)
    def handle_pantry_error(error):
        """Handle custom application exceptions."""
        if error.status_code >= 500:
            app.logger.error(f"PantryError [{error.status_code}]: {error.message}")
        else:
            app.logger.warning(f"PantryError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'status': 'error', 'message': error.name}), error.code

    @app.errorhandler(Exception)
    def internal_error(error):
        app.logger.error(f"Unhandled Exception: {error}")
        app.logger.error(f"Traceback: {traceback.format_exc()}")
        return jsonify({'status': 'error', 'message': 'Internal Server Error'}), 500

    # Register blueprints
    from pantrypal.blueprints.main import main_bp
    from pantrypal.blueprints.products import products_bp
    from pantrypal.blueprints.inventory import inventory_bp
    from pantrypal.blueprints.sales import sales_bp
    from pantrypal.blueprints.claims import claims_bp
    from pantrypal.blueprints.customer import customer_bp
    from pantrypal.blueprints.metrics import metrics_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(inventory_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(claims_bp)
    app.register_blueprint(customer_bp)
    app.register_blueprint(metrics_bp)

    # Register CLI commands
    from pantrypal.cli_commands import init_cli_commands
    init_cli_commands(app)

    app.logger.info(f"PantryPal started (env={app.config.get('ENV')})")

    return app
