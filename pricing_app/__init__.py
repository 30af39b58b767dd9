"""Flask application factory."""
import logging

from flask import Flask, request, jsonify
from flask_wtf.csrf import CSRFProtect, CSRFError
from werkzeug.exceptions import HTTPException

from pricing_app.database import init_db


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    # Initialize CSRF protection
    CSRFProtect(app)

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        app.logger.warning(f"CSRF Error: {e.description}")
        return jsonify({'status': 'error', 'message': 'Session expired. Reload and try again.'}), 400

    # Initialize database
    init_db(app)

    # Catalog gateway: one explicit instance for the process lifetime
    from pricing_app import database
    from pricing_app.services.catalog_gateway import CatalogGateway
    app.extensions['catalog_gateway'] = CatalogGateway(
        database.db_session,
        default_limit=app.config.get('CATALOG_DEFAULT_LIMIT', 20),
        search_limit=app.config.get('CATALOG_SEARCH_LIMIT', 50),
    )

    # Error Handlers
    from pricing_app.exceptions import PricingError

    @app.errorhandler(PricingError)
    def handle_pricing_error(error):
        """Handle custom application exceptions."""
        if error.status_code >= 500:
            app.logger.error(f"PricingError [{error.status_code}]: {error.message}")
        else:
            app.logger.info(f"PricingError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'status': 'error', 'message': 'Not Found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'status': 'error', 'message': 'Method Not Allowed'}), 405

    @app.errorhandler(500)
    @app.errorhandler(Exception)
    def internal_error(error):
        if isinstance(error, HTTPException):
            return jsonify({'status': 'error', 'message': error.description}), error.code
        app.logger.exception(f"Unhandled Exception on {request.path}: {error}")
        return jsonify({'status': 'error', 'message': 'Internal Server Error'}), 500

    # Register blueprints
    from pricing_app.blueprints.catalog import catalog_bp
    from pricing_app.blueprints.quotes import quotes_bp

    app.register_blueprint(catalog_bp)
    app.register_blueprint(quotes_bp)

    # CLI commands
    from pricing_app.cli_commands import init_cli_commands
    init_cli_commands(app)

    return app
