import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

import click
from flask import Flask, g, jsonify, request
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from vastraverse.config import Config
from vastraverse.db import create_db_engine, init_db, test_simple_query
from vastraverse.exceptions import APIError
from vastraverse.routes import auth_bp, cart_bp, orders_bp, products_bp, wishlist_bp
from vastraverse.routes.utils import schema_error
from vastraverse.services import build_services

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"

logger = logging.getLogger(__name__)


def create_app(config: Optional[Config] = None) -> Flask:
    """
    Application factory.

    Tests call create_app() with their own Config (a throwaway SQLite file);
    everything else reads the environment.
    """
    config = config or Config.from_env()
    config.validate()

    logging.basicConfig(level=config.app.log_level.upper(), format=LOG_FORMAT)

    app = Flask(__name__)
    app.config["DEBUG"] = config.app.debug
    app.config["VASTRAVERSE"] = config

    engine = create_db_engine(config.database)
    init_db(engine)
    app.extensions["vastraverse"] = build_services(config, engine)

    # ------------------------------------------------------------------ #
    # Blueprints                                                           #
    # ------------------------------------------------------------------ #
    app.register_blueprint(auth_bp,     url_prefix="/api/auth")
    app.register_blueprint(products_bp, url_prefix="/api/products")
    app.register_blueprint(orders_bp,   url_prefix="/api/orders")
    app.register_blueprint(cart_bp,     url_prefix="/api/cart")
    app.register_blueprint(wishlist_bp, url_prefix="/api/wishlist")

    # ------------------------------------------------------------------ #
    # Request id + CORS                                                    #
    # ------------------------------------------------------------------ #
    @app.before_request
    def assign_request_id():
        g.request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())[:8]

    @app.after_request
    def add_headers(response):
        response.headers["X-Request-Id"] = getattr(g, "request_id", "")

        origins = config.api.cors_origins
        origin = request.headers.get("Origin")
        if "*" in origins:
            response.headers["Access-Control-Allow-Origin"] = "*"
        elif origin and origin in origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
        response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, PUT, PATCH, DELETE, OPTIONS"
        return response

    # ------------------------------------------------------------------ #
    # Error handlers: consistent JSON error envelope                       #
    # ------------------------------------------------------------------ #
    @app.errorhandler(APIError)
    def api_error(e: APIError):
        if e.status_code >= 500:
            logger.error(f"[{g.get('request_id')}] {e.internal_message}\n{e.traceback or ''}")
        else:
            logger.warning(f"[{g.get('request_id')}] {request.method} {request.path}: {e.message}")
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(SchemaValidationError)
    def schema_validation_error(e: SchemaValidationError):
        err = schema_error(e)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        return jsonify({"success": False, "message": e.description, "error_code": e.name.upper().replace(" ", "_")}), e.code

    @app.errorhandler(SQLAlchemyError)
    def db_error(e):
        logger.exception(f"[{g.get('request_id')}] Database error")
        return jsonify({"success": False, "message": "A database error occurred.", "error_code": "DATABASE"}), 500

    @app.errorhandler(Exception)
    def internal_error(e):
        logger.exception(f"[{g.get('request_id')}] Unhandled error")
        return jsonify({
            "success": False,
            "message": "An internal server error occurred.",
            "error_code": "INTERNAL",
        }), 500

    # ------------------------------------------------------------------ #
    # Health check                                                         #
    # ------------------------------------------------------------------ #
    @app.get("/health")
    def health():
        """Liveness + readiness probe. Returns 503 if DB is unreachable."""
        try:
            test_simple_query(engine)
            return jsonify({
                "status": "ok",
                "database": "reachable",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }), 200
        except SQLAlchemyError as exc:
            logger.error(f"Health check failed: {exc}")
            return jsonify({"status": "error", "database": "unreachable"}), 503

    # ------------------------------------------------------------------ #
    # CLI: flask --app vastraverse.app init-db / seed                      #
    # ------------------------------------------------------------------ #
    @app.cli.command("init-db")
    def init_db_command():
        """Create all tables."""
        init_db(engine)
        click.echo("Database initialised.")

    @app.cli.command("seed")
    def seed_command():
        """Load the demo catalog and admin account."""
        from vastraverse.seed import seed

        seed(engine, config.security)
        click.echo("Seed completed successfully.")

    return app


if __name__ == "__main__":
    application = create_app()
    settings = application.config["VASTRAVERSE"].app
    application.run(debug=settings.debug, host=settings.host, port=settings.port)
