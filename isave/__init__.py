from flask import Flask, request
from uuid import UUID
from isave.extensions import db, migrate, bcrypt, jwt, ma, init_redis, init_limiter
from isave.celery_app import init_celery
from isave.core.logger import logger
from isave.core.exceptions import setup_exception_handlers
from flask_cors import CORS
from flasgger import Swagger


def create_app(config_class="isave.config.Config"):
    """Factory function to create and configure the Flask application"""
    app = Flask(__name__)

    # Load configuration
    if isinstance(config_class, dict):
        # Handle dictionary config (e.g., from tests)
        app.config.from_object("isave.config.Config")
        app.config.update(config_class)
    else:
        # Handle module/object config (e.g., isave.config.Config)
        app.config.from_object(config_class)

    # Initialize Flask extensions
    db.init_app(app)
    migrate.init_app(app, db)
    ma.init_app(app)
    bcrypt.init_app(app)
    jwt.init_app(app)
    init_redis(app)
    init_limiter(app)
    Swagger(app)
    CORS(app)

    # Configure logger
    app.logger = logger

    # Initialize Celery
    app.celery = init_celery(app)

    # Register blueprints/routes
    register_blueprints(app)

    # Register error handlers
    setup_exception_handlers(app)
    register_jwt_handlers()

    @app.before_request
    def validate_uuids():
        """Reject malformed ids in the URL before any resource runs."""
        for key in request.view_args or {}:
            if key.endswith("_id"):
                try:
                    request.view_args[key] = UUID(request.view_args[key])
                except (ValueError, TypeError):
                    return {"error": "Resource not found", "code": "NOT_FOUND"}, 404

    return app


def register_jwt_handlers():
    """Render JWT failures in the same shape as every other error."""

    @jwt.unauthorized_loader
    def missing_token(reason):
        return {"error": reason, "code": "UNAUTHORIZED"}, 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return {"error": reason, "code": "UNAUTHORIZED"}, 401

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return {"error": "Token has expired", "code": "UNAUTHORIZED"}, 401


def register_blueprints(app):
    """Register all application blueprints"""
    from isave.modules.auth.urls import register_auth_routes
    from isave.modules.user.urls import register_user_routes
    from isave.modules.wallet.urls import register_wallet_routes
    from isave.modules.save_plan.urls import register_save_plan_routes
    from isave.modules.notification.urls import register_notification_routes
    from isave.modules.activity_log.urls import register_activity_log_routes

    register_auth_routes(app)
    register_user_routes(app)
    register_wallet_routes(app)
    register_save_plan_routes(app)
    register_notification_routes(app)
    register_activity_log_routes(app)
