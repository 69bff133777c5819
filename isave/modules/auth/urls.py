from flask import Blueprint
from flask_restful import Api
from isave.modules.auth.resources import (
    SignupResource,
    LoginResource,
    LogoutResource,
)

auth_bp = Blueprint("auth", __name__)
auth_api = Api(auth_bp)

auth_api.add_resource(SignupResource, "/auth/signup", endpoint="auth_signup")
auth_api.add_resource(LoginResource, "/auth/login", endpoint="auth_login")
auth_api.add_resource(LogoutResource, "/auth/logout", endpoint="auth_logout")


def register_auth_routes(app):
    """Register authentication routes with the app."""
    app.register_blueprint(auth_bp, url_prefix="/api")
