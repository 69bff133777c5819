from flask import Blueprint
from flask_restful import Api
from isave.modules.user.resources import UserListResource, CurrentUserResource

users_bp = Blueprint("users", __name__)
users_api = Api(users_bp)

users_api.add_resource(UserListResource, "", endpoint="all-users")
users_api.add_resource(CurrentUserResource, "/me", endpoint="me")


def register_user_routes(app):
    app.register_blueprint(users_bp, url_prefix="/api/users")
