from flask import g
from flask_restful import Resource
from isave.core.authentication import authenticated_user
from isave.core.decorators import handle_errors
from isave.core.logger import logger
from isave.core.permissions import admin_only
from isave.core.pagination import PaginatedListResource
from isave.modules.user.models import User
from isave.modules.user.schemas import UserSchema

user_schema = UserSchema()
users_schema = UserSchema(many=True)


class UserListResource(PaginatedListResource):
    method_decorators = [
        handle_errors,
        admin_only,
        authenticated_user,
    ]
    model = User
    schema = users_schema
    endpoint = "users.all-users"

    def get_queryset(self):
        return super().get_queryset().filter(User.is_deleted.is_(False))


class CurrentUserResource(Resource):
    method_decorators = [handle_errors, authenticated_user]

    def get(self):
        """Profile of the authenticated user"""
        logger.info(f"User details retrieved for user_id: {g.current_user.id}")
        return user_schema.dump(g.current_user), 200
