from flask import request
from flask_restful import Resource
from isave.core.authentication import authenticated_user, get_bearer_token
from isave.core.decorators import handle_errors, validate_json_request
from isave.core.logger import logger
from isave.core.tokens import TokenUtils
from isave.extensions import db, limiter
from isave.modules.auth.schemas import UserLoginSchema
from isave.modules.auth.services import AuthTokenService, RegistrationService
from isave.modules.user.schemas import SignupSchema, UserSchema

signup_schema = SignupSchema()
login_schema = UserLoginSchema()
user_schema = UserSchema()


class SignupResource(Resource):
    decorators = [limiter.limit("10 per hour")]

    @validate_json_request
    @handle_errors
    def post(self):
        """Register a new user and open their wallet."""
        logger.info("Starting user registration process")
        data = signup_schema.load(request.get_json() or {})
        user = RegistrationService.register(db.session, **data)
        return user_schema.dump(user), 201


class LoginResource(Resource):
    decorators = [limiter.limit("20 per minute")]

    @validate_json_request
    @handle_errors
    def post(self):
        """Authenticate a user and issue a token."""
        data = login_schema.load(request.get_json() or {})
        user = AuthTokenService.authenticate_user(data["username"], data["password"])
        tokens = AuthTokenService.generate_tokens(user)
        return {
            "tokens": tokens,
        }, 200


class LogoutResource(Resource):
    @authenticated_user
    @handle_errors
    def post(self):
        """Revoke the current user's token."""
        logger.info("Received logout request")
        TokenUtils.invalidate_access_token(get_bearer_token())
        return {
            "message": "You have been successfully logged out.",
        }, 200
