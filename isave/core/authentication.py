from functools import wraps
from flask import request, g
from flask_jwt_extended import jwt_required
from isave.modules.auth.models import ActiveAccessToken
from .exceptions import UnauthorizedError
from .logger import logger


def get_bearer_token():
    """Extract bearer token from Authorization header."""
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    return (token.strip() or None) if scheme == "Bearer" else None


def load_session_user(token):
    """Resolve the account behind an active access token, or raise 401."""
    record = ActiveAccessToken.query.filter_by(token=token).first() if token else None
    if record is None:
        logger.warning(f"Rejected revoked token {(token or '')[:10]}...")
        raise UnauthorizedError("Invalid or revoked token.")

    if record.user is None or record.user.is_deleted:
        logger.warning(f"Token {token[:10]}... belongs to a removed account")
        raise UnauthorizedError("Account no longer exists.")
    return record.user


def authenticated_user(f):
    """
    Require a valid JWT that has not been revoked by logout.

    The signature and expiry are checked by Flask-JWT-Extended; the token must
    also still be listed in ``active_access_tokens``. The caller is exposed as
    ``g.current_user`` for ``RequestContext.from_request``.
    """

    @wraps(f)
    @jwt_required()
    def decorated(*args, **kwargs):
        g.current_user = load_session_user(get_bearer_token())
        logger.debug(f"Request authenticated for user: {g.current_user.username}")
        return f(*args, **kwargs)

    return decorated
