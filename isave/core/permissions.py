from functools import wraps
from flask import g
from isave.core.constants import UserRole
from isave.core.exceptions import ForbiddenError, UnauthorizedError
from isave.core.logger import logger


def admin_only(f):
    """Restrict an endpoint to admins. Must sit inside ``authenticated_user``."""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = getattr(g, "current_user", None)
        if user is None:
            raise UnauthorizedError()

        if user.role != UserRole.ADMIN:
            logger.warning(f"Non-admin {user.id} tried to reach {f.__name__}")
            raise ForbiddenError("Admin privileges required")

        return f(*args, **kwargs)

    return decorated_function
