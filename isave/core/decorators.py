from functools import wraps
from flask import request, g
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from isave.core.exceptions import validation_error_response
from isave.core.logger import logger
from isave.extensions import db


def validate_json_request(f):
    """Decorator to validate JSON content type and ensure body is valid JSON."""

    @wraps(f)
    def decorated(*args, **kwargs):
        if request.method in ["POST", "PUT", "PATCH"] and request.data:
            if not request.is_json:
                return {
                    "error": "Request must be in JSON format. Please set the Content-Type header to application/json.",
                    "code": "BAD_REQUEST",
                }, 415

            if request.get_json(silent=True) is None:
                return {
                    "error": "Invalid JSON in request body. Please provide a valid JSON payload.",
                    "code": "BAD_REQUEST",
                }, 400

        return f(*args, **kwargs)

    return decorated


def handle_errors(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except ValidationError as err:
            db.session.rollback()
            logger.warning(f"Validation failed in {f.__name__}: {err.messages}")
            return validation_error_response(err)
        except HTTPException:
            db.session.rollback()
            raise
        except Exception as e:
            db.session.rollback()
            logger.error(f"Unexpected error in {f.__name__}: {str(e)}", exc_info=True)
            return {
                "error": "An unexpected error occurred.",
                "code": "INTERNAL_SERVER_ERROR",
            }, 500

    return wrapper


def log_activity(action, entity_type=None, id_param=None):
    """
    Record a successful mutation in the activity log.

    ``id_param`` names the URL argument holding the affected entity id;
    the JSON body (if any) is stored as the details.
    """

    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            result = f(*args, **kwargs)

            status = result[1] if isinstance(result, tuple) else 200
            current_user = getattr(g, "current_user", None)
            if status < 400 and current_user is not None:
                # Imported here, the activity log module depends on core.
                from isave.modules.activity_log.services import ActivityLogService

                entity_id = kwargs.get(id_param) if id_param else None
                ActivityLogService.record(
                    user_id=current_user.id,
                    action=action,
                    entity_type=entity_type or action.split("_")[0],
                    entity_id=str(entity_id) if entity_id else None,
                    details=request.get_json(silent=True),
                )
            return result

        return decorated

    return decorator
