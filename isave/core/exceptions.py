from marshmallow.exceptions import ValidationError
from werkzeug.exceptions import HTTPException
from isave.core.logger import logger
import redis


class ApiError(HTTPException):
    """
    Error surfaced to the caller with a coarse kind and a readable message.

    Subclasses werkzeug's HTTPException so Flask-RESTful renders ``data``
    as the response body instead of a generic 500. The base class has no
    status code so Flask matches its handler for every subclass.
    """

    code = None
    kind = "INTERNAL_SERVER_ERROR"
    default_message = "Something went wrong."

    def __init__(self, message=None):
        message = message or self.default_message
        super().__init__(description=message)
        self.message = message
        self.data = {"error": message, "code": self.kind}


class BadRequestError(ApiError):
    code = 400
    kind = "BAD_REQUEST"
    default_message = "Bad request."


class UnauthorizedError(ApiError):
    code = 401
    kind = "UNAUTHORIZED"
    default_message = "Authentication required."


class ForbiddenError(ApiError):
    code = 403
    kind = "FORBIDDEN"
    default_message = "Unauthorized."


class NotFoundError(ApiError):
    code = 404
    kind = "NOT_FOUND"
    default_message = "Resource not found."


class InternalServerError(ApiError):
    code = 500
    kind = "INTERNAL_SERVER_ERROR"


def validation_error_response(error):
    """Report the first message per field as a BAD_REQUEST body."""
    messages = error.messages
    if isinstance(messages, dict):
        detail = {
            field: problems[0] if isinstance(problems, list) else problems
            for field, problems in messages.items()
        }
    elif isinstance(messages, list):
        detail = messages[0] if messages else "Invalid input."
    else:
        detail = str(messages)
    return {"error": detail, "code": BadRequestError.kind}, BadRequestError.code


def setup_exception_handlers(application):
    """Configure exception handlers for the application."""

    @application.errorhandler(ApiError)
    def process_api_error(error):
        """Process typed API errors raised by services"""
        if error.code >= 500:
            logger.error(f"{error.kind}: {error.message}")
        else:
            logger.info(f"{error.kind}: {error.message}")
        return error.data, error.code

    @application.errorhandler(ValidationError)
    def process_validation_failure(error):
        """Process Marshmallow schema validation failures"""
        logger.warning(f"Input validation failed: {error.messages}")
        return validation_error_response(error)

    @application.errorhandler(404)
    def process_resource_missing(error):
        """Process 404 Resource Missing errors"""
        logger.info(f"Resource unavailable: {str(error)}")
        return {"error": "Resource Not Found", "code": "NOT_FOUND"}, 404

    @application.errorhandler(405)
    def process_method_not_allowed(error):
        return {"error": "Method Not Allowed", "code": "METHOD_NOT_ALLOWED"}, 405

    @application.errorhandler(429)
    def process_rate_limited(error):
        logger.warning(f"Rate limit exceeded: {error.description}")
        return {
            "error": application.config.get("RATE_LIMIT_MESSAGE", error.description),
            "code": "TOO_MANY_REQUESTS",
        }, 429

    @application.errorhandler(redis.RedisError)
    def handle_redis_error(error):
        """Handle Redis connection and operational errors"""
        logger.error(f"Redis error: {str(error)}", exc_info=True)
        return {
            "error": "Service temporarily unavailable. Please try again later."
        }, 503

    @application.errorhandler(Exception)
    def process_system_error(error):
        """Process all other unexpected system errors"""
        if isinstance(error, ApiError):
            return process_api_error(error)
        if isinstance(error, HTTPException):
            return {"error": error.description}, error.code
        logger.error(f"System error occurred: {str(error)}", exc_info=True)
        return {
            "error": "An unexpected error occurred.",
            "code": "INTERNAL_SERVER_ERROR",
        }, 500
