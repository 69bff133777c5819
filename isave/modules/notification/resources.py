from flask import request
from flask_restful import Resource
from isave.core.authentication import authenticated_user
from isave.core.context import RequestContext
from isave.core.decorators import handle_errors, validate_json_request
from .schemas import NotificationSchema, MarkReadSchema
from .services import NotificationService

notifications_schema = NotificationSchema(many=True)
mark_read_schema = MarkReadSchema()


class NotificationListResource(Resource):
    method_decorators = [handle_errors, authenticated_user]

    def get(self):
        notifications = NotificationService.get_all(RequestContext.from_request())
        return notifications_schema.dump(notifications), 200


class UnreadCountResource(Resource):
    method_decorators = [handle_errors, authenticated_user]

    def get(self):
        return {"count": NotificationService.unread_count(RequestContext.from_request())}, 200


class NotificationReadResource(Resource):
    method_decorators = [handle_errors, authenticated_user]

    def post(self, notification_id):
        """Mark a single notification read"""
        updated = NotificationService.mark_as_read(
            RequestContext.from_request(), [notification_id]
        )
        return {"success": True, "updated": updated}, 200


class NotificationBulkReadResource(Resource):
    method_decorators = [handle_errors, validate_json_request, authenticated_user]

    def post(self):
        data = mark_read_schema.load(request.get_json() or {})
        updated = NotificationService.mark_as_read(
            RequestContext.from_request(), data["ids"]
        )
        return {"success": True, "updated": updated}, 200


class NotificationReadAllResource(Resource):
    method_decorators = [handle_errors, authenticated_user]

    def post(self):
        updated = NotificationService.mark_all_as_read(RequestContext.from_request())
        return {"success": True, "updated": updated}, 200
