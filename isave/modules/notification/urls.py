from flask import Blueprint
from flask_restful import Api
from .resources import (
    NotificationListResource,
    UnreadCountResource,
    NotificationReadResource,
    NotificationBulkReadResource,
    NotificationReadAllResource,
)

notification_bp = Blueprint("notifications", __name__)
notification_api = Api(notification_bp)

notification_api.add_resource(NotificationListResource, "", endpoint="notifications")
notification_api.add_resource(
    UnreadCountResource, "/unread-count", endpoint="unread-count"
)
notification_api.add_resource(
    NotificationBulkReadResource, "/read", endpoint="notifications-read"
)
notification_api.add_resource(
    NotificationReadAllResource, "/read-all", endpoint="notifications-read-all"
)
notification_api.add_resource(
    NotificationReadResource,
    "/<notification_id>/read",
    endpoint="notification-read",
)


def register_notification_routes(app):
    app.register_blueprint(notification_bp, url_prefix="/api/notifications")
