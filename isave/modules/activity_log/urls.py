from flask import Blueprint
from flask_restful import Api
from .resources import ActivityLogListResource

activity_log_bp = Blueprint("activity_logs", __name__)
activity_log_api = Api(activity_log_bp)

activity_log_api.add_resource(
    ActivityLogListResource, "/activity-logs", endpoint="activity-logs"
)


def register_activity_log_routes(app):
    app.register_blueprint(activity_log_bp, url_prefix="/api/admin")
