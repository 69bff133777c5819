from flask import request
from isave.core.authentication import authenticated_user
from isave.core.decorators import handle_errors
from isave.core.permissions import admin_only
from isave.core.pagination import PaginatedListResource
from .models import ActivityLog
from .schemas import ActivityLogSchema


class ActivityLogListResource(PaginatedListResource):
    method_decorators = [
        handle_errors,
        admin_only,
        authenticated_user,
    ]

    model = ActivityLog
    schema = ActivityLogSchema(many=True)
    endpoint = "activity_logs.activity-logs"

    def get_queryset(self):
        queryset = super().get_queryset()
        action = request.args.get("action")
        if action:
            queryset = queryset.filter(ActivityLog.action == action)
        return queryset
