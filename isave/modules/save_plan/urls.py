from flask import Blueprint
from flask_restful import Api
from .resources import (
    SavePlanListResource,
    SavePlanResource,
    SavePlanDepositResource,
    SavePlanBreakResource,
    SavePlanWithdrawResource,
)

save_plan_bp = Blueprint("save_plans", __name__)
save_plan_api = Api(save_plan_bp)

save_plan_api.add_resource(SavePlanListResource, "", endpoint="save-plans")
save_plan_api.add_resource(SavePlanResource, "/<plan_id>", endpoint="save-plan")
save_plan_api.add_resource(
    SavePlanDepositResource, "/<plan_id>/deposit", endpoint="save-plan-deposit"
)
save_plan_api.add_resource(
    SavePlanBreakResource, "/<plan_id>/break", endpoint="save-plan-break"
)
save_plan_api.add_resource(
    SavePlanWithdrawResource, "/<plan_id>/withdraw", endpoint="save-plan-withdraw"
)


def register_save_plan_routes(app):
    app.register_blueprint(save_plan_bp, url_prefix="/api/save-plans")
