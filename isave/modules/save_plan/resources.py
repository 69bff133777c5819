from flask import request
from flask_restful import Resource
from isave.core.authentication import authenticated_user
from isave.core.context import RequestContext
from isave.core.decorators import handle_errors, log_activity, validate_json_request
from isave.core.logger import logger
from isave.modules.wallet.schemas import TransactionSchema
from .schemas import SavePlanCreateSchema, DepositSchema, SavePlanSchema
from .services import SavePlanService

save_plan_create_schema = SavePlanCreateSchema()
deposit_schema = DepositSchema()
save_plan_schema = SavePlanSchema()
save_plans_schema = SavePlanSchema(many=True)
transactions_schema = TransactionSchema(many=True)


class SavePlanListResource(Resource):

    @authenticated_user
    @handle_errors
    def get(self):
        """List the caller's save plans"""
        plans = SavePlanService.get_all(RequestContext.from_request())
        return save_plans_schema.dump(plans), 200

    @authenticated_user
    @log_activity("SAVE_PLAN_CREATE", entity_type="save_plan")
    @validate_json_request
    @handle_errors
    def post(self):
        """Open a new save plan"""
        data = save_plan_create_schema.load(request.get_json() or {})
        plan = SavePlanService.create(RequestContext.from_request(), **data)
        return save_plan_schema.dump(plan), 201


class SavePlanResource(Resource):

    @authenticated_user
    @handle_errors
    def get(self, plan_id):
        plan, transactions = SavePlanService.get_by_id(
            RequestContext.from_request(), plan_id
        )
        result = save_plan_schema.dump(plan)
        result["transactions"] = transactions_schema.dump(transactions)
        return result, 200


class SavePlanDepositResource(Resource):

    @authenticated_user
    @log_activity("SAVE_PLAN_DEPOSIT", entity_type="save_plan", id_param="plan_id")
    @validate_json_request
    @handle_errors
    def post(self, plan_id):
        data = deposit_schema.load(request.get_json() or {})
        plan = SavePlanService.deposit(
            RequestContext.from_request(), plan_id, data["amount"]
        )
        return save_plan_schema.dump(plan), 200


class SavePlanBreakResource(Resource):

    @authenticated_user
    @log_activity("SAVE_PLAN_BREAK", entity_type="save_plan", id_param="plan_id")
    @handle_errors
    def post(self, plan_id):
        """Cancel a plan early and return its funds"""
        result = SavePlanService.break_plan(RequestContext.from_request(), plan_id)
        logger.info(f"Break request for plan {plan_id}: {result['message']}")
        return result, 200


class SavePlanWithdrawResource(Resource):

    @authenticated_user
    @log_activity("SAVE_PLAN_WITHDRAW", entity_type="save_plan", id_param="plan_id")
    @handle_errors
    def post(self, plan_id):
        """Collect the funds of a plan whose target date has passed"""
        result = SavePlanService.withdraw_completed_plan(
            RequestContext.from_request(), plan_id
        )
        return result, 200
