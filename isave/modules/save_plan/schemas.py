from datetime import timezone
from decimal import Decimal
from marshmallow import fields, pre_load
from isave.core.constants import (
    SavePlanFrequency,
    SavePlanStatus,
    MIN_SAVE_PLAN_DEPOSIT,
    MIN_TARGET_AMOUNT,
)
from isave.core.schemas import BaseSchema, InputSchema
from isave.core.validators import minimum_amount, validate_amount, validate_title
from .models import SavePlan


class SavePlanCreateSchema(InputSchema):
    """Input for opening a plan"""

    title = fields.String(required=True, validate=validate_title)
    description = fields.String(load_default=None, allow_none=True)
    target_amount = fields.Decimal(
        required=True,
        places=2,
        validate=minimum_amount(
            MIN_TARGET_AMOUNT, f"Target amount must be at least {MIN_TARGET_AMOUNT}."
        ),
    )
    frequency = fields.Enum(
        SavePlanFrequency, by_value=True, load_default=SavePlanFrequency.MANUAL
    )
    auto_save_amount = fields.Decimal(
        places=2, load_default=None, allow_none=True, validate=validate_amount
    )
    target_date = fields.AwareDateTime(required=True, default_timezone=timezone.utc)
    initial_deposit = fields.Decimal(
        places=2, load_default=None, allow_none=True, validate=validate_amount
    )

    @pre_load
    def strip_whitespace(self, data, **kwargs):
        """Strip whitespace from string fields before processing"""
        if isinstance(data.get("title"), str):
            data["title"] = data["title"].strip()
        return data


class DepositSchema(InputSchema):
    amount = fields.Decimal(
        required=True,
        places=2,
        validate=minimum_amount(
            MIN_SAVE_PLAN_DEPOSIT,
            f"Minimum deposit is {MIN_SAVE_PLAN_DEPOSIT}.",
        ),
    )


class SavePlanSchema(BaseSchema):
    """Plan read model with derived progress figures"""

    class Meta(BaseSchema.Meta):
        model = SavePlan
        include_fk = True
        fields = (
            "id",
            "user_id",
            "title",
            "description",
            "target_amount",
            "current_amount",
            "frequency",
            "auto_save_amount",
            "target_date",
            "status",
            "next_deduction_date",
            "progress_percentage",
            "remaining_amount",
            "created_at",
            "updated_at",
        )

    target_amount = fields.Decimal(as_string=True, places=2)
    current_amount = fields.Decimal(as_string=True, places=2)
    auto_save_amount = fields.Decimal(as_string=True, places=2, allow_none=True)
    frequency = fields.Enum(SavePlanFrequency, by_value=True)
    status = fields.Enum(SavePlanStatus, by_value=True)
    progress_percentage = fields.Method("calculate_progress")
    remaining_amount = fields.Method("calculate_remaining")

    def calculate_progress(self, obj):
        """Format progress percentage, capped at 100"""
        target = Decimal(obj.target_amount)
        if target <= 0:
            return "0.00"
        progress = min(Decimal(obj.current_amount) / target * 100, Decimal(100))
        return f"{progress:.2f}"

    def calculate_remaining(self, obj):
        remaining = max(Decimal(obj.target_amount) - Decimal(obj.current_amount), 0)
        return f"{remaining:.2f}"

