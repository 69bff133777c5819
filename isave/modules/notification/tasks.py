import os
from uuid import UUID
from isave.celery_app import celery
from isave.core.logger import logger
from isave.core.mail import send_email
from isave.extensions import db

SAVE_PLAN_TARGET_REACHED_TEMPLATE_ID = os.environ.get(
    "SAVE_PLAN_TARGET_REACHED_TEMPLATE_ID"
)


@celery.task(name="send_target_reached_email", bind=True, max_retries=3)
def send_target_reached_email(self, save_plan_id):
    """Email the owner once a save plan reaches its target"""
    from isave.modules.save_plan.models import SavePlan

    try:
        if not SAVE_PLAN_TARGET_REACHED_TEMPLATE_ID:
            raise ValueError(
                "Missing target reached template ID in environment variables"
            )

        # queued ids arrive as JSON strings
        plan = db.session.get(SavePlan, UUID(str(save_plan_id)))
        if plan is None:
            logger.warning(f"Save plan {save_plan_id} vanished before email was sent")
            return False

        template_data = {
            "user_name": plan.user.name,
            "plan_name": plan.title,
            "target_amount": f"{float(plan.target_amount):,.2f}",
            "total_saved": f"{float(plan.current_amount):,.2f}",
            "target_date": plan.target_date.strftime("%Y-%m-%d"),
        }
        send_email(
            to_email=plan.user.email,
            subject=f"You reached your target for {plan.title}",
            template_id=SAVE_PLAN_TARGET_REACHED_TEMPLATE_ID,
            template_data=template_data,
        )

        logger.info(f"Target reached email sent for plan {save_plan_id}")
        return True

    except Exception as e:
        logger.error(f"Failed to send target reached email: {str(e)}", exc_info=True)
        retry_in = 60 * (2**self.request.retries)
        raise self.retry(exc=e, countdown=retry_in)
