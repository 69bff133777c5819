from isave.celery_app import celery
from isave.core.context import RequestContext
from isave.core.logger import logger
from isave.core.models import get_utc_now
from isave.extensions import db
from .services import SavePlanService


@celery.task(name="process_auto_save_deductions", bind=True, max_retries=3)
def process_auto_save_deductions(self):
    """Run every automated deduction that has fallen due"""
    now = get_utc_now()
    try:
        due_plans = SavePlanService.due_auto_save_plans(db.session, now)
    except Exception as e:
        logger.error(f"Failed to load due auto-save plans: {str(e)}", exc_info=True)
        retry_in = 60 * (2**self.request.retries)
        raise self.retry(exc=e, countdown=retry_in)

    deposited = skipped = failed = 0
    for plan in due_plans:
        try:
            ctx = RequestContext.for_user(plan.user)
            if SavePlanService.run_auto_save(ctx, plan, now):
                deposited += 1
            else:
                skipped += 1
        except Exception as e:
            # failures are per plan, the batch continues
            failed += 1
            logger.error(
                f"Auto-save failed for plan {plan.id}: {str(e)}", exc_info=True
            )

    logger.info(
        f"Auto-save run finished: {deposited} deposited, {skipped} skipped, {failed} failed"
    )
    return {"deposited": deposited, "skipped": skipped, "failed": failed}
