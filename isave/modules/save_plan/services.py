from decimal import Decimal
from isave.core.constants import (
    SavePlanFrequency,
    SavePlanStatus,
    TransactionType,
    FREQUENCY_INTERVALS,
    RECENT_PLAN_TRANSACTIONS,
)
from isave.core.exceptions import (
    BadRequestError,
    ForbiddenError,
    InternalServerError,
    NotFoundError,
)
from isave.core.logger import logger
from isave.core.models import as_utc, get_utc_now, unit_of_work
from isave.modules.notification.services import NotificationService
from isave.modules.notification.tasks import send_target_reached_email
from isave.modules.wallet.models import Transaction
from isave.modules.wallet.services import WalletService
from .models import SavePlan

ZERO = Decimal("0.00")


def next_deduction_after(moment, frequency):
    """Next auto-save run for ``frequency``; manual plans have none."""
    step = FREQUENCY_INTERVALS.get(frequency)
    if step is None:
        return None
    return moment + step


class SavePlanService:
    """
    Goal-based savings plans funded from the owner's wallet.

    Every money movement debits or credits the wallet, moves the plan's
    ``current_amount`` by the same amount in the opposite direction and
    appends one ledger row, all in a single unit of work.
    """

    @staticmethod
    def _get_owned_plan(ctx, plan_id):
        # Someone else's plan looks exactly like a missing one.
        plan = ctx.session.get(SavePlan, plan_id)
        if plan is None or plan.user_id != ctx.user_id:
            logger.warning(f"Plan {plan_id} not found for user {ctx.user_id}")
            raise NotFoundError("Plan not found.")
        return plan

    @staticmethod
    def _apply_deposit(ctx, plan, wallet, amount, description):
        """Move ``amount`` from the wallet into the plan. Returns True once the target is met."""
        WalletService.debit(wallet, amount)
        plan.current_amount = SavePlan.current_amount + amount
        WalletService.record_transaction(
            ctx.session,
            wallet,
            TransactionType.ISAVE_DEPOSIT,
            -amount,
            description=description,
            save_plan_id=plan.id,
        )
        ctx.session.flush()
        return plan.target_reached

    @staticmethod
    def _notify_target_reached(ctx, plan):
        NotificationService.create(
            ctx.session,
            plan.user_id,
            f'Congratulations! You\'ve reached your target for "{plan.title}"!',
            link=f"/isave/{plan.id}",
        )

    @staticmethod
    def _return_funds(ctx, plan, description, final_status):
        """Refund the whole balance to the wallet and close the plan."""
        wallet = WalletService.find_wallet(ctx.session, ctx.user_id)
        if wallet is None:
            raise InternalServerError("Wallet not found.")

        amount = Decimal(plan.current_amount)
        WalletService.credit(wallet, amount)
        WalletService.record_transaction(
            ctx.session,
            wallet,
            TransactionType.ISAVE_WITHDRAWAL,
            amount,
            description=description,
            save_plan_id=plan.id,
        )
        plan.status = final_status
        plan.current_amount = ZERO
        plan.next_deduction_date = None
        return amount

    @staticmethod
    def create(
        ctx,
        title,
        target_amount,
        frequency,
        target_date,
        description=None,
        auto_save_amount=None,
        initial_deposit=None,
    ):
        if frequency != SavePlanFrequency.MANUAL and (
            not auto_save_amount or auto_save_amount <= 0
        ):
            raise BadRequestError("Auto-save amount is required for automated plans.")

        now = get_utc_now()
        if as_utc(target_date) <= now:
            raise BadRequestError("Target date must be in the future.")

        with unit_of_work(ctx.session):
            plan = SavePlan(
                user_id=ctx.user_id,
                title=title,
                description=description,
                target_amount=Decimal(target_amount),
                frequency=frequency,
                auto_save_amount=auto_save_amount,
                target_date=as_utc(target_date),
                current_amount=ZERO,
                status=SavePlanStatus.ACTIVE,
                next_deduction_date=next_deduction_after(now, frequency),
            )
            ctx.session.add(plan)
            ctx.session.flush()

            if initial_deposit and initial_deposit > 0:
                initial_deposit = Decimal(initial_deposit)
                wallet = WalletService.find_wallet(ctx.session, ctx.user_id)
                if wallet is None or not wallet.has_funds(initial_deposit):
                    logger.warning(
                        f"Initial deposit of {initial_deposit} rejected for user {ctx.user_id}"
                    )
                    raise BadRequestError("Insufficient funds for initial deposit.")

                # opening a plan at its target stays silent
                SavePlanService._apply_deposit(
                    ctx,
                    plan,
                    wallet,
                    initial_deposit,
                    f"Initial deposit to iSave: {title}",
                )

        logger.info(f"Save plan {plan.id} created for user {ctx.user_id}")
        return plan

    @staticmethod
    def get_all(ctx):
        return (
            ctx.session.query(SavePlan)
            .filter(SavePlan.user_id == ctx.user_id)
            .order_by(SavePlan.created_at.desc())
            .all()
        )

    @staticmethod
    def get_by_id(ctx, plan_id):
        """Return the plan and its most recent ledger rows."""
        plan = ctx.session.get(SavePlan, plan_id)
        if plan is None:
            raise NotFoundError("Plan not found.")
        if plan.user_id != ctx.user_id:
            raise ForbiddenError("Unauthorized.")

        transactions = (
            ctx.session.query(Transaction)
            .filter(Transaction.save_plan_id == plan.id)
            .order_by(Transaction.created_at.desc())
            .limit(RECENT_PLAN_TRANSACTIONS)
            .all()
        )
        return plan, transactions

    @staticmethod
    def deposit(ctx, plan_id, amount):
        amount = Decimal(amount)
        plan = SavePlanService._get_owned_plan(ctx, plan_id)

        if not plan.is_active:
            raise BadRequestError("Cannot deposit into an inactive plan.")

        with unit_of_work(ctx.session):
            wallet = WalletService.find_wallet(ctx.session, ctx.user_id)
            if wallet is None or not wallet.has_funds(amount):
                logger.warning(
                    f"Deposit of {amount} into plan {plan_id} rejected: insufficient funds"
                )
                raise BadRequestError("Insufficient wallet funds.")

            target_reached = SavePlanService._apply_deposit(
                ctx, plan, wallet, amount, f"Deposit to iSave: {plan.title}"
            )
            if target_reached:
                SavePlanService._notify_target_reached(ctx, plan)

        if target_reached:
            send_target_reached_email.delay(str(plan.id))
        logger.info(f"Deposited {amount} into plan {plan.id}")
        return plan

    @staticmethod
    def break_plan(ctx, plan_id):
        plan = SavePlanService._get_owned_plan(ctx, plan_id)

        if Decimal(plan.current_amount) == ZERO:
            with unit_of_work(ctx.session):
                # ledger rows outlive the plan
                ctx.session.query(Transaction).filter(
                    Transaction.save_plan_id == plan.id
                ).update({"save_plan_id": None}, synchronize_session="fetch")
                ctx.session.delete(plan)
            logger.info(f"Empty plan {plan_id} deleted by user {ctx.user_id}")
            return {"success": True, "message": "Plan deleted."}

        with unit_of_work(ctx.session):
            amount = SavePlanService._return_funds(
                ctx, plan, f"Broken iSave plan: {plan.title}", SavePlanStatus.CANCELLED
            )

        logger.info(f"Plan {plan_id} broken, {amount} returned to wallet")
        return {"success": True, "message": "Plan broken and funds returned."}

    @staticmethod
    def withdraw_completed_plan(ctx, plan_id):
        plan = SavePlanService._get_owned_plan(ctx, plan_id)

        if as_utc(plan.target_date) > get_utc_now():
            raise BadRequestError(
                "Cannot withdraw active plan before target date. Use 'Break Plan' instead."
            )

        if Decimal(plan.current_amount) == ZERO:
            raise BadRequestError("No funds to withdraw.")

        with unit_of_work(ctx.session):
            amount = SavePlanService._return_funds(
                ctx,
                plan,
                f"Withdrew completed iSave plan: {plan.title}",
                SavePlanStatus.COMPLETED,
            )

        logger.info(f"Plan {plan_id} completed, {amount} returned to wallet")
        return {"success": True}

    @staticmethod
    def due_auto_save_plans(session, now):
        return (
            session.query(SavePlan)
            .filter(
                SavePlan.status == SavePlanStatus.ACTIVE,
                SavePlan.frequency != SavePlanFrequency.MANUAL,
                SavePlan.next_deduction_date.isnot(None),
                SavePlan.next_deduction_date <= now,
            )
            .order_by(SavePlan.next_deduction_date)
            .all()
        )

    @staticmethod
    def run_auto_save(ctx, plan, now=None):
        """
        Perform one scheduled deduction for ``plan`` on behalf of its owner.

        Funds move under the same rules as a manual deposit. When the wallet
        cannot cover the amount nothing moves and the owner is told. Either
        way the schedule advances, and stops once the target date is behind it.

        At most one deduction is taken per run. Periods missed while the
        scheduler was down are skipped, not charged.
        """
        now = now or get_utc_now()
        amount = Decimal(plan.auto_save_amount)
        missed = 0
        target_reached = False

        with unit_of_work(ctx.session):
            wallet = WalletService.find_wallet(ctx.session, plan.user_id)
            if wallet is not None and wallet.has_funds(amount):
                target_reached = SavePlanService._apply_deposit(
                    ctx, plan, wallet, amount, f"Auto-save to iSave: {plan.title}"
                )
                if target_reached:
                    SavePlanService._notify_target_reached(ctx, plan)
                deposited = True
            else:
                NotificationService.create(
                    ctx.session,
                    plan.user_id,
                    f'Auto-save of {amount} for "{plan.title}" was skipped: insufficient wallet funds.',
                    link=f"/isave/{plan.id}",
                )
                deposited = False

            next_run = next_deduction_after(as_utc(plan.next_deduction_date), plan.frequency)
            while next_run is not None and next_run <= now:
                missed += 1
                next_run = next_deduction_after(next_run, plan.frequency)
            if next_run is not None and next_run > as_utc(plan.target_date):
                next_run = None
            plan.next_deduction_date = next_run

        if target_reached:
            send_target_reached_email.delay(str(plan.id))
        if missed:
            logger.warning(f"Auto-save for plan {plan.id} skipped {missed} missed period(s)")
        logger.info(
            f"Auto-save for plan {plan.id}: {'deposited' if deposited else 'skipped'}, next run {next_run}"
        )
        return deposited
