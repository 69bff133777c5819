from isave.core.logger import logger
from isave.core.models import unit_of_work
from .models import Notification


class NotificationService:
    """In-app notifications, always scoped to the caller."""

    @staticmethod
    def create(session, user_id, message, link=None):
        """Queue a notification in the caller's unit of work."""
        notification = Notification(user_id=user_id, message=message, link=link)
        session.add(notification)
        logger.info(f"Notification queued for user {user_id}: {message}")
        return notification

    @staticmethod
    def _own(ctx):
        return ctx.session.query(Notification).filter(
            Notification.user_id == ctx.user_id
        )

    @staticmethod
    def get_all(ctx):
        return NotificationService._own(ctx).order_by(
            Notification.created_at.desc()
        ).all()

    @staticmethod
    def unread_count(ctx):
        return NotificationService._own(ctx).filter(Notification.read.is_(False)).count()

    @staticmethod
    def mark_as_read(ctx, ids):
        """Mark the given notifications read; ids owned by others are ignored."""
        if not ids:
            return 0
        with unit_of_work(ctx.session):
            updated = (
                NotificationService._own(ctx)
                .filter(Notification.id.in_(ids))
                .update({"read": True}, synchronize_session=False)
            )
        return updated

    @staticmethod
    def mark_all_as_read(ctx):
        with unit_of_work(ctx.session):
            updated = (
                NotificationService._own(ctx)
                .filter(Notification.read.is_(False))
                .update({"read": True}, synchronize_session=False)
            )
        logger.info(f"Marked {updated} notifications read for user {ctx.user_id}")
        return updated
