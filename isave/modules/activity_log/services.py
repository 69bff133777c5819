from sqlalchemy.exc import SQLAlchemyError
from isave.core.logger import logger
from isave.extensions import db
from .models import ActivityLog


class ActivityLogService:

    @staticmethod
    def record(user_id, action, entity_type=None, entity_id=None, details=None):
        """Write one audit row in its own commit; failures are logged, never raised."""
        try:
            entry = ActivityLog(
                user_id=user_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                details=details,
            )
            db.session.add(entry)
            db.session.commit()
            logger.debug(f"Activity {action} recorded for user {user_id}")
            return entry
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to record activity {action}: {str(e)}", exc_info=True)
            return None
