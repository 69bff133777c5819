import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from isave.extensions import db
from isave.core.logger import logger


def get_utc_now():
    """Returns the current time in UTC with timezone awareness."""
    return datetime.now(timezone.utc)


def as_utc(value):
    """Normalise a datetime read back from the database to aware UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@contextmanager
def unit_of_work(session):
    """Commit everything written inside the block, or nothing at all."""
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        logger.debug("Unit of work rolled back")
        raise


class BaseModel(db.Model):
    __abstract__ = True

    id = db.Column(db.Uuid, primary_key=True, default=uuid.uuid4)
    created_at = db.Column(db.DateTime(timezone=True), default=get_utc_now)
    updated_at = db.Column(
        db.DateTime(timezone=True), default=get_utc_now, onupdate=get_utc_now
    )
