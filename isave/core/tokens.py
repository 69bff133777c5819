from datetime import timedelta
from flask_jwt_extended import create_access_token, create_refresh_token
from isave.modules.auth.models import ActiveAccessToken
from isave.extensions import db
from isave.core.logger import logger
from isave.core.models import get_utc_now, unit_of_work
from isave.config import JWT_ACCESS_TOKEN_EXPIRES, JWT_REFRESH_TOKEN_EXPIRES


class TokenUtils:
    """
    JWT issuing and revocation.

    Access tokens are only honoured while a matching ``ActiveAccessToken`` row
    exists, so logging out deletes the row. Rows past ``expires_at`` are
    pruned whenever the same user logs in again.
    """

    @staticmethod
    def generate_access_token(user, fresh=True):
        expires_delta = timedelta(minutes=JWT_ACCESS_TOKEN_EXPIRES)
        now = get_utc_now()
        token = create_access_token(
            identity=str(user.id),
            fresh=fresh,
            expires_delta=expires_delta,
            additional_claims={"role": user.role.value},
        )

        with unit_of_work(db.session):
            pruned = ActiveAccessToken.query.filter(
                ActiveAccessToken.user_id == user.id,
                ActiveAccessToken.expires_at < now,
            ).delete(synchronize_session=False)
            db.session.add(
                ActiveAccessToken(
                    token=token, user_id=user.id, expires_at=now + expires_delta
                )
            )

        logger.info(
            f"Generated access token for user_id: {user.id} (pruned {pruned} expired)"
        )
        return token

    @staticmethod
    def generate_refresh_token(user):
        token = create_refresh_token(
            identity=str(user.id), expires_delta=timedelta(days=JWT_REFRESH_TOKEN_EXPIRES)
        )
        logger.info(f"Generated refresh token for user_id: {user.id}")
        return token

    @staticmethod
    def invalidate_access_token(token):
        """Revoke one access token. Returns False if it was not active."""
        with unit_of_work(db.session):
            revoked = ActiveAccessToken.query.filter_by(token=token).delete(
                synchronize_session=False
            )
        if revoked:
            logger.info(f"Revoked access token {token[:10]}...")
        return bool(revoked)
