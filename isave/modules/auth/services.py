from isave.core.constants import UserRole
from isave.core.exceptions import UnauthorizedError
from isave.core.logger import logger
from isave.core.models import unit_of_work
from isave.core.tokens import TokenUtils
from isave.modules.user.models import User
from isave.modules.wallet.services import WalletService


class RegistrationService:
    """Account onboarding"""

    @staticmethod
    def register(session, username, email, password, name=None, role=UserRole.USER):
        """
        Create the user and their empty wallet together.

        Args:
            session: database session owning the unit of work
            username, email, password, name: validated signup fields
            role: defaults to a regular user

        Returns:
            User: the persisted account
        """
        with unit_of_work(session):
            user = User(username=username, email=email, name=name, role=role)
            user.set_password(password)
            session.add(user)
            session.flush()
            WalletService.create_wallet(session, user.id)

        logger.info(f"User registration completed: {email}")
        return user


class AuthTokenService:
    """Token generation and validation"""

    @staticmethod
    def generate_tokens(user):
        """Generate access and refresh tokens for a user"""
        access_token = TokenUtils.generate_access_token(user)
        refresh_token = TokenUtils.generate_refresh_token(user)
        tokens = {"access_token": access_token, "refresh_token": refresh_token}
        logger.debug(f"Generated authentication tokens for user: {user.username}")
        return tokens

    @staticmethod
    def authenticate_user(username, password):
        """Authenticate a user with username and password"""
        user = User.query.filter_by(username=username, is_deleted=False).first()

        if not user:
            logger.warning(f"Login attempt with non-existent username: {username}")
            raise UnauthorizedError("Invalid username or password")

        if not user.check_password(password):
            logger.warning(
                f"Failed login attempt (invalid password) for user: {username}"
            )
            raise UnauthorizedError("Invalid username or password")

        logger.info(f"User authenticated successfully: {username}")
        return user
