from marshmallow import ValidationError
import re

from isave.core.constants import (
    MIN_NAME_LENGTH,
    MAX_NAME_LENGTH,
    MIN_USERNAME_LENGTH,
    MAX_USERNAME_LENGTH,
    MIN_PASSWORD_LENGTH,
    MAX_TITLE_LENGTH,
    MIN_AMOUNT,
    MAX_AMOUNT,
)


def is_valid_email(email):
    """Check if an email is valid."""
    pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    return bool(re.match(pattern, email))


def is_strong_password(password):
    """
    Check if a password is strong.
    Requirements:
    - At least 8 characters
    - Contains at least one uppercase letter
    - Contains at least one lowercase letter
    - Contains at least one digit
    - Contains at least one special character
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        return False
    if not re.search(r"[A-Z]", password):
        return False
    if not re.search(r"[a-z]", password):
        return False
    if not re.search(r"[0-9]", password):
        return False
    if not re.search(r"[!@#$%^&*(),.?\":{}|<>]", password):
        return False
    return True


def validate_username(username):
    """Validate username format."""

    if len(username) < MIN_USERNAME_LENGTH or len(username) > MAX_USERNAME_LENGTH:
        raise ValidationError(
            f"Username must be between {MIN_USERNAME_LENGTH} and {MAX_USERNAME_LENGTH} characters."
        )

    if not re.match(r"^[a-zA-Z0-9_]+$", username):
        raise ValidationError(
            "Username can only contain letters, numbers, and underscores."
        )


def validate_email(email):
    """Validate email format."""

    if not is_valid_email(email):
        raise ValidationError("Invalid email format.")


def validate_name(name):
    """Validate name format."""

    if len(name) < MIN_NAME_LENGTH or len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            f"Name must be between {MIN_NAME_LENGTH} and {MAX_NAME_LENGTH} characters."
        )

    if not re.match(r"^[a-zA-Z\s\-']+$", name):
        raise ValidationError(
            "Name can only contain letters, spaces, hyphens, and apostrophes."
        )


def validate_password(password):
    """Validate password strength."""
    if not password:
        raise ValidationError("Password cannot be empty.")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        )

    if not is_strong_password(password):
        raise ValidationError(
            "Password must contain at least one uppercase letter, one lowercase letter, "
            "one digit, and one special character."
        )


def validate_title(title):
    """Validate a save plan title."""
    if not title or not title.strip():
        raise ValidationError("Title is required")

    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(f"Title must be at most {MAX_TITLE_LENGTH} characters.")


def validate_amount(amount):
    """Validate a money amount."""
    if amount <= MIN_AMOUNT or amount > MAX_AMOUNT:
        raise ValidationError(f"Amount must be between {MIN_AMOUNT} and {MAX_AMOUNT}.")


def minimum_amount(floor, message):
    """Build a validator rejecting amounts under ``floor``."""

    def validator(amount):
        if amount < floor:
            raise ValidationError(message)
        validate_amount(amount)

    return validator

