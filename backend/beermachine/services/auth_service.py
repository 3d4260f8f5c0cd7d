# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

Only staff accounts (admin, seller) with a password can log in. Members
and non-members are ledger-only accounts with password_hash=NULL.

Passwords are hashed with bcrypt. Hashing is an explicit step, called
only when a password is actually being set; saving a user never
re-hashes anything implicitly.
"""

import bcrypt
from flask import current_app

from ..extensions import db
from ..models import User, STAFF_TYPES
from ..validation import ConflictError, ValidationError

MIN_PASSWORD_LENGTH = 6


class PasswordValidationError(ValidationError):
    """Raised when password doesn't meet requirements."""
    pass


def validate_password(password: str) -> None:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Cost factor comes from BCRYPT_ROUNDS (12 by default, lower in tests).
    Password is validated before hashing.
    """
    validate_password(password)
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12)
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str | None) -> bool:
    """
    Verify password against bcrypt hash.

    Accounts without a hash never verify.
    """
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed hash in the database
        return False


def authenticate(username: str, password: str) -> User | None:
    """
    Return the user if the credentials are valid and the account may log in.

    Returns None for unknown users, members, inactive accounts and wrong
    passwords alike.
    """
    user = db.session.query(User).filter_by(username=username).first()
    if not user or not user.is_active or not user.can_login():
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def create_staff_user(username: str, password: str, user_type: str = "admin") -> User:
    """
    Create an admin or seller account.

    Raises ConflictError if the username is taken, ValidationError if the
    type is not a staff type, PasswordValidationError if the password is
    too short.
    """
    if user_type not in STAFF_TYPES:
        raise ValidationError(f"Invalid staff type: {user_type}")

    existing = db.session.query(User).filter_by(username=username).first()
    if existing:
        raise ConflictError("Username already exists")

    user = User(
        username=username,
        password_hash=hash_password(password),
        user_type=user_type,
        credits=0,
        is_active=True,
    )
    db.session.add(user)
    db.session.commit()
    return user
