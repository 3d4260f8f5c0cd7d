# backend/beermachine/services/users_service.py
"""
Member and non-member account management.

These accounts never have a password. Staff accounts are managed in
staff_service and cannot be edited through this module.
"""
from __future__ import annotations

from ..extensions import db
from ..models import User, ACCOUNT_TYPES
from ..validation import ConflictError, ValidationError
from .errors import NotFoundError

ACCOUNT_MUTABLE_FIELDS = {"username", "date_of_birth", "user_type", "is_active"}


def _ensure_unique_username(username: str, exclude_id: int | None = None) -> None:
    query = db.session.query(User).filter(User.username == username)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    if query.first() is not None:
        raise ConflictError("Username already exists")


def list_users() -> list[User]:
    return db.session.query(User).order_by(User.username.asc()).all()


def get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found", details={"user_id": user_id})
    return user


def create_account(*, patch: dict) -> User:
    """
    Create a member or non-member from a validated patch dict.

    An opening balance may be given; it is not subject to the blocks-of-10
    rule and is not recorded as a credit addition.
    """
    _ensure_unique_username(patch["username"])

    user = User(
        username=patch["username"],
        credits=patch.get("credits") or 0,
        date_of_birth=patch.get("date_of_birth"),
        user_type=patch.get("user_type") or "member",
        password_hash=None,
        is_active=True,
    )
    db.session.add(user)
    db.session.commit()
    return user


def update_account(user_id: int, *, patch: dict) -> User:
    user = get_user(user_id)
    if user.user_type not in ACCOUNT_TYPES:
        raise ValidationError("Cannot modify staff users")

    if "username" in patch and patch["username"] != user.username:
        _ensure_unique_username(patch["username"], exclude_id=user.id)

    for k, v in patch.items():
        if k in ACCOUNT_MUTABLE_FIELDS:
            setattr(user, k, v)
    db.session.commit()
    return user
