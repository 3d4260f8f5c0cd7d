# backend/beermachine/services/staff_service.py
"""
Admin and seller account management.

- The last active admin can never be deactivated.
- Nobody can deactivate or edit themselves through the "other staff" path.
- Changing your own password requires the current one.
"""
from __future__ import annotations

from ..extensions import db
from ..models import User, STAFF_TYPES
from ..validation import ConflictError, ValidationError
from . import auth_service, session_service
from .errors import NotFoundError


def list_staff() -> list[User]:
    return (
        db.session.query(User)
        .filter(User.user_type.in_(STAFF_TYPES), User.is_active.is_(True))
        .order_by(User.username.asc())
        .all()
    )


def get_staff(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None or user.user_type not in STAFF_TYPES:
        raise NotFoundError("Admin not found", details={"user_id": user_id})
    return user


def _ensure_unique_username(username: str, exclude_id: int) -> None:
    existing = db.session.query(User).filter(User.username == username, User.id != exclude_id).first()
    if existing is not None:
        raise ConflictError("Username already exists")


def create_staff(username: str, password: str, user_type: str = "admin") -> User:
    return auth_service.create_staff_user(username, password, user_type)


def _apply_credentials(user: User, username: str | None, password: str | None) -> None:
    if username and username != user.username:
        _ensure_unique_username(username, exclude_id=user.id)
        user.username = username
    if password:
        # Hash only when a new password is actually supplied
        user.password_hash = auth_service.hash_password(password)


def update_profile(
    user: User,
    *,
    username: str | None = None,
    password: str | None = None,
    current_password: str | None = None,
) -> User:
    """
    Update the caller's own username and/or password.

    Raises ValidationError if a new password is given without the correct
    current password.
    """
    if password:
        if not current_password:
            raise ValidationError("Current password required to change password")
        if not auth_service.verify_password(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")

    _apply_credentials(user, username, password)
    db.session.commit()
    return user


def update_staff(actor: User, user_id: int, *, username: str | None = None, password: str | None = None) -> User:
    if user_id == actor.id:
        raise ValidationError("Use the profile endpoint to update your own account")

    user = get_staff(user_id)
    _apply_credentials(user, username, password)
    db.session.commit()

    if password:
        session_service.revoke_all_user_sessions(user.id, reason="Password changed by admin")
    return user


def deactivate_staff(actor: User, user_id: int) -> User:
    if user_id == actor.id:
        raise ValidationError("Cannot delete your own account")

    user = get_staff(user_id)

    if user.user_type == "admin" and user.is_active:
        active_admins = db.session.query(User).filter(
            User.user_type == "admin",
            User.is_active.is_(True),
        ).count()
        if active_admins <= 1:
            raise ValidationError("Cannot delete the last active admin")

    user.is_active = False
    db.session.commit()
    session_service.revoke_all_user_sessions(user.id, reason="Account deactivated")
    return user
