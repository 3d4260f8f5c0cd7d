# Overview: Service-layer operations for a staff member's registered passkeys.

from __future__ import annotations

from ..extensions import db
from ..models import Passkey
from ..validation import ValidationError
from .errors import NotFoundError

MAX_DEVICE_NAME = 100


def list_passkeys(user_id: int) -> list[Passkey]:
    return (
        db.session.query(Passkey)
        .filter_by(user_id=user_id)
        .order_by(Passkey.created_at.desc(), Passkey.id.desc())
        .all()
    )


def _owned_passkey(user_id: int, passkey_id: int) -> Passkey:
    passkey = db.session.query(Passkey).filter_by(id=passkey_id, user_id=user_id).first()
    if passkey is None:
        raise NotFoundError("Passkey not found", details={"passkey_id": passkey_id})
    return passkey


def rename_passkey(user_id: int, passkey_id: int, device_name: str) -> Passkey:
    name = (device_name or "").strip()
    if not name:
        raise ValidationError("device_name is required")
    if len(name) > MAX_DEVICE_NAME:
        raise ValidationError(f"device_name exceeds max length {MAX_DEVICE_NAME}")

    passkey = _owned_passkey(user_id, passkey_id)
    passkey.device_name = name
    db.session.commit()
    return passkey


def delete_passkey(user_id: int, passkey_id: int) -> None:
    passkey = _owned_passkey(user_id, passkey_id)
    db.session.delete(passkey)
    db.session.commit()
