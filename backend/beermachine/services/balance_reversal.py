# Overview: Compensating credit writes used only when undoing a ledger transaction.

"""
Unchecked balance mutators.

These bypass the blocks-of-10 top-up rule so that undo can reverse any
historical amount exactly (a sale costs price x quantity, which can be
any integer). They still never take a balance below zero.

Only undo_service imports this module.
"""

from __future__ import annotations

from ..extensions import db
from ..models import User
from .errors import InsufficientCreditsError


def restored_balance(credits: int, amount: int) -> int:
    return credits + amount


def revoked_balance(credits: int, amount: int) -> int:
    if credits < amount:
        raise InsufficientCreditsError(required=amount, available=credits)
    return credits - amount


def add_credits_unchecked(user: User, amount: int) -> int:
    user.credits = restored_balance(user.credits, amount)
    db.session.flush()
    return user.credits


def deduct_credits_unchecked(user: User, amount: int) -> int:
    user.credits = revoked_balance(user.credits, amount)
    db.session.flush()
    return user.credits
