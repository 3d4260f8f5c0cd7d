# Overview: Service-layer operations for credit balances; checked top-up and debit rules.

"""
Credit balance rules (authoritative)

- credits is a non-negative integer per user.
- Top-ups come in blocks of 10 credits (physical payment denominations).
- Debits never take a balance below zero.

Each rule is a pure function returning the new balance; the mutators
below apply it to a User and flush inside the caller's unit of work.
Compensating writes for undo live in balance_reversal and are not
exposed here.
"""

from __future__ import annotations

from ..extensions import db
from ..models import User
from ..validation import MAX_INT_FIELD
from .errors import InsufficientCreditsError, InvalidAmountError

CREDIT_BLOCK = 10


def is_credit_block(amount: int) -> bool:
    return amount > 0 and amount % CREDIT_BLOCK == 0


def credited_balance(credits: int, amount: int) -> int:
    if not is_credit_block(amount):
        raise InvalidAmountError(
            f"Credits can only be added in blocks of {CREDIT_BLOCK}",
            details={"amount": amount},
        )
    if amount > MAX_INT_FIELD:
        raise InvalidAmountError(f"Cannot add more than {MAX_INT_FIELD} credits at once", details={"amount": amount})
    return credits + amount


def debited_balance(credits: int, amount: int) -> int:
    if amount <= 0:
        raise InvalidAmountError("Debit amount must be positive", details={"amount": amount})
    if credits < amount:
        raise InsufficientCreditsError(required=amount, available=credits)
    return credits - amount


def add_credits(user: User, amount: int) -> int:
    """Top up a user's balance. Returns the new balance."""
    user.credits = credited_balance(user.credits, amount)
    db.session.flush()
    return user.credits


def deduct_credits(user: User, amount: int) -> int:
    """Charge a user's balance. Returns the new balance."""
    user.credits = debited_balance(user.credits, amount)
    db.session.flush()
    return user.credits
