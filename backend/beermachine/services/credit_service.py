# Overview: Service-layer operations for credit top-ups recorded in the ledger.

from __future__ import annotations

from dataclasses import dataclass

from ..extensions import db
from ..models import User, Transaction, CREDIT_ADDITION
from .balance_service import add_credits
from .concurrency import run_atomically
from .sales_service import load_locked, load_operator


@dataclass(frozen=True)
class CreditResult:
    transaction_id: int
    user_id: int
    username: str
    credits: int
    amount: int

    def to_dict(self) -> dict:
        return {
            "transaction_id": self.transaction_id,
            "amount": self.amount,
            "user": {"id": self.user_id, "username": self.username, "credits": self.credits},
        }


def add_credits_to_user(user_id: int, amount: int, *, operator_id: int) -> CreditResult:
    """
    Top up a user's balance and record a credit_addition row in one unit of work.

    Raises NotFoundError or InvalidAmountError (not a positive multiple of 10,
    or above MAX_INT_FIELD).
    """
    def _op() -> CreditResult:
        user = load_locked(User, user_id, "User")
        operator = load_operator(operator_id)

        new_balance = add_credits(user, amount)

        entry = Transaction(
            user_id=user.id,
            admin_id=operator.id,
            transaction_type=CREDIT_ADDITION,
            amount=amount,
            description=f"Credits added: {amount}",
        )
        db.session.add(entry)
        db.session.flush()

        return CreditResult(
            transaction_id=entry.id,
            user_id=user.id,
            username=user.username,
            credits=new_balance,
            amount=amount,
        )

    return run_atomically(_op)
