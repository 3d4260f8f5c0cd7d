# Overview: Service-layer operations for undoing ledger transactions (compensating writes).

"""
Undo

Reverses the effect of a sale or a credit addition and deletes its ledger
row, all in one unit of work. Uses the unchecked balance mutators so that
any historical amount can be reversed exactly.

- sale: credits are restored; stock is restored if the drink still exists.
  A sale whose drink reference is gone is undone without touching stock.
- credit_addition: refused with InsufficientCreditsError once the credits
  have been spent below the added amount.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..extensions import db
from ..models import User, Drink, Transaction, SALE, CREDIT_ADDITION
from .balance_reversal import add_credits_unchecked, deduct_credits_unchecked
from .stock_service import add_stock
from .concurrency import lock_for_update, run_atomically
from .errors import InsufficientCreditsError, UnsupportedTransactionTypeError
from .sales_service import load_locked, load_operator


@dataclass(frozen=True)
class UndoResult:
    transaction_id: int
    transaction_type: str
    amount: int
    quantity: int | None
    user_id: int
    username: str
    new_credits: int
    drink_id: int | None
    drink_name: str | None
    new_stock: int | None
    operator_id: int
    operator_username: str

    def to_dict(self) -> dict:
        return {
            "transaction": {
                "id": self.transaction_id,
                "type": self.transaction_type,
                "amount": self.amount,
                "quantity": self.quantity,
            },
            "user": {
                "id": self.user_id,
                "username": self.username,
                "new_credits": self.new_credits,
            },
            "drink": {
                "id": self.drink_id,
                "name": self.drink_name,
                "new_stock": self.new_stock,
            } if self.drink_id is not None else None,
            "undone_by": {"id": self.operator_id, "username": self.operator_username},
        }


def undo_transaction(transaction_id: int, *, operator_id: int) -> UndoResult:
    """
    Reverse a ledger transaction and delete it.

    Raises NotFoundError, InsufficientCreditsError or
    UnsupportedTransactionTypeError; on any failure nothing is written.
    """
    def _op() -> UndoResult:
        entry = load_locked(Transaction, transaction_id, "Transaction")
        operator = load_operator(operator_id)
        user = load_locked(User, entry.user_id, "User")
        drink = None
        if entry.drink_id is not None:
            drink = lock_for_update(db.session.query(Drink).filter_by(id=entry.drink_id)).first()

        if entry.transaction_type == SALE:
            new_credits = add_credits_unchecked(user, entry.amount)
            new_stock = add_stock(drink, entry.quantity or 1) if drink is not None else None
        elif entry.transaction_type == CREDIT_ADDITION:
            if user.credits < entry.amount:
                raise InsufficientCreditsError(
                    required=entry.amount,
                    available=user.credits,
                    message="Cannot undo credit addition: user has insufficient credits",
                )
            new_credits = deduct_credits_unchecked(user, entry.amount)
            drink = None
            new_stock = None
        else:
            raise UnsupportedTransactionTypeError(
                "Cannot undo this transaction type",
                details={"type": entry.transaction_type},
            )

        result = UndoResult(
            transaction_id=entry.id,
            transaction_type=entry.transaction_type,
            amount=entry.amount,
            quantity=entry.quantity,
            user_id=user.id,
            username=user.username,
            new_credits=new_credits,
            drink_id=drink.id if drink is not None else None,
            drink_name=drink.name if drink is not None else None,
            new_stock=new_stock,
            operator_id=operator.id,
            operator_username=operator.username,
        )

        db.session.delete(entry)
        db.session.flush()
        return result

    return run_atomically(_op)
