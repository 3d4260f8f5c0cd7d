# Overview: Service-layer operations for sales; the atomic sell coordinator plus ledger reads.

"""
Sale processing

A sale moves credits from a member to the house and units of a drink out
of stock, and records one immutable ledger row. All three writes happen in
a single unit of work (see concurrency.run_atomically): either the buyer is
charged, the stock is reduced and the row exists, or none of it happened.

Sales are never retried automatically. A replayed sale would charge twice.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func

from ..extensions import db
from ..models import User, Drink, Transaction, SALE, CREDIT_ADDITION
from .balance_service import deduct_credits
from .stock_service import deduct_stock, is_in_stock
from .concurrency import lock_for_update, run_atomically
from .errors import (
    DrinkUnavailableError,
    InsufficientCreditsError,
    InvalidQuantityError,
    NotFoundError,
)

MAX_HISTORY_LIMIT = 200
TOP_DRINKS_LIMIT = 10


@dataclass(frozen=True)
class SaleResult:
    transaction_id: int
    buyer_id: int
    buyer_username: str
    remaining_credits: int
    drink_id: int
    drink_name: str
    remaining_stock: int
    quantity: int
    total_cost: int
    operator_id: int
    operator_username: str

    def to_dict(self) -> dict:
        return {
            "transaction_id": self.transaction_id,
            "buyer": {
                "id": self.buyer_id,
                "username": self.buyer_username,
                "remaining_credits": self.remaining_credits,
            },
            "drink": {
                "id": self.drink_id,
                "name": self.drink_name,
                "remaining_stock": self.remaining_stock,
            },
            "quantity": self.quantity,
            "total_cost": self.total_cost,
            "admin": {"id": self.operator_id, "username": self.operator_username},
        }


def load_locked(model, entity_id: int, label: str):
    """Fetch a row under an update lock, or raise NotFoundError."""
    row = lock_for_update(db.session.query(model).filter_by(id=entity_id)).first()
    if row is None:
        raise NotFoundError(f"{label} not found", details={f"{label.lower()}_id": entity_id})
    return row


def load_operator(operator_id: int) -> User:
    operator = db.session.get(User, operator_id)
    if operator is None:
        raise NotFoundError("Operator not found", details={"operator_id": operator_id})
    return operator


def _validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantityError("Quantity must be a positive integer", details={"quantity": quantity})
    return quantity


def sell(buyer_id: int, drink_id: int, quantity: int = 1, *, operator_id: int) -> SaleResult:
    """
    Sell `quantity` units of a drink to a member, charged against their credits.

    Raises NotFoundError, InvalidQuantityError, DrinkUnavailableError or
    InsufficientCreditsError; on any failure nothing is written.
    """
    def _op() -> SaleResult:
        buyer = load_locked(User, buyer_id, "User")
        drink = load_locked(Drink, drink_id, "Drink")
        operator = load_operator(operator_id)
        qty = _validate_quantity(quantity)

        if not is_in_stock(drink) or drink.stock < qty:
            raise DrinkUnavailableError(
                "Insufficient stock or drink not available",
                details={
                    "drink_id": drink.id,
                    "requested": qty,
                    "available": drink.stock,
                    "is_active": drink.is_active,
                },
            )

        total_cost = drink.price * qty
        if buyer.credits < total_cost:
            raise InsufficientCreditsError(required=total_cost, available=buyer.credits)

        remaining_credits = deduct_credits(buyer, total_cost)
        remaining_stock = deduct_stock(drink, qty)

        sale = Transaction(
            user_id=buyer.id,
            drink_id=drink.id,
            admin_id=operator.id,
            transaction_type=SALE,
            amount=total_cost,
            quantity=qty,
            description=f"Sale: {qty}x {drink.name}",
        )
        db.session.add(sale)
        db.session.flush()

        return SaleResult(
            transaction_id=sale.id,
            buyer_id=buyer.id,
            buyer_username=buyer.username,
            remaining_credits=remaining_credits,
            drink_id=drink.id,
            drink_name=drink.name,
            remaining_stock=remaining_stock,
            quantity=qty,
            total_cost=total_cost,
            operator_id=operator.id,
            operator_username=operator.username,
        )

    return run_atomically(_op)


def recent_transactions(limit: int = 50) -> list[Transaction]:
    """Most recent ledger rows, newest first."""
    limit = max(1, min(limit, MAX_HISTORY_LIMIT))
    return (
        db.session.query(Transaction)
        .order_by(Transaction.transaction_date.desc(), Transaction.id.desc())
        .limit(limit)
        .all()
    )


def sales_stats() -> dict:
    """Totals for sales and credit additions, plus the best-selling drinks."""
    sales_count, revenue, items_sold = db.session.query(
        func.count(Transaction.id),
        func.coalesce(func.sum(Transaction.amount), 0),
        func.coalesce(func.sum(Transaction.quantity), 0),
    ).filter(Transaction.transaction_type == SALE).one()

    credit_count, credits_added = db.session.query(
        func.count(Transaction.id),
        func.coalesce(func.sum(Transaction.amount), 0),
    ).filter(Transaction.transaction_type == CREDIT_ADDITION).one()

    total_quantity = func.sum(Transaction.quantity)
    top_rows = (
        db.session.query(
            Drink.id,
            Drink.name,
            func.count(Transaction.id),
            total_quantity,
            func.sum(Transaction.amount),
        )
        .join(Transaction, Transaction.drink_id == Drink.id)
        .filter(Transaction.transaction_type == SALE)
        .group_by(Drink.id, Drink.name)
        .order_by(total_quantity.desc(), Drink.name.asc())
        .limit(TOP_DRINKS_LIMIT)
        .all()
    )

    return {
        "sales": {
            "total_sales": int(sales_count),
            "total_revenue": int(revenue),
            "total_items_sold": int(items_sold),
        },
        "credits": {
            "total_credit_additions": int(credit_count),
            "total_credits_added": int(credits_added),
        },
        "top_drinks": [
            {
                "drink_id": drink_id,
                "name": name,
                "sales_count": int(count),
                "total_quantity": int(qty or 0),
                "total_revenue": int(revenue or 0),
            }
            for drink_id, name, count, qty, revenue in top_rows
        ],
    }
