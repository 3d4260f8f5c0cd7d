"""
Undo coordinator tests.

Verifies:
- sell then undo restores credits and stock exactly and deletes the row
- credit_addition undo refuses once the credits are spent
- Sale undo tolerates a missing drink
- Unknown transaction types are refused without side effects
"""

import pytest
from sqlalchemy import text

from beermachine.models import Transaction, SALE
from beermachine.services import sales_service, credit_service, undo_service
from beermachine.services.errors import (
    InsufficientCreditsError,
    NotFoundError,
    UnsupportedTransactionTypeError,
)
from beermachine.time_utils import utcnow


def test_sell_then_undo_restores_everything(db_session, admin, member, drink):
    sale = sales_service.sell(member.id, drink.id, 2, operator_id=admin.id)

    result = undo_service.undo_transaction(sale.transaction_id, operator_id=admin.id)

    assert result.new_credits == 20
    assert result.new_stock == 3
    assert result.transaction_type == SALE
    assert db_session.get(Transaction, sale.transaction_id) is None

    db_session.refresh(member)
    db_session.refresh(drink)
    assert member.credits == 20
    assert drink.stock == 3


def test_undo_result_serialization(db_session, admin, member, drink):
    sale = sales_service.sell(member.id, drink.id, 1, operator_id=admin.id)
    data = undo_service.undo_transaction(sale.transaction_id, operator_id=admin.id).to_dict()

    assert data["transaction"] == {"id": sale.transaction_id, "type": "sale", "amount": 5, "quantity": 1}
    assert data["user"]["new_credits"] == 20
    assert data["drink"] == {"id": drink.id, "name": "Pils", "new_stock": 3}
    assert data["undone_by"] == {"id": admin.id, "username": "admin"}


def test_undo_credit_addition(db_session, admin, member):
    added = credit_service.add_credits_to_user(member.id, 30, operator_id=admin.id)
    assert added.credits == 50

    result = undo_service.undo_transaction(added.transaction_id, operator_id=admin.id)

    assert result.new_credits == 20
    assert result.new_stock is None
    assert result.to_dict()["drink"] is None


def test_undo_credit_addition_after_spending(db_session, admin, make_user, make_drink):
    user = make_user("spender", credits=0)
    beer = make_drink("Stout", price=5, stock=10)
    added = credit_service.add_credits_to_user(user.id, 10, operator_id=admin.id)
    sales_service.sell(user.id, beer.id, 1, operator_id=admin.id)

    with pytest.raises(InsufficientCreditsError) as exc:
        undo_service.undo_transaction(added.transaction_id, operator_id=admin.id)

    assert str(exc.value) == "Cannot undo credit addition: user has insufficient credits"
    assert exc.value.details == {"required": 10, "available": 5}
    db_session.refresh(user)
    assert user.credits == 5
    assert db_session.get(Transaction, added.transaction_id) is not None


def test_undo_sale_with_missing_drink(db_session, admin, member, drink):
    sale = sales_service.sell(member.id, drink.id, 1, operator_id=admin.id)
    row = db_session.get(Transaction, sale.transaction_id)
    row.drink_id = None
    db_session.commit()

    result = undo_service.undo_transaction(sale.transaction_id, operator_id=admin.id)

    assert result.new_credits == 20
    assert result.drink_id is None
    assert result.new_stock is None
    db_session.refresh(drink)
    assert drink.stock == 2


def test_undo_sale_with_null_quantity_restores_one(db_session, admin, member, drink):
    sale = sales_service.sell(member.id, drink.id, 1, operator_id=admin.id)
    row = db_session.get(Transaction, sale.transaction_id)
    row.quantity = None
    db_session.commit()

    result = undo_service.undo_transaction(sale.transaction_id, operator_id=admin.id)
    assert result.new_stock == 3


def test_undo_unknown_transaction(db_session, admin):
    with pytest.raises(NotFoundError) as exc:
        undo_service.undo_transaction(12345, operator_id=admin.id)
    assert exc.value.details == {"transaction_id": 12345}


def test_undo_twice_fails_second_time(db_session, admin, member, drink):
    sale = sales_service.sell(member.id, drink.id, 1, operator_id=admin.id)
    undo_service.undo_transaction(sale.transaction_id, operator_id=admin.id)

    with pytest.raises(NotFoundError):
        undo_service.undo_transaction(sale.transaction_id, operator_id=admin.id)
    db_session.refresh(member)
    assert member.credits == 20


def _insert_legacy_row(db_session, user_id, operator_id):
    # Rows written before the type CHECK existed; bypass it to reproduce one
    db_session.execute(text("PRAGMA ignore_check_constraints = ON"))
    result = db_session.execute(
        Transaction.__table__.insert().values(
            user_id=user_id,
            admin_id=operator_id,
            transaction_type="legacy_refund",
            amount=10,
            quantity=1,
            description="Imported refund",
            transaction_date=utcnow(),
        )
    )
    db_session.execute(text("PRAGMA ignore_check_constraints = OFF"))
    db_session.commit()
    return result.inserted_primary_key[0]


def test_unsupported_type_is_refused(db_session, admin, member):
    entry_id = _insert_legacy_row(db_session, member.id, admin.id)

    with pytest.raises(UnsupportedTransactionTypeError) as exc:
        undo_service.undo_transaction(entry_id, operator_id=admin.id)

    assert exc.value.details == {"type": "legacy_refund"}
    assert db_session.get(Transaction, entry_id) is not None
    db_session.refresh(member)
    assert member.credits == 20
