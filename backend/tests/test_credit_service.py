"""Credit additions: balance change and ledger row in one unit of work."""

import pytest

from beermachine.models import Transaction, CREDIT_ADDITION
from beermachine.services import credit_service
from beermachine.services.errors import InvalidAmountError, NotFoundError


def test_add_credits_records_row(db_session, admin, member):
    result = credit_service.add_credits_to_user(member.id, 20, operator_id=admin.id)

    assert result.credits == 40
    row = db_session.get(Transaction, result.transaction_id)
    assert row.transaction_type == CREDIT_ADDITION
    assert row.amount == 20
    assert row.drink_id is None
    assert row.admin_id == admin.id
    assert row.description == "Credits added: 20"


@pytest.mark.parametrize("amount", [5, -10, 0])
def test_invalid_amount_writes_nothing(db_session, admin, member, amount):
    with pytest.raises(InvalidAmountError):
        credit_service.add_credits_to_user(member.id, amount, operator_id=admin.id)

    db_session.refresh(member)
    assert member.credits == 20
    assert db_session.query(Transaction).count() == 0


def test_unknown_user(db_session, admin):
    with pytest.raises(NotFoundError):
        credit_service.add_credits_to_user(4242, 10, operator_id=admin.id)


def test_serialization(db_session, admin, member):
    data = credit_service.add_credits_to_user(member.id, 10, operator_id=admin.id).to_dict()
    assert data["amount"] == 10
    assert data["user"] == {"id": member.id, "username": "alice", "credits": 30}
