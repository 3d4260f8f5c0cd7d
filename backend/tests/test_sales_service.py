"""
Sale coordinator tests.

Verifies:
- Credits, stock and the ledger row move together
- Every failure leaves credits, stock and the ledger unchanged
- History ordering and statistics aggregation
"""

import pytest

from beermachine.models import Transaction, SALE
from beermachine.services import sales_service, credit_service
from beermachine.services.errors import (
    DrinkUnavailableError,
    InsufficientCreditsError,
    InvalidQuantityError,
    NotFoundError,
)


def _ledger_count(db_session):
    return db_session.query(Transaction).count()


class TestSell:

    def test_sell_two_units(self, db_session, admin, member, drink):
        result = sales_service.sell(member.id, drink.id, 2, operator_id=admin.id)

        assert result.total_cost == 10
        assert result.remaining_credits == 10
        assert result.remaining_stock == 1
        assert result.operator_username == "admin"

        row = db_session.get(Transaction, result.transaction_id)
        assert row.transaction_type == SALE
        assert row.amount == 10
        assert row.quantity == 2
        assert row.user_id == member.id
        assert row.admin_id == admin.id
        assert row.description == "Sale: 2x Pils"

        db_session.refresh(member)
        db_session.refresh(drink)
        assert member.credits == 10
        assert drink.stock == 1

    def test_default_quantity_is_one(self, db_session, admin, member, drink):
        result = sales_service.sell(member.id, drink.id, operator_id=admin.id)
        assert result.quantity == 1
        assert result.total_cost == 5

    def test_result_serialization(self, db_session, admin, member, drink):
        data = sales_service.sell(member.id, drink.id, 1, operator_id=admin.id).to_dict()

        assert data["buyer"] == {"id": member.id, "username": "alice", "remaining_credits": 15}
        assert data["drink"] == {"id": drink.id, "name": "Pils", "remaining_stock": 2}
        assert data["admin"] == {"id": admin.id, "username": "admin"}
        assert data["total_cost"] == 5

    def test_insufficient_credits(self, db_session, admin, make_user, make_drink):
        poor = make_user("poor", credits=5)
        pricey = make_drink("Tripel", price=10, stock=3)

        with pytest.raises(InsufficientCreditsError) as exc:
            sales_service.sell(poor.id, pricey.id, 1, operator_id=admin.id)

        assert exc.value.details == {"required": 10, "available": 5}
        db_session.refresh(poor)
        db_session.refresh(pricey)
        assert poor.credits == 5
        assert pricey.stock == 3
        assert _ledger_count(db_session) == 0

    def test_quantity_above_stock(self, db_session, admin, member, drink):
        with pytest.raises(DrinkUnavailableError) as exc:
            sales_service.sell(member.id, drink.id, 4, operator_id=admin.id)

        assert str(exc.value) == "Insufficient stock or drink not available"
        assert exc.value.details["available"] == 3
        db_session.refresh(member)
        assert member.credits == 20

    def test_out_of_stock(self, db_session, admin, member, make_drink):
        empty = make_drink("Empty", stock=0)
        with pytest.raises(DrinkUnavailableError):
            sales_service.sell(member.id, empty.id, 1, operator_id=admin.id)

    def test_inactive_drink(self, db_session, admin, member, make_drink):
        retired = make_drink("Retired", stock=10, is_active=False)
        with pytest.raises(DrinkUnavailableError):
            sales_service.sell(member.id, retired.id, 1, operator_id=admin.id)
        db_session.refresh(retired)
        assert retired.stock == 10

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity(self, db_session, admin, member, drink, quantity):
        with pytest.raises(InvalidQuantityError):
            sales_service.sell(member.id, drink.id, quantity, operator_id=admin.id)
        assert _ledger_count(db_session) == 0

    def test_unknown_user(self, db_session, admin, drink):
        with pytest.raises(NotFoundError) as exc:
            sales_service.sell(99999, drink.id, 1, operator_id=admin.id)
        assert exc.value.details == {"user_id": 99999}

    def test_unknown_drink(self, db_session, admin, member):
        with pytest.raises(NotFoundError) as exc:
            sales_service.sell(member.id, 99999, 1, operator_id=admin.id)
        assert exc.value.details == {"drink_id": 99999}

    def test_unknown_operator(self, db_session, member, drink):
        with pytest.raises(NotFoundError):
            sales_service.sell(member.id, drink.id, 1, operator_id=99999)
        db_session.refresh(drink)
        assert drink.stock == 3

    def test_spend_exact_balance(self, db_session, admin, make_user, make_drink):
        user = make_user("exact", credits=10)
        beer = make_drink("Dubbel", price=5, stock=5)

        result = sales_service.sell(user.id, beer.id, 2, operator_id=admin.id)
        assert result.remaining_credits == 0

    def test_refuses_session_with_uncommitted_writes(self, db_session, admin, member, drink):
        member.username = "renamed"
        db_session.flush()

        with pytest.raises(RuntimeError):
            sales_service.sell(member.id, drink.id, 1, operator_id=admin.id)

        # Caller's flushed change is still pending, nothing was sold
        assert member.username == "renamed"
        assert member.credits == 20
        assert drink.stock == 3
        assert _ledger_count(db_session) == 0
        db_session.rollback()


class TestHistoryAndStats:

    def test_recent_transactions_newest_first(self, db_session, admin, member, drink):
        first = sales_service.sell(member.id, drink.id, 1, operator_id=admin.id)
        second = sales_service.sell(member.id, drink.id, 1, operator_id=admin.id)

        rows = sales_service.recent_transactions(10)
        assert [r.id for r in rows] == [second.transaction_id, first.transaction_id]

    def test_recent_transactions_limit(self, db_session, admin, member, drink):
        for _ in range(3):
            sales_service.sell(member.id, drink.id, 1, operator_id=admin.id)
        assert len(sales_service.recent_transactions(2)) == 2

    def test_stats(self, db_session, admin, member, drink, make_drink):
        lager = make_drink("Lager", price=3, stock=10)
        sales_service.sell(member.id, drink.id, 2, operator_id=admin.id)
        sales_service.sell(member.id, lager.id, 1, operator_id=admin.id)
        credit_service.add_credits_to_user(member.id, 30, operator_id=admin.id)

        stats = sales_service.sales_stats()

        assert stats["sales"] == {"total_sales": 2, "total_revenue": 13, "total_items_sold": 3}
        assert stats["credits"] == {"total_credit_additions": 1, "total_credits_added": 30}
        assert [d["name"] for d in stats["top_drinks"]] == ["Pils", "Lager"]
        assert stats["top_drinks"][0]["total_quantity"] == 2

    def test_stats_empty(self, db_session):
        stats = sales_service.sales_stats()
        assert stats["sales"]["total_sales"] == 0
        assert stats["top_drinks"] == []
