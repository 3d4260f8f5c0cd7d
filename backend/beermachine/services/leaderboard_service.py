# Overview: Read-only leaderboard aggregation over sale transactions.

from __future__ import annotations

import calendar

from sqlalchemy import func

from ..extensions import db
from ..models import User, Transaction, SALE
from ..time_utils import month_bounds


def _monthly_totals(year: int, month: int):
    start, end = month_bounds(year, month)
    total_drinks = func.coalesce(func.sum(Transaction.quantity), 0)
    return (
        db.session.query(
            User.id,
            User.username,
            User.user_type,
            func.count(Transaction.id),
            total_drinks,
            func.coalesce(func.sum(Transaction.amount), 0),
        )
        .join(Transaction, Transaction.user_id == User.id)
        .filter(
            Transaction.transaction_type == SALE,
            Transaction.transaction_date >= start,
            Transaction.transaction_date < end,
            User.user_type != "admin",
        )
        .group_by(User.id, User.username, User.user_type)
        .order_by(total_drinks.desc(), User.username.asc())
        .all()
    )


def monthly_leaderboard(year: int, month: int) -> dict:
    """
    Rank non-admin users by drinks bought in a calendar month.

    Raises ValueError for an invalid month.
    """
    start, end = month_bounds(year, month)
    rows = _monthly_totals(year, month)
    return {
        "leaderboard": [
            {
                "rank": index,
                "user_id": user_id,
                "username": username,
                "user_type": user_type,
                "transaction_count": int(count),
                "total_drinks": int(drinks),
                "total_spent": int(spent),
            }
            for index, (user_id, username, user_type, count, drinks, spent) in enumerate(rows, start=1)
        ],
        "period": {
            "year": year,
            "month": month,
            "month_name": calendar.month_name[month],
            "start_date": start.isoformat(),
            "end_date": end.isoformat(),
        },
    }


def user_rank(user_id: int, year: int, month: int) -> dict:
    """Position of one user on the monthly leaderboard; rank is None if they bought nothing."""
    rows = _monthly_totals(year, month)
    for index, row in enumerate(rows, start=1):
        if row[0] == user_id:
            return {"rank": index, "total_drinks": int(row[4]), "total_users": len(rows)}
    return {"rank": None, "total_drinks": 0, "total_users": len(rows)}
