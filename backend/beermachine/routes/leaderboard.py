# Overview: Flask API routes for the monthly drinks leaderboard.

# backend/beermachine/routes/leaderboard.py
from flask import Blueprint, request, jsonify

from ..services import leaderboard_service
from ..validation import ValidationError, optional_int
from ..decorators import require_auth
from ..time_utils import utcnow

leaderboard_bp = Blueprint("leaderboard", __name__, url_prefix="/api/v1/leaderboard")


def _requested_month() -> tuple[int, int]:
    """year/month query params, defaulting to the current UTC month."""
    now = utcnow()
    year = optional_int(request.args, "year", now.year)
    month = optional_int(request.args, "month", now.month)
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12")
    if not 1 <= year <= 9998:
        raise ValidationError("year out of range")
    return year, month


@leaderboard_bp.get("/monthly")
@require_auth
def monthly_route():
    """
    Non-admin users ranked by drinks bought in a month.

    Query params:
    - year: int (optional, default current year)
    - month: int 1-12 (optional, default current month)
    """
    try:
        year, month = _requested_month()
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(leaderboard_service.monthly_leaderboard(year, month)), 200


@leaderboard_bp.get("/rank/<int:user_id>")
@require_auth
def rank_route(user_id: int):
    try:
        year, month = _requested_month()
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"user_id": user_id, **leaderboard_service.user_rank(user_id, year, month)}), 200
