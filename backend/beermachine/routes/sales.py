# Overview: Flask API routes for sales operations; parses input and returns JSON responses.

# backend/beermachine/routes/sales.py
"""Sale, history and undo routes"""

from flask import Blueprint, request, jsonify, g, current_app

from ..services import sales_service, undo_service
from ..services.errors import LedgerError
from ..validation import ValidationError, require_int, optional_int
from ..decorators import require_auth, require_admin, require_staff


sales_bp = Blueprint("sales", __name__, url_prefix="/api/v1/sales")


@sales_bp.post("/sell")
@require_auth
@require_staff
def sell_route():
    """
    Sell a drink to a member.

    Body: user_id, drink_id, quantity (default 1)
    Available to: admin, seller
    """
    try:
        data = request.get_json(silent=True) or {}
        user_id = require_int(data, "user_id")
        drink_id = require_int(data, "drink_id")
        quantity = optional_int(data, "quantity", 1)

        result = sales_service.sell(user_id, drink_id, quantity, operator_id=g.current_user.id)

        current_app.logger.info(
            "Sale %s: %sx drink %s to user %s for %s credits by %s",
            result.transaction_id, result.quantity, result.drink_id,
            result.buyer_id, result.total_cost, result.operator_username,
        )
        return jsonify({
            "message": "Sale completed successfully",
            "transaction": result.to_dict(),
        }), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except LedgerError as e:
        return jsonify({"error": str(e), "details": e.details}), e.status_code
    except Exception:
        current_app.logger.exception("Failed to complete sale")
        return jsonify({"error": "Internal server error"}), 500


@sales_bp.get("/history")
@require_auth
@require_staff
def history_route():
    """
    Most recent transactions, newest first.

    Query params:
    - limit: int (optional, default 50, max 200)
    """
    try:
        limit = optional_int(request.args, "limit", 50)
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    transactions = sales_service.recent_transactions(limit)
    return jsonify({
        "transactions": [t.to_dict() for t in transactions],
        "count": len(transactions),
    }), 200


@sales_bp.get("/stats")
@require_auth
@require_admin
def stats_route():
    """Sales and credit totals plus top drinks."""
    return jsonify(sales_service.sales_stats()), 200


@sales_bp.delete("/undo/<int:transaction_id>")
@require_auth
@require_admin
def undo_route(transaction_id: int):
    """
    Undo a sale or credit addition and delete its ledger row.

    Available to: admin
    """
    try:
        result = undo_service.undo_transaction(transaction_id, operator_id=g.current_user.id)

        current_app.logger.info(
            "Transaction %s (%s, %s credits) undone by %s",
            result.transaction_id, result.transaction_type, result.amount, result.operator_username,
        )
        return jsonify({
            "message": "Transaction undone successfully",
            "undo_transaction": result.to_dict(),
        }), 200

    except LedgerError as e:
        return jsonify({"error": str(e), "details": e.details}), e.status_code
    except Exception:
        current_app.logger.exception("Failed to undo transaction")
        return jsonify({"error": "Internal server error"}), 500
