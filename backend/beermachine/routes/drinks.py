# Overview: Flask API routes for the drink catalogue and stock intake.

# backend/beermachine/routes/drinks.py
"""
Drink routes.

Reads are public so the client can render the menu before login.
Writes require an admin session.
"""
from flask import Blueprint, request, jsonify, current_app

from ..models import Drink
from ..services import drinks_service
from ..services.errors import LedgerError
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_drink,
    require_int,
    ValidationError,
    ConflictError,
)
from ..decorators import require_auth, require_admin

DRINK_POLICY = ModelValidationPolicy(
    writable_fields={"name", "description", "price", "stock", "category", "is_active"},
    required_on_create={"name", "price"},
)

drinks_bp = Blueprint("drinks", __name__, url_prefix="/api/v1/drinks")


@drinks_bp.get("")
def list_drinks_route():
    drinks = drinks_service.list_drinks()
    return jsonify({"drinks": [d.to_dict() for d in drinks], "count": len(drinks)}), 200


@drinks_bp.get("/<int:drink_id>")
def get_drink_route(drink_id: int):
    try:
        return jsonify(drinks_service.get_drink(drink_id).to_dict()), 200
    except LedgerError as e:
        return jsonify({"error": str(e)}), e.status_code


@drinks_bp.post("")
@require_auth
@require_admin
def create_drink_route():
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Drink, payload=payload, policy=DRINK_POLICY, partial=False)
        enforce_rules_drink(patch)
        drink = drinks_service.create_drink(patch=patch)
        return jsonify({"message": "Drink created successfully", "drink": drink.to_dict()}), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409


@drinks_bp.put("/<int:drink_id>")
@require_auth
@require_admin
def update_drink_route(drink_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Drink, payload=payload, policy=DRINK_POLICY, partial=True)
        enforce_rules_drink(patch)
        drink = drinks_service.update_drink(drink_id, patch=patch)
        return jsonify({"message": "Drink updated successfully", "drink": drink.to_dict()}), 200
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except LedgerError as e:
        return jsonify({"error": str(e)}), e.status_code


@drinks_bp.post("/<int:drink_id>/add-stock")
@require_auth
@require_admin
def add_stock_route(drink_id: int):
    try:
        data = request.get_json(silent=True) or {}
        quantity = require_int(data, "quantity")

        drink = drinks_service.restock_drink(drink_id, quantity)
        return jsonify({
            "message": "Stock added successfully",
            "drink": {"id": drink.id, "name": drink.name, "stock": drink.stock},
        }), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except LedgerError as e:
        return jsonify({"error": str(e), "details": e.details}), e.status_code
    except Exception:
        current_app.logger.exception("Failed to add stock")
        return jsonify({"error": "Internal server error"}), 500


@drinks_bp.delete("/<int:drink_id>")
@require_auth
@require_admin
def delete_drink_route(drink_id: int):
    """Soft delete: sets is_active=False."""
    try:
        drinks_service.deactivate_drink(drink_id)
        return jsonify({"message": "Drink deleted successfully"}), 200
    except LedgerError as e:
        return jsonify({"error": str(e)}), e.status_code
