# Overview: Flask API routes for member accounts and credit top-ups.

# backend/beermachine/routes/users.py
from flask import Blueprint, request, jsonify, g, current_app

from ..models import User
from ..services import users_service, credit_service
from ..services.errors import LedgerError
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_account,
    require_int,
    ValidationError,
    ConflictError,
)
from ..decorators import require_auth, require_admin, require_staff

ACCOUNT_CREATE_POLICY = ModelValidationPolicy(
    writable_fields={"username", "credits", "date_of_birth", "user_type"},
    required_on_create={"username"},
)
ACCOUNT_UPDATE_POLICY = ModelValidationPolicy(
    writable_fields={"username", "date_of_birth", "user_type", "is_active"},
)

users_bp = Blueprint("users", __name__, url_prefix="/api/v1/users")


@users_bp.get("")
@require_auth
@require_staff
def list_users_route():
    users = users_service.list_users()
    return jsonify({"users": [u.to_dict() for u in users], "count": len(users)}), 200


@users_bp.get("/<int:user_id>")
@require_auth
@require_staff
def get_user_route(user_id: int):
    try:
        return jsonify(users_service.get_user(user_id).to_dict()), 200
    except LedgerError as e:
        return jsonify({"error": str(e)}), e.status_code


@users_bp.post("")
@require_auth
@require_admin
def create_user_route():
    """Create a member or non-member account (no password, cannot log in)."""
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=User, payload=payload, policy=ACCOUNT_CREATE_POLICY, partial=False)
        enforce_rules_account(patch)
        user = users_service.create_account(patch=patch)
        return jsonify({"message": "User created successfully", "user": user.to_dict()}), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409


@users_bp.put("/<int:user_id>")
@require_auth
@require_admin
def update_user_route(user_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=User, payload=payload, policy=ACCOUNT_UPDATE_POLICY, partial=True)
        enforce_rules_account(patch)
        user = users_service.update_account(user_id, patch=patch)
        return jsonify({"message": "User updated successfully", "user": user.to_dict()}), 200
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except LedgerError as e:
        return jsonify({"error": str(e)}), e.status_code


@users_bp.post("/<int:user_id>/add-credits")
@require_auth
@require_staff
def add_credits_route(user_id: int):
    """
    Top up a user's credits (blocks of 10) and record a credit_addition.

    Available to: admin, seller
    """
    try:
        data = request.get_json(silent=True) or {}
        amount = require_int(data, "amount")

        result = credit_service.add_credits_to_user(user_id, amount, operator_id=g.current_user.id)

        current_app.logger.info(
            "Credit addition %s: %s credits to user %s by %s",
            result.transaction_id, result.amount, result.user_id, g.current_user.username,
        )
        return jsonify({"message": "Credits added successfully", **result.to_dict()}), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except LedgerError as e:
        return jsonify({"error": str(e), "details": e.details}), e.status_code
    except Exception:
        current_app.logger.exception("Failed to add credits")
        return jsonify({"error": "Internal server error"}), 500
