# Overview: Flask API routes for staff (admin and seller) account management.

# backend/beermachine/routes/admin.py
"""
Staff administration routes.

All routes require an admin session. Sellers only use the till.

Guard rails (enforced in staff_service):
- An admin cannot deactivate or edit themselves through /admin/<id>
- The last active admin cannot be deactivated
- Changing your own password requires the current password
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..services import staff_service
from ..services.errors import LedgerError
from ..validation import ValidationError, ConflictError, require_str
from ..decorators import require_auth, require_admin


admin_bp = Blueprint("admin", __name__, url_prefix="/api/v1/admin")


@admin_bp.get("")
@require_auth
@require_admin
def list_staff_route():
    staff = staff_service.list_staff()
    return jsonify({"admins": [u.to_dict() for u in staff], "count": len(staff)}), 200


@admin_bp.get("/profile")
@require_auth
@require_admin
def get_profile_route():
    return jsonify(g.current_user.to_dict()), 200


@admin_bp.put("/profile")
@require_auth
@require_admin
def update_profile_route():
    """
    Update own username and/or password.

    Body: username?, password?, current_password (required with password)
    """
    data = request.get_json(silent=True) or {}
    try:
        user = staff_service.update_profile(
            g.current_user,
            username=(data.get("username") or "").strip() or None,
            password=data.get("password"),
            current_password=data.get("current_password"),
        )
        return jsonify({"message": "Profile updated successfully", "user": user.to_dict()}), 200
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409


@admin_bp.post("")
@require_auth
@require_admin
def create_staff_route():
    """
    Create an admin or seller account.

    Body: username, password, user_type ("admin" | "seller", default "admin")
    """
    data = request.get_json(silent=True) or {}
    try:
        username = require_str(data, "username")
        password = require_str(data, "password")
        user_type = data.get("user_type") or "admin"

        user = staff_service.create_staff(username, password, user_type)

        current_app.logger.info(
            "Staff account %s (%s) created by %s", user.username, user.user_type, g.current_user.username
        )
        return jsonify({"message": "Admin created successfully", "user": user.to_dict()}), 201
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409


@admin_bp.put("/<int:user_id>")
@require_auth
@require_admin
def update_staff_route(user_id: int):
    data = request.get_json(silent=True) or {}
    try:
        user = staff_service.update_staff(
            g.current_user,
            user_id,
            username=(data.get("username") or "").strip() or None,
            password=data.get("password"),
        )
        return jsonify({"message": "Admin updated successfully", "user": user.to_dict()}), 200
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except LedgerError as e:
        return jsonify({"error": str(e)}), e.status_code


@admin_bp.delete("/<int:user_id>")
@require_auth
@require_admin
def deactivate_staff_route(user_id: int):
    """Soft delete: sets is_active=False and revokes the user's sessions."""
    try:
        user = staff_service.deactivate_staff(g.current_user, user_id)
        current_app.logger.info("Staff account %s deactivated by %s", user.username, g.current_user.username)
        return jsonify({"message": "Admin deleted successfully"}), 200
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except LedgerError as e:
        return jsonify({"error": str(e)}), e.status_code
