# Overview: Flask API routes for listing, renaming and removing the caller's passkeys.

# backend/beermachine/routes/passkeys.py
from flask import Blueprint, request, jsonify, g

from ..services import passkey_service
from ..services.errors import LedgerError
from ..validation import ValidationError
from ..decorators import require_auth, require_admin

passkeys_bp = Blueprint("passkeys", __name__, url_prefix="/api/v1/passkeys")


@passkeys_bp.get("")
@require_auth
@require_admin
def list_passkeys_route():
    passkeys = passkey_service.list_passkeys(g.current_user.id)
    return jsonify({"passkeys": [p.to_dict() for p in passkeys], "count": len(passkeys)}), 200


@passkeys_bp.put("/<int:passkey_id>")
@passkeys_bp.patch("/<int:passkey_id>")
@require_auth
@require_admin
def rename_passkey_route(passkey_id: int):
    data = request.get_json(silent=True) or {}
    try:
        passkey = passkey_service.rename_passkey(g.current_user.id, passkey_id, data.get("device_name"))
        return jsonify({"message": "Passkey renamed", "passkey": passkey.to_dict()}), 200
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except LedgerError as e:
        return jsonify({"error": str(e)}), e.status_code


@passkeys_bp.delete("/<int:passkey_id>")
@require_auth
@require_admin
def delete_passkey_route(passkey_id: int):
    try:
        passkey_service.delete_passkey(g.current_user.id, passkey_id)
        return jsonify({"message": "Passkey deleted"}), 200
    except LedgerError as e:
        return jsonify({"error": str(e)}), e.status_code
