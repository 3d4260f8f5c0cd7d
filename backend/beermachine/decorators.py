# Overview: Request and role decorators for API routes.

from functools import wraps
from flask import request, jsonify, g

from .services import session_service


def _bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header.split(" ", 1)[1]


def require_auth(f):
    """
    Require a valid session token.

    Sets g.current_user to the authenticated staff User.

    Returns 401 if:
    - No Authorization header
    - Invalid, expired or revoked token
    - User account deactivated
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = _bearer_token()
        if not token:
            return jsonify({"error": "Access token required"}), 401

        user = session_service.validate_session(token)
        if not user:
            return jsonify({"error": "Invalid token or user inactive"}), 401

        g.current_user = user
        g.session_token = token
        return f(*args, **kwargs)

    return decorated_function


def require_roles(*user_types: str):
    """
    Require the authenticated user to have one of the given user types.

    Must be stacked below @require_auth.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not hasattr(g, "current_user"):
                return jsonify({"error": "Authentication required"}), 401

            if g.current_user.user_type not in user_types:
                return jsonify({
                    "error": "Permission denied",
                    "required_roles": list(user_types),
                }), 403

            return f(*args, **kwargs)

        return decorated_function
    return decorator


require_admin = require_roles("admin")
require_staff = require_roles("admin", "seller")
