# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/cabinops/routes/auth.py
"""
Authentication API routes

- Login exchanges username/password for a signed bearer token
- Tokens expire after SESSION_MAX_AGE_SECONDS
- Logout is client-side: the token is simply discarded
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..services import auth_service
from ..services import session_service
from ..decorators import require_auth
from ..permissions import get_role_actions


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _user_payload(user) -> dict:
    data = user.to_dict()
    data["actions"] = sorted(get_role_actions(user.role))
    return data


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and create session token.

    Token must be included in Authorization header for protected routes.
    """
    data = request.get_json(silent=True) or {}
    username = data.get("username")
    password = data.get("password")

    if not all([username, password]):
        return jsonify({"error": "username and password required"}), 400

    user = auth_service.authenticate(username, password)
    if not user:
        current_app.logger.info("Failed login for '%s' from %s", username, request.remote_addr)
        return jsonify({"error": "Invalid credentials"}), 401

    token = session_service.create_session(user)
    current_app.logger.info("User '%s' logged in", user.username)

    return jsonify({
        "token": token,
        "user": _user_payload(user),
    })


@auth_bp.get("/me")
@require_auth
def me_route():
    """Current user and the actions their role holds."""
    return jsonify({"user": _user_payload(g.current_user)})


@auth_bp.post("/logout")
@require_auth
def logout_route():
    current_app.logger.info("User '%s' logged out", g.current_user.username)
    return jsonify({"message": "Logged out"})
