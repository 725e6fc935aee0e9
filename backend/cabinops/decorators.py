# Overview: Request and permission decorators for API routes.

from functools import wraps
from flask import request, jsonify, g, current_app
from sqlalchemy.exc import SQLAlchemyError

from .extensions import db
from .permissions import is_action_permitted
from .services import entity_store, session_service


def _is_authenticated() -> bool:
    return hasattr(g, 'current_user')


def require_auth(f):
    """
    Require a valid bearer token.

    Sets the following Flask g attributes:
    - g.current_user: The authenticated User row
    - g.session_context: The full SessionContext object

    Returns 401 if the Authorization header is missing, the token is invalid
    or expired, or its user no longer exists.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")

        if not auth_header or not auth_header.startswith("Bearer "):
            return jsonify({"error": "Authentication required"}), 401

        token = auth_header.split(" ", 1)[1]
        try:
            context = session_service.validate_session(token)
        except SQLAlchemyError:
            db.session.rollback()
            # missing tables surface as SchemaNotProvisionedError (503)
            entity_store.check_connection()
            raise

        if not context:
            return jsonify({"error": "Invalid or expired token"}), 401

        g.current_user = context.user
        g.session_context = context

        return f(*args, **kwargs)

    return decorated_function


def require_permission(action_code: str):
    """
    Require the current user's role to hold `action_code`.

    Used for reads; mutations are gated again by the workflow engine.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            # Ensure @require_auth was called first
            if not _is_authenticated():
                return jsonify({"error": "Authentication required"}), 401

            user = g.current_user
            if not is_action_permitted(user.role, action_code):
                current_app.logger.warning(
                    "Permission denied: %s (%s) lacks %s for %s",
                    user.username, user.role, action_code, request.path,
                )
                return jsonify({
                    "error": "Permission denied",
                    "required_permission": action_code,
                }), 403

            return f(*args, **kwargs)

        return decorated_function

    return decorator
