# Overview: Flask API routes for admin operations; parses input and returns JSON responses.

# backend/cabinops/routes/admin.py
"""
Admin routes for user management.

Provides endpoints for:
- User management (list, create, update, delete)
- Role catalogue (actions per role, grouped by category)

Listing requires VIEW_USERS. Mutations go through the workflow engine, which
allows them for ADMIN only and logs each one.
"""

from flask import Blueprint, request, jsonify, g

from ..constants import ROLE_LABELS, VALID_ROLES
from ..decorators import require_auth, require_permission
from ..permissions import ActionCategory, get_action_definition, get_actions_by_category, get_role_actions
from ..services import entity_store, workflow_service
from ..validation import ValidationError, optional_str, require_json_object, require_str
from .common import workflow_response

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


# =============================================================================
# USER MANAGEMENT
# =============================================================================

@admin_bp.get("/users")
@require_auth
@require_permission("VIEW_USERS")
def list_users():
    """List all users (never includes password hashes)."""
    entity_store.check_connection()
    users = entity_store.get_users()
    return jsonify({"users": users, "count": len(users)})


@admin_bp.post("/users")
@require_auth
def create_user():
    """
    Create a new user.

    Request body:
    - username: str (required)
    - password: str (required, 8+ chars, upper, lower, digit, special)
    - role: str (required; ADMIN, RECEPTION, HOUSEKEEPING or TECHNICAL)
    """
    try:
        data = require_json_object(request.get_json(silent=True) or {})
        username = require_str(data, "username")
        password = require_str(data, "password")
        role = require_str(data, "role")
    except ValidationError as e:
        return {"error": str(e)}, 400

    result = workflow_service.add_user(username, password, role, g.current_user)
    return workflow_response(result, created=True)


@admin_bp.put("/users/<user_id>")
@require_auth
def update_user(user_id: str):
    """
    Update a user. Any of username, password, role may be given.
    """
    try:
        data = require_json_object(request.get_json(silent=True) or {})
        username = optional_str(data, "username")
        password = optional_str(data, "password")
        role = optional_str(data, "role")
    except ValidationError as e:
        return {"error": str(e)}, 400

    result = workflow_service.update_user(
        user_id, g.current_user, username=username, password=password, role=role,
    )
    return workflow_response(result)


@admin_bp.delete("/users/<user_id>")
@require_auth
def delete_user(user_id: str):
    result = workflow_service.delete_user(user_id, g.current_user)
    return workflow_response(result)


# =============================================================================
# ROLES
# =============================================================================

CATEGORY_ORDER = [
    ActionCategory.CABINS,
    ActionCategory.ISSUES,
    ActionCategory.CLEANING,
    ActionCategory.USERS,
    ActionCategory.SYSTEM,
]


@admin_bp.get("/roles")
@require_auth
@require_permission("VIEW_USERS")
def list_roles():
    """Each role with its label and granted actions, grouped by category."""
    roles = []
    for role in VALID_ROLES:
        granted = get_role_actions(role)
        categories = {}
        for category in CATEGORY_ORDER:
            codes = [action[0] for action in get_actions_by_category(category) if action[0] in granted]
            if codes:
                categories[category] = [get_action_definition(code) for code in codes]
        roles.append({
            "role": role,
            "label": ROLE_LABELS[role],
            "action_count": len(granted),
            "actions": categories,
        })
    return jsonify({"roles": roles})
