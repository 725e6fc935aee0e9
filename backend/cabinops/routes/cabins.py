# Overview: Flask API routes for cabin operations; parses input and returns JSON responses.

# backend/cabinops/routes/cabins.py
"""
Cabin workflow routes.

Every mutation goes through the workflow engine, which enforces the role
policy itself, and answers with the tagged outcome plus a full state reload
(see routes/common.py). Reads are gated here.
"""

from flask import Blueprint, request, jsonify, g

from ..constants import CLEANING_ITEMS, STATUS_LABELS, CabinStatus
from ..decorators import require_auth
from ..permissions import available_actions
from ..services import entity_store, workflow_service
from ..validation import (
    ValidationError,
    optional_int,
    optional_str,
    require_dict,
    require_int,
    require_json_object,
    require_str,
)
from .common import OUTCOME_HTTP_STATUS, snapshot_for, workflow_response


cabins_bp = Blueprint("cabins", __name__, url_prefix="/api")


def _payload() -> dict:
    return require_json_object(request.get_json(silent=True) or {})


# =============================================================================
# READS
# =============================================================================

@cabins_bp.get("/state")
@require_auth
def state_route():
    """Full snapshot. users/logs only for roles holding VIEW_USERS / VIEW_LOGS."""
    return jsonify(snapshot_for(g.current_user))


@cabins_bp.get("/cabins")
@require_auth
def list_cabins_route():
    entity_store.check_connection()
    cabins = entity_store.get_cabins()
    for cabin in cabins:
        cabin["available_actions"] = available_actions(g.current_user.role, cabin)
    return jsonify({"cabins": cabins, "count": len(cabins), "status_labels": STATUS_LABELS})


@cabins_bp.get("/cabins/<cabin_id>/actions")
@require_auth
def cabin_actions_route(cabin_id: str):
    """What the current user may do on this cabin right now."""
    entity_store.check_connection()
    cabin = entity_store.get_cabin(cabin_id)
    if not cabin:
        return jsonify({"error": "Cabin not found"}), 404
    return jsonify({
        "cabin_id": cabin_id,
        "status": cabin["status"],
        "actions": available_actions(g.current_user.role, cabin),
    })


@cabins_bp.get("/cleaning/items")
@require_auth
def cleaning_items_route():
    return jsonify({"items": list(CLEANING_ITEMS)})


@cabins_bp.get("/cleaning/<checklist_id>")
@require_auth
def get_checklist_route(checklist_id: str):
    entity_store.check_connection()
    result = workflow_service.get_cleaning_checklist(checklist_id, g.current_user)
    if not result.ok:
        return jsonify({"outcome": result.outcome, "error": result.message}), OUTCOME_HTTP_STATUS[result.outcome]
    return jsonify({"checklist": result.payload})


# =============================================================================
# CABIN STATUS
# =============================================================================

@cabins_bp.post("/cabins/<cabin_id>/status")
@require_auth
def change_status_route(cabin_id: str):
    """
    Set a cabin's status.

    Request body:
    - status: str (required)
    - details: str (optional, appended to the log line)
    - expected_version: int (optional compare-and-set on the cabin)
    """
    try:
        data = _payload()
        status = require_str(data, "status")
        details = optional_str(data, "details") or ""
        expected_version = optional_int(data, "expected_version")
    except ValidationError as e:
        return {"error": str(e)}, 400

    result = workflow_service.change_cabin_status(
        cabin_id, status, g.current_user, details=details, expected_version=expected_version,
    )
    return workflow_response(result)


@cabins_bp.post("/cabins/<cabin_id>/check-in")
@require_auth
def check_in_route(cabin_id: str):
    try:
        data = _payload()
        guest_count = require_int(data, "guest_count")
        nights = require_int(data, "nights")
        expected_version = optional_int(data, "expected_version")
    except ValidationError as e:
        return {"error": str(e)}, 400

    result = workflow_service.check_in(
        cabin_id, guest_count, nights, g.current_user, expected_version=expected_version,
    )
    return workflow_response(result, created=True)


@cabins_bp.post("/cabins/<cabin_id>/checkout")
@require_auth
def checkout_route(cabin_id: str):
    """Guests left: OCCUPIED -> EMPTY_DIRTY, ending the stay."""
    try:
        data = _payload()
        expected_version = optional_int(data, "expected_version")
    except ValidationError as e:
        return {"error": str(e)}, 400

    result = workflow_service.change_cabin_status(
        cabin_id,
        CabinStatus.EMPTY_DIRTY,
        g.current_user,
        details="Guests checked out",
        expected_version=expected_version,
    )
    return workflow_response(result)


# =============================================================================
# ISSUES
# =============================================================================

@cabins_bp.post("/cabins/<cabin_id>/issues")
@require_auth
def report_issue_route(cabin_id: str):
    try:
        data = _payload()
        issue_type = require_str(data, "type")
        description = require_str(data, "description")
    except ValidationError as e:
        return {"error": str(e)}, 400

    result = workflow_service.report_issue(cabin_id, issue_type, description, g.current_user)
    return workflow_response(result, created=True)


@cabins_bp.post("/cabins/<cabin_id>/resolve-technical")
@require_auth
def resolve_technical_route(cabin_id: str):
    """Technical fix confirmed: resolve the open issue and send the cabin to cleaning."""
    result = workflow_service.resolve_technical_issue(cabin_id, g.current_user)
    return workflow_response(result)


@cabins_bp.post("/issues/<issue_id>/resolve")
@require_auth
def resolve_issue_route(issue_id: str):
    result = workflow_service.resolve_issue(issue_id, g.current_user)
    return workflow_response(result)


# =============================================================================
# CLEANING
# =============================================================================

@cabins_bp.post("/cabins/<cabin_id>/cleaning")
@require_auth
def submit_cleaning_route(cabin_id: str):
    """
    Submit a housekeeping checklist.

    Request body:
    - items: {item name: true, ...} covering every standard item
    """
    try:
        data = _payload()
        items = require_dict(data, "items")
    except ValidationError as e:
        return {"error": str(e)}, 400

    result = workflow_service.submit_cleaning_checklist(cabin_id, items, g.current_user)
    return workflow_response(result, created=True)


@cabins_bp.post("/cleaning/<checklist_id>/approve")
@require_auth
def approve_cleaning_route(checklist_id: str):
    result = workflow_service.approve_cleaning_checklist(checklist_id, g.current_user)
    return workflow_response(result)
