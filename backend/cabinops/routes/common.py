# Overview: Shared response shaping for workflow-backed routes.

from flask import g, jsonify

from ..permissions import is_action_permitted
from ..services import entity_store
from ..services.workflow_service import Outcome, WorkflowResult


OUTCOME_HTTP_STATUS = {
    Outcome.OK: 200,
    Outcome.NOT_FOUND: 404,
    Outcome.FORBIDDEN: 403,
    Outcome.INVALID: 400,
    Outcome.CONFLICT: 409,
    Outcome.STORE_ERROR: 500,
}


def snapshot_for(user) -> dict:
    """Full reload, minus the collections `user`'s role may not see."""
    snapshot = entity_store.load_snapshot()
    if not is_action_permitted(user.role, "VIEW_USERS"):
        snapshot.pop("users", None)
    if not is_action_permitted(user.role, "VIEW_LOGS"):
        snapshot.pop("logs", None)
    return snapshot


def workflow_response(result: WorkflowResult, *, created: bool = False):
    """
    JSON body for a mutation: the tagged outcome plus the post-mutation state.

    Clients re-render from `state`; the outcome only says what happened.
    """
    status = OUTCOME_HTTP_STATUS.get(result.outcome, 500)
    if result.ok and created:
        status = 201
    return jsonify({
        "outcome": result.outcome,
        "message": result.message,
        "entity_id": result.entity_id,
        "state": snapshot_for(g.current_user),
    }), status
