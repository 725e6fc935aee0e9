# backend/cabinops/routes/system.py
"""
System health, audit log and dashboard endpoints.
"""

import time
from flask import Blueprint, current_app, jsonify, request

from ..decorators import require_auth, require_permission
from ..services import dashboard_service, entity_store
from ..services.entity_store import SchemaNotProvisionedError
from cabinops.time_utils import utcnow

system_bp = Blueprint("system", __name__, url_prefix="/api")


def check_database_health() -> dict:
    """
    Check database connectivity and that every required table exists.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        reachable = entity_store.check_connection()
    except SchemaNotProvisionedError as e:
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "SCHEMA_NOT_PROVISIONED",
            "missing_tables": e.missing_tables,
        }

    elapsed_ms = (time.time() - start_time) * 1000
    if not reachable:
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }

    cabins = entity_store.get_cabins()
    return {
        "status": "healthy" if cabins else "degraded",
        "latency_ms": round(elapsed_ms, 2),
        "details": {
            "cabins": len(cabins),
        },
    }


@system_bp.get("/health")
def health():
    """
    Health check endpoint.

    Returns:
    - 200: healthy, or degraded (schema present but no cabins seeded)
    - 503: database unreachable or schema not provisioned
    """
    start_time = time.time()
    database_health = check_database_health()

    if database_health["status"] == "unhealthy":
        http_status = 503
    else:
        http_status = 200

    if database_health["status"] == "degraded":
        current_app.logger.warning("Health check degraded: no cabins seeded")

    total_elapsed_ms = (time.time() - start_time) * 1000

    response = {
        "status": database_health["status"],
        "timestamp": utcnow().isoformat() + "Z",
        "total_latency_ms": round(total_elapsed_ms, 2),
        "checks": {
            "database": database_health,
        }
    }

    return response, http_status


@system_bp.get("/logs")
@require_auth
@require_permission("VIEW_LOGS")
def list_logs():
    """
    Latest audit log entries, newest first.

    Query params:
    - limit: int (default 100, max 500)
    """
    limit = request.args.get("limit", default=entity_store.LOG_LIMIT, type=int)
    limit = max(1, min(limit, 500))
    entity_store.check_connection()
    logs = entity_store.get_logs(limit=limit)
    return jsonify({"logs": logs, "count": len(logs)})


@system_bp.get("/dashboard")
@require_auth
@require_permission("VIEW_DASHBOARD")
def dashboard():
    entity_store.check_connection()
    return jsonify(dashboard_service.get_summary())
