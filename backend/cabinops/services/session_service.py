# Overview: Stateless bearer tokens for authenticated API access.

"""
Session Token Service

Tokens are signed with the application SECRET_KEY (itsdangerous) and carry
only the user id, so no session table exists. A token stops working when it
expires (SESSION_MAX_AGE_SECONDS) or when its user is deleted.

LOGOUT: the client discards the token; there is no server-side revocation list.
"""

from dataclasses import dataclass
from datetime import datetime

from flask import current_app
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..models import User
from . import entity_store


TOKEN_SALT = "cabinops-session"


@dataclass
class SessionContext:
    """Authenticated identity for one request."""
    user: User
    issued_at: datetime | None


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=TOKEN_SALT)


def create_session(user: User) -> str:
    """Return a signed bearer token for `user`."""
    return _serializer().dumps({"user_id": user.id})


def validate_session(token: str) -> SessionContext | None:
    """
    Resolve a bearer token to its user.

    Returns None for tampered, expired or orphaned tokens.
    """
    max_age = int(current_app.config.get("SESSION_MAX_AGE_SECONDS", 24 * 60 * 60))
    try:
        payload, issued_at = _serializer().loads(token, max_age=max_age, return_timestamp=True)
    except SignatureExpired:
        return None
    except BadSignature:
        return None

    user_id = payload.get("user_id") if isinstance(payload, dict) else None
    if not user_id:
        return None

    user = entity_store.get_user_row(user_id)
    if not user:
        return None

    return SessionContext(user=user, issued_at=issued_at)
