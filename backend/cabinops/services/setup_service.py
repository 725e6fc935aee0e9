# Overview: Schema provisioning and seed data for a fresh deployment.

from __future__ import annotations

from flask import current_app
from sqlalchemy.schema import CreateTable

from ..extensions import db
from ..constants import CABIN_DEFINITIONS, CabinStatus, Role
from ..models import Cabin, User
from .auth_service import build_user
from .entity_store import REQUIRED_TABLES


def provision_schema() -> None:
    """Create any missing tables. Existing tables are left untouched."""
    from .. import models  # noqa: F401
    db.create_all()


def schema_sql() -> str:
    """DDL for every required table, in dependency order, for manual provisioning."""
    from .. import models  # noqa: F401
    tables = db.metadata.sorted_tables
    statements = [
        str(CreateTable(table).compile(db.engine)).strip() + ";"
        for table in tables
        if table.name in REQUIRED_TABLES
    ]
    return "\n\n".join(statements)


def seed_cabins() -> int:
    """Create each fixed cabin that does not exist yet, EMPTY_CLEAN. Returns the number created."""
    existing = {name for (name,) in db.session.query(Cabin.name).all()}
    created = 0
    for name, _icon in CABIN_DEFINITIONS:
        if name in existing:
            continue
        db.session.add(Cabin(name=name, status=CabinStatus.EMPTY_CLEAN))
        created += 1
    db.session.commit()
    return created


def ensure_admin(username: str | None = None, password: str | None = None) -> User | None:
    """
    Create the default administrator unless a user with that name exists.

    Returns the new user, or None when nothing was created.
    """
    username = username or current_app.config["DEFAULT_ADMIN_USERNAME"]
    password = password or current_app.config["DEFAULT_ADMIN_PASSWORD"]

    if db.session.query(User).filter_by(username=username).first():
        return None

    user = build_user(username, password, Role.ADMIN)
    db.session.add(user)
    db.session.commit()
    current_app.logger.info("Created default admin account '%s'", username)
    return user
