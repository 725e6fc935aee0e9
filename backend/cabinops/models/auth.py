from __future__ import annotations

from ..extensions import db
from ..constants import VALID_ROLES
from .common import new_id, sql_in
from cabinops.time_utils import to_utc_z


class User(db.Model):
    """
    Staff accounts for authentication, authorization and attribution.

    Every other table references users by id, never by username, so renaming
    a user keeps historical attribution intact.

    The `password` column holds a bcrypt hash (see auth_service.hash_password).
    """
    __tablename__ = "users"
    __table_args__ = (
        db.CheckConstraint(sql_in("role", VALID_ROLES), name="ck_users_role"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    username = db.Column(db.String(64), nullable=False, unique=True, index=True)
    password_hash = db.Column("password", db.String(255), nullable=False)
    role = db.Column(db.String(16), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    last_login_at = db.Column("last_login", db.DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r} role={self.role}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "role": self.role,
            "created_at": to_utc_z(self.created_at),
            "last_login_at": to_utc_z(self.last_login_at) if self.last_login_at else None,
        }
