from __future__ import annotations

from ..extensions import db
from .common import new_id


class LogEntry(db.Model):
    """
    Audit trail of every state-changing workflow operation.

    IMMUTABLE: Never update or delete. Append-only.
    """
    __tablename__ = "logs"
    __table_args__ = (
        db.Index("ix_logs_created_at", "created_at"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    action = db.Column(db.String(32), nullable=False, index=True)  # CHECK_IN, CHANGE_STATUS, ...
    details = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def __repr__(self) -> str:
        return f"<LogEntry id={self.id} action={self.action}>"


class Notification(db.Model):
    """Human-readable feed item written alongside each log entry."""
    __tablename__ = "notifications"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    message = db.Column(db.Text, nullable=False)
    read = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), index=True)

    def __repr__(self) -> str:
        return f"<Notification id={self.id} read={self.read}>"
