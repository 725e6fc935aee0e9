from __future__ import annotations

from ..extensions import db
from ..constants import IssueStatus
from .common import new_id


class Issue(db.Model):
    """
    A technical or cleanliness problem reported against a cabin.

    Transitions to RESOLVED exactly once; never deleted.
    """
    __tablename__ = "issues"
    __table_args__ = (
        db.Index("ix_issues_cabin_status", "cabin_id", "status"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    cabin_id = db.Column(db.String(36), db.ForeignKey("cabins.id"), nullable=False, index=True)
    type = db.Column(db.String(32), nullable=False)
    status = db.Column(db.String(16), nullable=False, default=IssueStatus.OPEN)
    description = db.Column(db.Text, nullable=False)
    reported_by_user_id = db.Column(
        "created_by", db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    reported_at = db.Column("created_at", db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    resolved_at = db.Column(db.DateTime(timezone=True), nullable=True)

    cabin = db.relationship("Cabin", backref=db.backref("issues", lazy=True))

    def __repr__(self) -> str:
        return f"<Issue id={self.id} cabin_id={self.cabin_id} type={self.type} status={self.status}>"
