from __future__ import annotations

from ..extensions import db
from ..constants import VALID_CHECKLIST_STATUSES, ChecklistStatus
from .common import new_id, sql_in


class CleaningChecklist(db.Model):
    """
    Housekeeping submission for a cabin, approved by reception or an admin.

    SUBMITTED -> APPROVED, once. Immutable after approval.
    items is a JSON object mapping checklist item name -> completed flag.
    """
    __tablename__ = "cleaning_checklists"
    __table_args__ = (
        db.CheckConstraint(sql_in("status", VALID_CHECKLIST_STATUSES), name="ck_cleaning_checklists_status"),
        db.Index("ix_cleaning_checklists_cabin_status", "cabin_id", "status"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    cabin_id = db.Column(db.String(36), db.ForeignKey("cabins.id"), nullable=False, index=True)
    items = db.Column(db.JSON, nullable=False)
    filled_by_user_id = db.Column(
        "filled_by", db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    approved_by_user_id = db.Column(
        "approved_by", db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    status = db.Column(db.String(16), nullable=False, default=ChecklistStatus.SUBMITTED)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    approved_at = db.Column(db.DateTime(timezone=True), nullable=True)

    cabin = db.relationship("Cabin", backref=db.backref("cleaning_checklists", lazy=True))

    def __repr__(self) -> str:
        return f"<CleaningChecklist id={self.id} cabin_id={self.cabin_id} status={self.status}>"
