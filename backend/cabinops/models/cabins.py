from __future__ import annotations

from ..extensions import db
from ..constants import VALID_CABIN_STATUSES, CabinStatus, icon_for_cabin
from .common import new_id, sql_in
from cabinops.time_utils import to_utc_z


class Cabin(db.Model):
    """
    A rentable cabin and its lifecycle status.

    The links to the active stay, open issue and pending cleaning checklist
    are NOT stored here. The entity store derives them at read time from the
    child tables, so there is a single source of truth for each.

    CONCURRENCY: version_id is a compare-and-set counter. Every UPDATE is
    issued with "WHERE version_id = <loaded value>" and a stale write raises
    StaleDataError.
    """
    __tablename__ = "cabins"
    __table_args__ = (
        db.CheckConstraint(sql_in("status", VALID_CABIN_STATUSES), name="ck_cabins_status"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(64), nullable=False, unique=True)
    status = db.Column(db.String(32), nullable=False, default=CabinStatus.EMPTY_CLEAN)
    version_id = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Cabin id={self.id} name={self.name!r} status={self.status}>"

    @property
    def icon(self) -> str:
        return icon_for_cabin(self.name)


class Stay(db.Model):
    """
    A guest occupancy of one cabin.

    is_active is the source of truth for whether the stay is current; it is
    cleared on checkout (OCCUPIED -> EMPTY_DIRTY) and by the stay cleanup job.
    """
    __tablename__ = "stays"
    __table_args__ = (
        db.Index("ix_stays_cabin_active", "cabin_id", "is_active"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    cabin_id = db.Column(db.String(36), db.ForeignKey("cabins.id"), nullable=False, index=True)
    guest_count = db.Column(db.Integer, nullable=False)
    nights = db.Column(db.Integer, nullable=False)
    checkin_date = db.Column(db.DateTime(timezone=True), nullable=False)
    checkout_date = db.Column(db.DateTime(timezone=True), nullable=False)
    created_by_user_id = db.Column(
        "created_by", db.String(36), db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    cabin = db.relationship("Cabin", backref=db.backref("stays", lazy=True))

    def __repr__(self) -> str:
        return f"<Stay id={self.id} cabin_id={self.cabin_id} nights={self.nights}>"
