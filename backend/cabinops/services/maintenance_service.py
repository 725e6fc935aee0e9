# Overview: Service-layer operations for maintenance; encapsulates business logic and database work.

from __future__ import annotations

from datetime import date

from flask import current_app

from ..extensions import db
from ..constants import CabinStatus
from ..models import Cabin, Stay
from cabinops.time_utils import start_of_day, utc_today


def cleanup_stays(*, today: date | None = None) -> int:
    """
    End stays that are past their checkout date on cabins no longer OCCUPIED.

    A stay on a cabin that is still OCCUPIED is left alone: the guests have
    not been checked out yet. Returns the number of stays ended.
    """
    cutoff = start_of_day(today or utc_today())
    stale = (
        db.session.query(Stay)
        .join(Cabin, Cabin.id == Stay.cabin_id)
        .filter(
            Stay.is_active.is_(True),
            Stay.checkout_date < cutoff,
            Cabin.status != CabinStatus.OCCUPIED,
        )
        .all()
    )
    for stay in stale:
        stay.is_active = False
    db.session.commit()

    if stale:
        current_app.logger.info("Ended %d stale stays", len(stale))
    return len(stale)
