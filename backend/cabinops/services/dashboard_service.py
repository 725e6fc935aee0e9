# Overview: Service-layer read model for the dashboard; status counts and tomorrow's checkouts.

from __future__ import annotations

from datetime import date, timedelta

from ..constants import CabinStatus, IssueStatus
from . import entity_store
from cabinops.time_utils import parse_iso_datetime, utc_today


def _checkout_day(stay: dict) -> date | None:
    checkout = parse_iso_datetime(stay.get("checkout_date"))
    return checkout.date() if checkout else None


def get_summary(today: date | None = None) -> dict:
    """
    Operational overview for the front desk.

    - occupied / ready: cabins in OCCUPIED / EMPTY_CLEAN
    - open_issues: issues not yet RESOLVED, on any cabin
    - checkouts_tomorrow: active stays whose checkout falls tomorrow
    - leaving_guests: total guests across those stays
    """
    today = today or utc_today()
    tomorrow = today + timedelta(days=1)

    cabins = entity_store.get_cabins(today)
    stays = entity_store.get_stays()
    issues = entity_store.get_issues()

    cabins_by_id = {cabin["id"]: cabin for cabin in cabins}
    leaving = [
        stay for stay in stays
        if stay["is_active"] and _checkout_day(stay) == tomorrow
    ]

    return {
        "date": today.isoformat(),
        "tomorrow": tomorrow.isoformat(),
        "occupied": sum(1 for c in cabins if c["status"] == CabinStatus.OCCUPIED),
        "ready": sum(1 for c in cabins if c["status"] == CabinStatus.EMPTY_CLEAN),
        "open_issues": sum(1 for i in issues if i["status"] != IssueStatus.RESOLVED),
        "checkouts_tomorrow": len(leaving),
        "leaving_guests": sum(stay["guest_count"] for stay in leaving),
        "checkouts": [
            {
                "stay_id": stay["id"],
                "cabin_id": stay["cabin_id"],
                "cabin_name": cabins_by_id.get(stay["cabin_id"], {}).get("name", entity_store.UNKNOWN_USER),
                "cabin_icon": cabins_by_id.get(stay["cabin_id"], {}).get("icon"),
                "guest_count": stay["guest_count"],
                "checkin_date": stay["checkin_date"],
                "checkout_date": stay["checkout_date"],
            }
            for stay in leaving
        ],
    }
