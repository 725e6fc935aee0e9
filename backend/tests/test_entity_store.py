"""
Entity store tests.

Verifies:
- Schema check (all tables present / SchemaNotProvisionedError listing the missing ones)
- Row -> entity round trip for cabins, stays, issues and checklists
- Derived cabin back-references
- Username resolution and read-failure fallbacks
"""

from datetime import date, datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from cabinops.constants import CLEANING_ITEMS, CabinStatus, ChecklistStatus, IssueStatus
from cabinops.extensions import db
from cabinops.models import CleaningChecklist, Issue, LogEntry, Notification, Stay
from cabinops.services import entity_store
from cabinops.services.entity_store import REQUIRED_TABLES, SchemaNotProvisionedError


TODAY = date(2026, 10, 19)


def _by_id(entities, entity_id):
    return next(e for e in entities if e["id"] == entity_id)


def _stay(cabin, user, *, checkin, nights=2, active=True):
    stay = Stay(
        cabin_id=cabin.id,
        guest_count=3,
        nights=nights,
        checkin_date=checkin,
        checkout_date=checkin + timedelta(days=nights),
        created_by_user_id=user.id if user else None,
        is_active=active,
        created_at=checkin,
    )
    db.session.add(stay)
    db.session.commit()
    return stay


class TestSchemaCheck:

    def test_all_tables_present(self, db_session):
        assert entity_store.check_connection() is True

    def test_missing_tables_raise(self, bare_app):
        with pytest.raises(SchemaNotProvisionedError) as excinfo:
            entity_store.check_connection()
        assert excinfo.value.missing_tables == list(REQUIRED_TABLES)

    def test_snapshot_checks_schema_first(self, bare_app):
        with pytest.raises(SchemaNotProvisionedError):
            entity_store.load_snapshot()

    def test_snapshot_has_every_collection(self, seed):
        snapshot = entity_store.load_snapshot(TODAY)
        assert set(snapshot) == {"cabins", "users", "stays", "issues", "logs", "notifications"}
        assert len(snapshot["cabins"]) == 9
        assert len(snapshot["users"]) == 4


class TestRoundTrip:

    def test_cabin(self, seed, find_cabin):
        row = find_cabin("Shoka")
        entity = _by_id(entity_store.get_cabins(TODAY), row.id)

        assert entity["name"] == "Shoka"
        assert entity["status"] == row.status
        assert entity["icon"] == "Mountain"
        assert entity["version_id"] == row.version_id
        assert entity["current_stay_id"] is None
        assert entity["active_issue_id"] is None
        assert entity["pending_cleaning_id"] is None

    def test_stay(self, reception, find_cabin):
        checkin = datetime(2026, 10, 18, 14, 30)
        stay = _stay(find_cabin("Michka"), reception, checkin=checkin, nights=3)

        entity = _by_id(entity_store.get_stays(), stay.id)

        assert entity["cabin_id"] == stay.cabin_id
        assert entity["guest_count"] == 3
        assert entity["nights"] == 3
        assert entity["checkin_date"] == "2026-10-18T14:30:00Z"
        assert entity["checkout_date"] == "2026-10-21T14:30:00Z"
        assert entity["created_by_user_id"] == reception.id
        assert entity["created_by"] == "reception"
        assert entity["is_active"] is True

    def test_issue(self, technical, find_cabin):
        cabin = find_cabin("Papli")
        issue = Issue(
            cabin_id=cabin.id,
            type="TECHNICAL",
            status=IssueStatus.OPEN,
            description="Boiler",
            reported_by_user_id=technical.id,
            reported_at=datetime(2026, 10, 19, 8, 0),
        )
        db.session.add(issue)
        db.session.commit()

        entity = _by_id(entity_store.get_issues(), issue.id)

        assert entity["cabin_id"] == cabin.id
        assert entity["type"] == "TECHNICAL"
        assert entity["description"] == "Boiler"
        assert entity["status"] == IssueStatus.OPEN
        assert entity["reported_by"] == "technical"
        assert entity["reported_at"] == "2026-10-19T08:00:00Z"
        assert entity["resolved_at"] is None

    def test_checklist(self, housekeeping, reception, find_cabin):
        items = {item: True for item in CLEANING_ITEMS}
        checklist = CleaningChecklist(
            cabin_id=find_cabin("Opach").id,
            items=items,
            filled_by_user_id=housekeeping.id,
            approved_by_user_id=reception.id,
            status=ChecklistStatus.APPROVED,
            created_at=datetime(2026, 10, 19, 9, 0),
            approved_at=datetime(2026, 10, 19, 10, 0),
        )
        db.session.add(checklist)
        db.session.commit()

        entity = entity_store.get_checklist(checklist.id)

        assert entity["items"] == items
        assert entity["filled_by"] == "housekeeping"
        assert entity["approved_by"] == "reception"
        assert entity["status"] == ChecklistStatus.APPROVED
        assert entity["approved_at"] == "2026-10-19T10:00:00Z"

    def test_missing_checklist(self, seed):
        assert entity_store.get_checklist("missing") is None


class TestDerivedReferences:

    def test_current_stay_needs_active_flag_and_future_checkout(self, reception, find_cabin):
        shoka, michka, papli = find_cabin("Shoka"), find_cabin("Michka"), find_cabin("Papli")
        current = _stay(shoka, reception, checkin=datetime(2026, 10, 18, 12, 0), nights=2)
        _stay(michka, reception, checkin=datetime(2026, 10, 10, 12, 0), nights=2)
        _stay(papli, reception, checkin=datetime(2026, 10, 18, 12, 0), nights=2, active=False)

        cabins = entity_store.get_cabins(TODAY)

        assert _by_id(cabins, shoka.id)["current_stay_id"] == current.id
        assert _by_id(cabins, michka.id)["current_stay_id"] is None
        assert _by_id(cabins, papli.id)["current_stay_id"] is None

    def test_checkout_today_still_current(self, reception, find_cabin):
        shoka = find_cabin("Shoka")
        stay = _stay(shoka, reception, checkin=datetime(2026, 10, 17, 9, 0), nights=2)

        assert _by_id(entity_store.get_cabins(TODAY), shoka.id)["current_stay_id"] == stay.id

    def test_open_issue_attached_only_in_issue_status(self, technical, find_cabin):
        cabin = find_cabin("Zik")
        issue = Issue(
            cabin_id=cabin.id,
            type="CLEANING",
            status=IssueStatus.OPEN,
            description="Muddy floor",
            reported_by_user_id=technical.id,
            reported_at=datetime(2026, 10, 19, 8, 0),
        )
        db.session.add(issue)
        cabin.status = CabinStatus.ISSUE_CLEAN
        db.session.commit()

        assert _by_id(entity_store.get_cabins(TODAY), cabin.id)["active_issue_id"] == issue.id

        cabin = find_cabin("Zik")
        cabin.status = CabinStatus.EMPTY_DIRTY
        db.session.commit()

        assert _by_id(entity_store.get_cabins(TODAY), cabin.id)["active_issue_id"] is None

    def test_resolved_issue_not_attached(self, technical, find_cabin):
        cabin = find_cabin("Zik")
        db.session.add(Issue(
            cabin_id=cabin.id,
            type="TECHNICAL",
            status=IssueStatus.RESOLVED,
            description="Fixed already",
            reported_by_user_id=technical.id,
            reported_at=datetime(2026, 10, 19, 8, 0),
            resolved_at=datetime(2026, 10, 19, 9, 0),
        ))
        cabin.status = CabinStatus.ISSUE_TECH
        db.session.commit()

        assert _by_id(entity_store.get_cabins(TODAY), cabin.id)["active_issue_id"] is None

    def test_newest_pending_checklist_wins(self, housekeeping, find_cabin):
        cabin = find_cabin("Maral")
        items = {item: True for item in CLEANING_ITEMS}
        older = CleaningChecklist(
            cabin_id=cabin.id, items=items, filled_by_user_id=housekeeping.id,
            status=ChecklistStatus.SUBMITTED, created_at=datetime(2026, 10, 19, 8, 0),
        )
        newer = CleaningChecklist(
            cabin_id=cabin.id, items=items, filled_by_user_id=housekeeping.id,
            status=ChecklistStatus.SUBMITTED, created_at=datetime(2026, 10, 19, 9, 0),
        )
        db.session.add_all([older, newer])
        db.session.commit()

        assert _by_id(entity_store.get_cabins(TODAY), cabin.id)["pending_cleaning_id"] == newer.id


class TestUserResolution:

    def test_missing_user_renders_unknown_and_system(self, seed, find_cabin):
        stay = _stay(find_cabin("Namazin"), None, checkin=datetime(2026, 10, 19, 12, 0))
        db.session.add(LogEntry(user_id=None, action="CHECK_IN", details="Namazin", created_at=datetime(2026, 10, 19, 12, 0)))
        db.session.commit()

        assert _by_id(entity_store.get_stays(), stay.id)["created_by"] == "Unknown"
        assert entity_store.get_logs()[0]["username"] == "System"

    def test_users_never_expose_passwords(self, seed):
        for user in entity_store.get_users():
            assert "password" not in user
            assert "password_hash" not in user


class TestReads:

    def test_logs_newest_first_and_limited(self, admin):
        base = datetime(2026, 10, 19, 8, 0)
        for minute in range(5):
            db.session.add(LogEntry(
                user_id=admin.id, action="CHANGE_STATUS", details=f"entry {minute}",
                created_at=base + timedelta(minutes=minute),
            ))
        db.session.commit()

        logs = entity_store.get_logs(limit=3)

        assert [log["details"] for log in logs] == ["entry 4", "entry 3", "entry 2"]
        assert logs[0]["username"] == "admin"

    def test_notifications_limited(self, seed):
        base = datetime(2026, 10, 19, 8, 0)
        for i in range(60):
            db.session.add(Notification(message=f"n{i}", read=False, created_at=base + timedelta(seconds=i)))
        db.session.commit()

        notifications = entity_store.get_notifications()

        assert len(notifications) == entity_store.NOTIFICATION_LIMIT
        assert notifications[0]["message"] == "n59"

    def test_read_failure_returns_empty(self, reception, find_cabin, monkeypatch):
        _stay(find_cabin("Shoka"), reception, checkin=datetime(2026, 10, 19, 12, 0))

        def _broken():
            raise OperationalError("SELECT", {}, Exception("connection reset"))

        monkeypatch.setattr(entity_store, "_user_names", _broken)

        assert entity_store.get_stays() == []
        assert entity_store.get_logs() == []
