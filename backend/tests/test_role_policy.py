"""
Role policy tests.

Verifies:
- ADMIN is a superset of every role
- Non-admin status changes are limited to their listed transitions
- TECHNICAL resolves only TECHNICAL issues
- available_actions mirrors the cabin screen for each role and state
"""

import pytest

from cabinops.constants import CabinStatus, IssueType, Role, VALID_ROLES
from cabinops.permissions import (
    ACTION_DEFINITIONS,
    DEFAULT_ROLE_PERMISSIONS,
    available_actions,
    can_resolve_issue_type,
    get_action_definition,
    get_all_action_codes,
    has_role,
    is_action_permitted,
    is_transition_permitted,
    validate_action_code,
)


def _cabin(status, pending=None, issue=None):
    return {
        "id": "c1",
        "name": "Shoka",
        "status": status,
        "pending_cleaning_id": pending,
        "active_issue_id": issue,
    }


class TestHasRole:

    def test_admin_always_passes(self):
        assert has_role(Role.ADMIN, [])
        assert has_role(Role.ADMIN, [Role.HOUSEKEEPING])

    def test_member_and_non_member(self):
        assert has_role(Role.RECEPTION, [Role.RECEPTION, Role.TECHNICAL])
        assert not has_role(Role.HOUSEKEEPING, [Role.RECEPTION])

    def test_missing_role_fails(self):
        assert not has_role(None, VALID_ROLES)


class TestDefinitions:

    def test_codes_are_unique(self):
        codes = get_all_action_codes()
        assert len(codes) == len(set(codes))
        assert len(codes) == len(ACTION_DEFINITIONS)

    def test_grants_reference_known_actions(self):
        for role, codes in DEFAULT_ROLE_PERMISSIONS.items():
            assert role in VALID_ROLES
            for code in codes:
                assert validate_action_code(code), f"{role} grants unknown {code}"

    def test_admin_holds_everything(self):
        assert DEFAULT_ROLE_PERMISSIONS[Role.ADMIN] == set(get_all_action_codes())

    @pytest.mark.parametrize("role", VALID_ROLES)
    def test_every_role_sees_dashboard_and_reports_issues(self, role):
        assert is_action_permitted(role, "VIEW_DASHBOARD")
        assert is_action_permitted(role, "REPORT_ISSUE")

    def test_definition_lookup(self):
        definition = get_action_definition("CHECK_IN")
        assert definition["code"] == "CHECK_IN"
        assert definition["category"] == "CABINS"
        assert get_action_definition("NOPE") is None


class TestGrants:

    @pytest.mark.parametrize(
        "role,action,allowed",
        [
            (Role.RECEPTION, "CHECK_IN", True),
            (Role.RECEPTION, "APPROVE_CLEANING", True),
            (Role.RECEPTION, "SUBMIT_CLEANING", False),
            (Role.RECEPTION, "ADD_USER", False),
            (Role.HOUSEKEEPING, "SUBMIT_CLEANING", True),
            (Role.HOUSEKEEPING, "APPROVE_CLEANING", False),
            (Role.HOUSEKEEPING, "CHECK_IN", False),
            (Role.TECHNICAL, "RESOLVE_ISSUE", True),
            (Role.TECHNICAL, "CHECK_IN", False),
            (Role.TECHNICAL, "VIEW_CLEANING", False),
            (Role.ADMIN, "OVERRIDE_STATUS", True),
            (Role.ADMIN, "DELETE_USER", True),
            (None, "VIEW_DASHBOARD", False),
        ],
    )
    def test_action_grants(self, role, action, allowed):
        assert is_action_permitted(role, action) is allowed


class TestTransitions:

    def test_reception_may_only_check_out(self):
        assert is_transition_permitted(Role.RECEPTION, CabinStatus.OCCUPIED, CabinStatus.EMPTY_DIRTY)
        assert not is_transition_permitted(Role.RECEPTION, CabinStatus.EMPTY_DIRTY, CabinStatus.EMPTY_CLEAN)
        assert not is_transition_permitted(Role.RECEPTION, CabinStatus.ISSUE_TECH, CabinStatus.EMPTY_DIRTY)

    def test_technical_may_only_release_fixed_cabins(self):
        assert is_transition_permitted(Role.TECHNICAL, CabinStatus.ISSUE_TECH, CabinStatus.EMPTY_DIRTY)
        assert not is_transition_permitted(Role.TECHNICAL, CabinStatus.OCCUPIED, CabinStatus.EMPTY_DIRTY)

    def test_housekeeping_changes_nothing(self):
        assert not is_transition_permitted(Role.HOUSEKEEPING, CabinStatus.EMPTY_DIRTY, CabinStatus.EMPTY_CLEAN)

    def test_admin_forces_anything(self):
        assert is_transition_permitted(Role.ADMIN, CabinStatus.EMPTY_CLEAN, CabinStatus.UNDER_MAINTENANCE)
        assert is_transition_permitted(Role.ADMIN, CabinStatus.ISSUE_CLEAN, CabinStatus.OCCUPIED)


class TestIssueResolution:

    def test_technical_resolves_technical_only(self):
        assert can_resolve_issue_type(Role.TECHNICAL, IssueType.TECHNICAL)
        assert not can_resolve_issue_type(Role.TECHNICAL, IssueType.CLEANING)

    def test_reception_resolves_nothing(self):
        assert not can_resolve_issue_type(Role.RECEPTION, IssueType.TECHNICAL)

    def test_admin_resolves_any_type(self):
        assert can_resolve_issue_type(Role.ADMIN, IssueType.CLEANING)
        assert can_resolve_issue_type(Role.ADMIN, "PLUMBING")


class TestAvailableActions:

    def test_reception_on_ready_cabin(self):
        assert available_actions(Role.RECEPTION, _cabin(CabinStatus.EMPTY_CLEAN)) == ["CHECK_IN", "REPORT_ISSUE"]

    def test_reception_on_occupied_cabin(self):
        assert available_actions(Role.RECEPTION, _cabin(CabinStatus.OCCUPIED)) == ["CHECK_OUT", "REPORT_ISSUE"]

    def test_housekeeping_on_dirty_cabin(self):
        actions = available_actions(Role.HOUSEKEEPING, _cabin(CabinStatus.EMPTY_DIRTY))
        assert actions == ["SUBMIT_CLEANING", "REPORT_ISSUE"]

    def test_pending_checklist_hides_submit_and_offers_approval(self):
        cabin = _cabin(CabinStatus.EMPTY_DIRTY, pending="cl1")
        assert available_actions(Role.HOUSEKEEPING, cabin) == ["REPORT_ISSUE"]
        assert "APPROVE_CLEANING" in available_actions(Role.RECEPTION, cabin)

    def test_no_approval_once_cabin_left_dirty(self):
        cabin = _cabin(CabinStatus.ISSUE_TECH, pending="cl1", issue="i1")
        assert "APPROVE_CLEANING" not in available_actions(Role.RECEPTION, cabin)
        assert "APPROVE_CLEANING" in available_actions(Role.ADMIN, cabin)

    def test_technical_on_broken_cabin(self):
        cabin = _cabin(CabinStatus.ISSUE_TECH, issue="i1")
        assert available_actions(Role.TECHNICAL, cabin) == ["RESOLVE_TECHNICAL"]

    def test_admin_gets_override(self):
        actions = available_actions(Role.ADMIN, _cabin(CabinStatus.EMPTY_CLEAN))
        assert actions == ["CHECK_IN", "REPORT_ISSUE", "OVERRIDE_STATUS"]

    def test_unknown_role_gets_nothing(self):
        assert available_actions(None, _cabin(CabinStatus.EMPTY_CLEAN)) == []
