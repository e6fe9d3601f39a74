import pytest
from datetime import timedelta
from decimal import Decimal

from timebank.core.buildings import building_exists
from timebank.core.errors import NotFoundError, ScopeViolation
from timebank.services.ledger.directory import (
    ensure_can_act,
    guest,
    list_staff,
    require_staff,
    resolve_building_scope,
    resolve_staff,
    set_carry_over,
)
from timebank.services.ledger.queries import (
    dashboard_counts,
    get_user_context,
    list_pending_earned,
    list_pending_used,
    staff_history,
)
from timebank.services.ledger.state_machine import approve_earned, approve_used, deny_earned

from conftest import ALICE, BEN, MIA, OMS_ADMIN, SUPER_ADMIN, get_test_today, make_earned, make_used


class TestDirectory:
    def test_resolve_is_case_insensitive(self, staff):
        assert resolve_staff(staff, " ALICE@x.org").name == "Alice Adams"

    def test_unknown_is_none(self, staff):
        assert resolve_staff(staff, "nobody@x.org") is None
        with pytest.raises(NotFoundError):
            require_staff(staff, "nobody@x.org")

    def test_memberships_keep_order(self, staff):
        assert resolve_staff(staff, MIA).buildings == ["OHS", "OMS"]

    def test_list_by_building(self, staff):
        emails = {m.email for m in list_staff(staff, "OMS")}
        assert emails == {SUPER_ADMIN, OMS_ADMIN, ALICE, MIA}

    def test_carry_over(self, staff):
        assert set_carry_over(staff, BEN, Decimal("4.5")).carry_over == Decimal("4.5")
        with pytest.raises(NotFoundError):
            set_carry_over(staff, "nobody@x.org", Decimal("1"))


class TestBuildingScope:
    def test_super_admin_sees_all_without_filter(self, staff):
        assert resolve_building_scope(require_staff(staff, SUPER_ADMIN)) is None

    def test_super_admin_any_valid_building(self, staff):
        assert resolve_building_scope(require_staff(staff, SUPER_ADMIN), "ses") == "SES"

    def test_super_admin_invalid_falls_back(self, staff):
        assert resolve_building_scope(require_staff(staff, SUPER_ADMIN), "NOPE") == "OMS"

    def test_foreign_building_falls_back_to_own(self, staff):
        assert resolve_building_scope(require_staff(staff, ALICE), "OHS") == "OMS"

    def test_member_may_pick_own_buildings(self, staff):
        mia = require_staff(staff, MIA)
        assert resolve_building_scope(mia) == "OHS"
        assert resolve_building_scope(mia, "OMS") == "OMS"

    def test_existence_check_is_injectable(self, staff):
        mia = require_staff(staff, MIA)
        assert resolve_building_scope(mia, "OMS", exists=lambda code: False) == "OHS"
        assert building_exists("OMS")

    def test_guest_gets_default_building(self):
        assert resolve_building_scope(guest("x@y.org"), "OHS") == "OMS"

    def test_act_outside_scope(self, staff):
        with pytest.raises(ScopeViolation):
            ensure_can_act(require_staff(staff, OMS_ADMIN), "OHS")
        ensure_can_act(require_staff(staff, SUPER_ADMIN), "OHS")


class TestPendingAndCounts:
    def test_pending_lists_and_counts(self, staff):
        make_earned(staff)
        make_earned(staff, email=BEN)
        approve_earned(staff, make_earned(staff, period="Period 8").id)
        make_used(staff)

        assert len(list_pending_earned(staff)) == 2
        assert len(list_pending_earned(staff, "OHS")) == 1
        assert len(list_pending_used(staff, "OHS")) == 0
        assert dashboard_counts(staff, "OMS") == {"earned": 1, "used": 1}
        assert dashboard_counts(staff) == {"earned": 2, "used": 1}


class TestStaffHistory:
    def test_all_states_newest_first(self, staff):
        today = get_test_today()
        pending = make_earned(staff, on=today - timedelta(days=3))
        approved = make_earned(staff, on=today - timedelta(days=2), period="Period 4")
        denied = make_earned(staff, on=today - timedelta(days=1), period="Period 5")
        used = make_used(staff, on=today)
        approve_earned(staff, approved.id)
        deny_earned(staff, denied.id, reasons=["Duplicate"])
        approve_used(staff, used.id)

        history = staff_history(staff, ALICE)

        assert [h.entry_type for h in history] == ["Used", "Denied", "Earned", "Pending"]
        assert history[1].denial_reason == "Duplicate"
        assert history[0].sheet_type == "used"
        assert history[3].request_id == pending.id
        assert history[3].position == 2

    def test_building_filter(self, staff):
        make_earned(staff, email=MIA, building="OMS")
        make_earned(staff, email=MIA, building="OHS", period="Period 1")
        assert len(staff_history(staff, MIA, "OHS")) == 1


class TestUserContext:
    def test_teacher(self, staff):
        context = get_user_context(staff, MIA)
        assert context["role"] == "Teacher"
        assert context["building"] == "OHS"
        assert context["buildings"] == ["OHS", "OMS"]
        assert context["building_config"]["code"] == "OHS"
        assert context["is_super_admin"] is False

    def test_super_admin_sees_all_buildings(self, staff):
        context = get_user_context(staff, SUPER_ADMIN)
        assert context["all_buildings"] == ["OHS", "OIS", "OMS", "SES"]

    def test_unknown_is_guest(self, staff):
        context = get_user_context(staff, "who@x.org")
        assert context["role"] == "Guest"
        assert context["building"] == "OMS"
