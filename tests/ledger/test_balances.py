from decimal import Decimal

from timebank.services.ledger.balances import balance_for, compute_balances, staff_balances
from timebank.services.ledger.state_machine import (
    approve_earned,
    approve_used,
    delete_earned,
    deny_earned,
    revert_earned,
)

from conftest import ALICE, BEN, MIA, make_earned, make_used


class TestComputeBalances:
    def test_only_approved_rows_count(self, staff):
        db = staff
        approved = make_earned(db, hours="1")
        make_earned(db, period="Period 4", hours="0.5")  # stays pending
        denied = make_earned(db, period="Period 9", hours="1")
        approve_earned(db, approved.id)
        deny_earned(db, denied.id, reasons=["Duplicate"])

        used = make_used(db, amount="0.5")
        make_used(db, amount="3")  # pending
        approve_used(db, used.id)

        totals = compute_balances(db)[ALICE]
        assert totals.earned == Decimal("1")
        assert totals.used == Decimal("0.5")

    def test_balance_includes_carry_over(self, staff):
        db = staff
        approve_earned(db, make_earned(db, hours="1.5").id)
        approve_used(db, make_used(db, amount="1").id)

        balance = balance_for(db, ALICE)
        # carry-over 2 + 1.5 - 1
        assert balance.balance == Decimal("2.5")

    def test_building_filter(self, staff):
        db = staff
        approve_earned(db, make_earned(db, email=BEN, hours="1").id)
        approve_earned(db, make_earned(db, email=ALICE, hours="1").id)

        oms = compute_balances(db, "oms")
        assert ALICE in oms
        assert BEN not in oms


class TestBalanceInvariant:
    def test_state_changes_recompute_from_status(self, staff):
        db = staff
        first = make_earned(db, hours="1")
        second = make_earned(db, period="Period 4", hours="0.5")
        approve_earned(db, first.id)
        approve_earned(db, second.id)
        assert compute_balances(db)[ALICE].earned == Decimal("1.5")

        revert_earned(db, second.id)
        assert compute_balances(db)[ALICE].earned == Decimal("1")

        delete_earned(db, first.id)
        assert ALICE not in compute_balances(db)

    def test_staff_balances_lists_everyone_in_scope(self, staff):
        db = staff
        approve_earned(db, make_earned(db, email=MIA, hours="1", building="OMS").id)

        by_email = {b.email: b for b in staff_balances(db, "OHS")}
        assert set(by_email) == {"adminhs@x.org", BEN, MIA}
        # Mia's OMS coverage is not part of the OHS ledger
        assert by_email[MIA].earned == Decimal("0")
