import pytest
from datetime import date
from decimal import Decimal

from timebank.core.errors import ValidationFailure
from timebank.db.models import ArchiveRecords, EarnedRequests, EarnedStatus, UsedRequests
from timebank.schemas.earned_requests import EarnedRequestCreate
from timebank.schemas.submissions import AdminSubmission, QueuedSubmission
from timebank.schemas.used_requests import UsedRequestCreate
from timebank.services.ledger.submissions import (
    admin_submit_request,
    clean_subbed_for,
    process_submission_queue,
    record_earned,
    record_usage,
)

from conftest import ALICE, BEN, MIA, get_test_today, make_earned


class TestCleanSubbedFor:
    @pytest.mark.parametrize("raw, expected", [
        ("Mrs. Smith", "Smith"),
        ("mr. Jones", "Jones"),
        ("Dr.Who", "Who"),
        ("Miss Scarlet", "Scarlet"),
        ("Mister Rogers", "Mister Rogers"),
        (None, ""),
    ])
    def test_strips_honorifics(self, raw, expected):
        assert clean_subbed_for(raw) == expected


class TestRecordEarned:
    def test_fills_name_and_building_from_directory(self, staff):
        request = make_earned(staff, email="Alice@X.org ")
        assert request.email == ALICE
        assert request.name == "Alice Adams"
        assert request.building == "OMS"
        assert request.status == EarnedStatus.PENDING
        assert request.subbed_for == "Smith"

    def test_primary_building_for_multi_building_staff(self, staff):
        assert make_earned(staff, email=MIA).building == "OHS"

    def test_writes_archive_copy(self, staff):
        request = make_earned(staff)
        record = staff.query(ArchiveRecords).one()
        assert record.earned_request_id == request.id
        assert record.covered_on.date() == request.date

    def test_hours_default_from_period(self, staff):
        half = make_earned(staff, period="Period 6 - 11:40 - 12:06", hours=None, duration_type="Full Period")
        assert half.hours == Decimal("0.5")
        full = make_earned(staff, period="Period 6/7 - 11:40 - 12:34", hours=None, duration_type="Full Period")
        assert full.hours == Decimal("1")

    def test_unknown_requester_uses_default_building(self, staff):
        request = make_earned(staff, email="stranger@x.org")
        assert request.building == "OMS"
        assert request.name == "stranger@x.org"

    @pytest.mark.parametrize("payload", [
        {"email": "", "date": date(2025, 10, 15), "period": "Period 1"},
        {"email": ALICE, "date": None, "period": "Period 1"},
        {"email": ALICE, "date": date(2025, 10, 15), "period": "  "},
        {"email": ALICE, "date": date(2025, 10, 15), "period": "Period 1", "building": "XYZ"},
    ])
    def test_invalid_submission_writes_nothing(self, staff, payload):
        with pytest.raises(ValidationFailure):
            record_earned(staff, EarnedRequestCreate(**payload))
        assert staff.query(EarnedRequests).count() == 0
        assert staff.query(ArchiveRecords).count() == 0


class TestRecordUsage:
    def test_records_pending(self, staff):
        request = record_usage(staff, UsedRequestCreate(email=BEN, date=get_test_today(), amount=Decimal("2")))
        assert request.building == "OHS"
        assert request.name == "Ben Brooks"

    def test_amount_must_be_positive(self, staff):
        with pytest.raises(ValidationFailure):
            record_usage(staff, UsedRequestCreate(email=BEN, date=get_test_today(), amount=Decimal("0")))


class TestAdminSubmit:
    def _payload(self, user_type="Staff"):
        return AdminSubmission.model_validate({
            "earner": {"type": "Staff", "email": ALICE, "name": "Alice Adams"},
            "user": {"type": user_type, "email": BEN if user_type == "Staff" else None, "name": "Ben Brooks"},
            "details": {"date": "2025-10-15", "period": "Period 2", "amount_type": "Full Period", "amount": "1"},
        })

    def test_both_sides_recorded(self, staff):
        created = admin_submit_request(staff, self._payload())
        assert created["earned"].email == ALICE
        assert created["earned"].subbed_for == "Ben Brooks"
        assert created["used"].email == BEN
        assert created["used"].amount == Decimal("1")

    def test_outside_cover_has_no_usage(self, staff):
        created = admin_submit_request(staff, self._payload(user_type="Other"))
        assert created["used"] is None
        assert staff.query(UsedRequests).count() == 0
        assert staff.query(ArchiveRecords).one().other_flag == "Other"

    def test_rejected_usage_side_writes_nothing(self, staff):
        payload = AdminSubmission.model_validate({
            "earner": {"type": "Staff", "email": ALICE, "name": "Alice Adams"},
            "user": {"type": "Staff", "email": BEN, "name": "Ben Brooks"},
            "details": {"date": "2025-10-15", "period": "Period 2", "amount_type": "Full Period"},
        })
        with pytest.raises(ValidationFailure):
            admin_submit_request(staff, payload)
        assert staff.query(EarnedRequests).count() == 0
        assert staff.query(ArchiveRecords).count() == 0
        assert staff.query(UsedRequests).count() == 0


class TestSubmissionQueue:
    def test_bad_items_are_skipped(self, staff):
        items = [
            QueuedSubmission(type="earned", payload={"email": ALICE, "date": "2025-10-15", "period": "Period 1"}),
            QueuedSubmission(type="used", payload={"email": ALICE, "date": "2025-10-16", "amount": "1"}),
            QueuedSubmission(type="earned", payload={"email": ALICE, "period": "Period 2"}),
            QueuedSubmission(type="bogus", payload={}),
        ]
        result = process_submission_queue(staff, items)
        assert result.succeeded == 2
        assert sorted(result.errors) == [2, 3]
