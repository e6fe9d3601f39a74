import pytest
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from timebank.core.errors import ArchiveMismatch
from timebank.db.models import ArchiveRecords
from timebank.services.ledger.archive import (
    as_calendar_day,
    find_archive_match,
    locate_archive,
    same_calendar_day,
    same_period,
)
from timebank.services.ledger.state_machine import edit_earned

from conftest import ALICE, get_test_today, make_earned


def _legacy_record(db, email=ALICE, covered_on=None, period="3"):
    # rows imported before archive rows carried a request id
    record = ArchiveRecords(
        email=email,
        subbed_for="Smith",
        covered_on=covered_on or datetime(2025, 10, 15, 13, 45),
        period=period,
        hours=Decimal("1"),
    )
    db.add(record)
    db.commit()
    return record


class TestCalendarDay:
    def test_datetime_and_date(self):
        assert same_calendar_day(datetime(2025, 10, 15, 23, 59), date(2025, 10, 15))

    def test_iso_string_with_offset(self):
        assert as_calendar_day("2025-10-15T08:00:00-05:00") == date(2025, 10, 15)
        assert as_calendar_day("2025-10-15T08:00:00Z") == date(2025, 10, 15)

    def test_aware_datetime(self):
        assert same_calendar_day(datetime(2025, 10, 15, 6, tzinfo=timezone.utc), "2025-10-15")

    def test_missing_never_matches(self):
        assert same_calendar_day(None, None) is False


class TestSamePeriod:
    def test_number_and_string(self):
        assert same_period(3, "3")
        assert same_period(" Period 3 ", "Period 3")

    def test_different(self):
        assert not same_period("Period 3", "Period 4")


class TestFindArchiveMatch:
    def test_ignores_time_of_day(self, staff):
        record = _legacy_record(staff)
        assert find_archive_match(staff, ALICE, get_test_today(), 3).id == record.id

    def test_email_is_case_insensitive(self, staff):
        record = _legacy_record(staff)
        assert find_archive_match(staff, "ALICE@x.org", get_test_today(), "3").id == record.id

    def test_stored_email_case_is_ignored(self, staff):
        record = _legacy_record(staff, email="Alice@X.org")
        assert find_archive_match(staff, ALICE, get_test_today(), "3").id == record.id

    def test_newest_duplicate_wins(self, staff):
        _legacy_record(staff)
        newer = _legacy_record(staff)
        assert find_archive_match(staff, ALICE, get_test_today(), "3").id == newer.id

    def test_no_match(self, staff):
        _legacy_record(staff)
        with pytest.raises(ArchiveMismatch):
            find_archive_match(staff, ALICE, get_test_today() + timedelta(days=1), "3")


class TestLocateArchive:
    def test_follows_reference(self, staff):
        request = make_earned(staff)
        record = locate_archive(staff, request)
        assert record.earned_request_id == request.id

    def test_falls_back_to_key(self, staff):
        request = make_earned(staff, period="3")
        staff.query(ArchiveRecords).delete()
        legacy = _legacy_record(staff)
        assert locate_archive(staff, request).id == legacy.id

    def test_edit_round_trip(self, staff):
        request = make_earned(staff, period="Period 3")
        new_day = get_test_today() + timedelta(days=2)
        edit_earned(staff, request.id, {"date": new_day, "period": "Period 5"})

        record = find_archive_match(staff, ALICE, new_day, "Period 5")
        assert record.earned_request_id == request.id
        with pytest.raises(ArchiveMismatch):
            find_archive_match(staff, ALICE, get_test_today(), "Period 3")
