import pytest
from datetime import date, datetime, timedelta, timezone
from imports.progress import UNKNOWN, estimate_days_left_to_finish
from models.base import ImportState
from schemas.import_status import ImportStatus, SourceInfo

NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


def make_status(**overrides):
    fields = dict(
        site_id=1,
        state=ImportState.ONGOING,
        source_info=SourceInfo(account="1", property="UA-1-1", view="1"),
        import_start_time=NOW - timedelta(days=10),
        last_job_start_time=NOW - timedelta(days=10),
        import_range_start=TODAY - timedelta(days=10),
        last_date_imported=TODAY - timedelta(days=5),
        import_range_end=TODAY,
    )
    fields.update(overrides)
    return ImportStatus(**fields)


def test_estimate_from_import_rate():
    # 5 days imported in 10 days running, 5 days left in range
    assert estimate_days_left_to_finish(make_status(), NOW) == 10


def test_estimate_rounds_up():
    status = make_status(import_range_end=TODAY + timedelta(days=1))
    # 6 days left at 0.5 days/day
    assert estimate_days_left_to_finish(status, NOW) == 12

    status = make_status(
        import_start_time=NOW - timedelta(days=4),
        import_range_end=TODAY + timedelta(days=1),
    )
    # 6 days left at 1.25 days/day
    assert estimate_days_left_to_finish(status, NOW) == 5


def test_estimate_is_never_negative():
    status = make_status(last_date_imported=TODAY + timedelta(days=2))
    assert estimate_days_left_to_finish(status, NOW) == 0


def test_unknown_without_last_date_imported():
    status = make_status(last_date_imported=None)
    assert estimate_days_left_to_finish(status, NOW) == UNKNOWN


def test_unknown_without_range_end():
    status = make_status(import_range_end=None)
    assert estimate_days_left_to_finish(status, NOW) == UNKNOWN


def test_unknown_when_nothing_imported_yet():
    status = make_status(last_date_imported=TODAY - timedelta(days=10))
    assert estimate_days_left_to_finish(status, NOW) == UNKNOWN


def test_unknown_when_progress_is_before_range_start():
    status = make_status(last_date_imported=TODAY - timedelta(days=12))
    assert estimate_days_left_to_finish(status, NOW) == UNKNOWN


def test_no_estimate_during_first_day():
    status = make_status(import_start_time=NOW - timedelta(hours=23, minutes=59))
    assert estimate_days_left_to_finish(status, NOW) is None


def test_falls_back_to_site_creation_date():
    status = make_status(import_range_start=None)
    site_created_on = TODAY - timedelta(days=10)

    assert estimate_days_left_to_finish(status, NOW, site_created_on) == 10


def test_unknown_without_any_range_start():
    status = make_status(import_range_start=None)
    assert estimate_days_left_to_finish(status, NOW) == UNKNOWN


def test_arithmetic_failures_are_absorbed():
    # Naive 'now' against an aware start time raises TypeError internally
    naive_now = NOW.replace(tzinfo=None)
    assert estimate_days_left_to_finish(make_status(), naive_now) == UNKNOWN


@pytest.mark.parametrize("days_running, expected", [
    (1, 1),
    (5, 5),
    (20, 20),
])
def test_estimate_scales_with_elapsed_time(days_running, expected):
    status = make_status(import_start_time=NOW - timedelta(days=days_running))
    assert estimate_days_left_to_finish(status, NOW) == expected
