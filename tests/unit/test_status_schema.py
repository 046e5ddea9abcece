import json
import pytest
from datetime import date, datetime, timezone
from core.exceptions import CorruptRecordError
from imports.status_store import parse_status
from models.base import ImportState
from schemas.import_status import ImportedDateRange, ImportStatus, SourceInfo


STORED_RECORD = {
    "siteId": 3,
    "state": "ongoing",
    "sourceInfo": {"account": "1234", "property": "UA-1234-1", "view": "5678"},
    "lastDateImported": "2024-01-05",
    "importStartTime": "2024-01-01T08:00:00",
    "importEndTime": None,
    "lastJobStartTime": "2024-01-04T08:00:00+00:00",
    "lastDayArchived": None,
    "importRangeStart": "",
    "importRangeEnd": "2024-06-30",
    "extraCustomDimensions": [{"dimension": "ga:userType", "dimensionScope": "visit"}],
    "daysFinishedSinceRateLimit": 4,
    "reimportRanges": [["2023-12-01", "2023-12-03"]],
}


class TestImportStatusRecord:

    def test_parse_stored_record(self):
        status = parse_status(json.dumps(STORED_RECORD))

        assert status.site_id == 3
        assert status.state == ImportState.ONGOING
        assert status.source_info.property_id == "UA-1234-1"
        assert status.last_date_imported == date(2024, 1, 5)
        assert status.import_range_start is None
        assert status.import_range_end == date(2024, 6, 30)
        assert status.reimport_ranges == [(date(2023, 12, 1), date(2023, 12, 3))]
        assert status.extra_custom_dimensions[0].dimension == "ga:userType"

    def test_naive_times_are_read_as_utc(self):
        status = parse_status(json.dumps(STORED_RECORD))

        assert status.import_start_time == datetime(2024, 1, 1, 8, tzinfo=timezone.utc)

    def test_optional_fields_may_be_absent(self):
        record = {k: STORED_RECORD[k] for k in
                  ("siteId", "state", "sourceInfo", "importStartTime", "lastJobStartTime")}

        status = parse_status(json.dumps(record))

        assert status.days_finished_since_rate_limit is None
        assert status.reimport_ranges is None
        assert status.extra_custom_dimensions == []

    def test_missing_required_field_is_corrupt(self):
        record = dict(STORED_RECORD)
        del record["state"]

        with pytest.raises(CorruptRecordError) as exc_info:
            parse_status(json.dumps(record), site_id=3)

        assert exc_info.value.context["site_id"] == 3
        assert "state" in exc_info.value.context["field_errors"]

    def test_unknown_state_is_corrupt(self):
        record = dict(STORED_RECORD, state="paused")

        with pytest.raises(CorruptRecordError):
            parse_status(json.dumps(record))

    def test_invalid_json_is_corrupt(self):
        with pytest.raises(CorruptRecordError):
            parse_status("{not json")

    def test_serializes_unset_range_as_empty_string(self):
        status = ImportStatus(
            site_id=1,
            state=ImportState.STARTED,
            source_info=SourceInfo(account="1", property="UA-1-1", view="2"),
            import_start_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
            last_job_start_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

        data = json.loads(status.to_json())

        assert data["importRangeStart"] == ""
        assert data["importRangeEnd"] == ""
        assert data["sourceInfo"]["property"] == "UA-1-1"

    def test_source_info_pretty(self):
        source = SourceInfo(account="1234", property="UA-1234-1", view="5678")

        assert source.pretty() == "Property: UA-1234-1\nAccount: 1234\nView: 5678"


class TestImportedDateRange:

    def test_empty_value(self):
        assert ImportedDateRange.from_option_value(None) == ImportedDateRange(None, None)
        assert ImportedDateRange.from_option_value("") == ImportedDateRange(None, None)

    def test_parse_half_open_marker(self):
        marker = ImportedDateRange.from_option_value(",2024-01-05")

        assert marker.start is None
        assert marker.end == date(2024, 1, 5)

    def test_option_value(self):
        marker = ImportedDateRange(date(2024, 1, 1), None)

        assert marker.to_option_value() == "2024-01-01,"

    @pytest.mark.parametrize("value", ["2024-01-01", "a,b,c", "2024-13-01,"])
    def test_malformed_marker(self, value):
        with pytest.raises(ValueError):
            ImportedDateRange.from_option_value(value)
