"""
Pydantic models for import status records.

ImportStatus is the persisted record, one per site. It is stored as a flat
JSON map with camelCase keys in the options table. ImportStatusView is the
enriched, read-only shape returned to operators.
"""

from datetime import date, datetime, timezone
from typing import List, NamedTuple, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from models.base import DimensionScope, ImportState


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SourceInfo(CamelModel):
    """Identifies the remote analytics data source"""
    account: str = ""
    property_id: str = Field("", alias="property")
    view: str = ""

    def pretty(self) -> str:
        return f"Property: {self.property_id}\nAccount: {self.account}\nView: {self.view}"


class CustomDimension(CamelModel):
    """Extra custom dimension requested when the import was started"""
    dimension: str
    dimension_scope: DimensionScope


ReimportRange = Tuple[date, date]


class ImportStatus(CamelModel):
    """
    Persisted status of one site's import job.

    Required fields are validated on load; a record missing any of them is
    reported as corrupt by the store.
    """
    site_id: int
    state: ImportState
    source_info: SourceInfo

    last_date_imported: Optional[date] = None
    import_start_time: datetime
    import_end_time: Optional[datetime] = None
    last_job_start_time: datetime
    last_day_archived: Optional[date] = None

    # Requested window, stored as "" when unset
    import_range_start: Optional[date] = None
    import_range_end: Optional[date] = None

    extra_custom_dimensions: List[CustomDimension] = Field(default_factory=list)
    days_finished_since_rate_limit: Optional[int] = None
    reimport_ranges: Optional[List[ReimportRange]] = None

    error_message: Optional[str] = None
    is_verbose_logging_enabled: Optional[bool] = None

    @field_validator(
        "last_date_imported",
        "import_end_time",
        "last_day_archived",
        "import_range_start",
        "import_range_end",
        mode="before",
    )
    @classmethod
    def empty_string_is_unset(cls, value):
        if value == "":
            return None
        return value

    @field_validator("import_start_time", "import_end_time", "last_job_start_time")
    @classmethod
    def naive_time_is_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_serializer("import_range_start", "import_range_end")
    def serialize_range_bound(self, value: Optional[date]) -> str:
        return value.isoformat() if value else ""

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class ImportedDateRange(NamedTuple):
    """Span actually imported so far, tracked apart from the requested range"""
    start: Optional[date] = None
    end: Optional[date] = None

    def to_option_value(self) -> str:
        return ",".join(d.isoformat() if d else "" for d in self)

    @classmethod
    def from_option_value(cls, value: Optional[str]) -> "ImportedDateRange":
        if not value:
            return cls()

        parts = value.split(",")
        if len(parts) != 2:
            raise ValueError(f"Malformed imported date range: {value!r}")

        start, end = (date.fromisoformat(p) if p else None for p in parts)
        return cls(start, end)


class SiteSummary(CamelModel):
    id: int
    name: str


# Estimate is an int number of days, "unknown", or None when too early to tell
Estimate = Optional[Union[int, str]]


class ImportStatusView(CamelModel):
    """Status record enriched for display. Never written back to storage."""
    site_id: int
    state: ImportState
    site: Optional[SiteSummary] = None
    source_info: SourceInfo
    source_info_pretty: str

    last_date_imported: Optional[date] = None
    import_start_time: Optional[str] = None
    import_end_time: Optional[str] = None
    last_job_start_time: Optional[str] = None
    last_day_archived: Optional[date] = None
    import_range_start: Optional[date] = None
    import_range_end: Optional[date] = None
    estimated_days_left_to_finish: Estimate = None

    extra_custom_dimensions: List[CustomDimension] = Field(default_factory=list)
    days_finished_since_rate_limit: Optional[int] = None
    reimport_ranges: List[ReimportRange] = Field(default_factory=list)
    error_message: Optional[str] = None
    is_verbose_logging_enabled: Optional[bool] = None
