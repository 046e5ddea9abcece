"""
Repository for import status records and imported date range markers
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Union
import logging

from pydantic import ValidationError

from core.exceptions import CorruptRecordError
from imports.option_store import OptionStore
from schemas.import_status import ImportedDateRange, ImportStatus

logger = logging.getLogger(__name__)

STATUS_OPTION_PREFIX = "ImportStatus.importStatus_"
IMPORTED_DATE_RANGE_PREFIX = "ImportStatus.importedDateRange_"


@dataclass(frozen=True)
class Found:
    status: ImportStatus


@dataclass(frozen=True)
class NotFound:
    site_id: int


StatusLookup = Union[Found, NotFound]


def parse_status(raw: str, site_id: Optional[int] = None) -> ImportStatus:
    """Deserialize a stored record, raising CorruptRecordError if it is invalid"""
    try:
        return ImportStatus.model_validate_json(raw)
    except ValidationError as e:
        raise CorruptRecordError(
            "Stored import status is invalid",
            context={
                "site_id": site_id,
                "field_errors": [
                    ".".join(str(part) for part in err["loc"]) for err in e.errors()
                ],
            },
            original_exception=e
        )


class ImportStatusStore:
    """
    One status record and one imported date range marker per site.

    The two are kept under separate keys and written by separate commits,
    so a crash while updating one leaves the other intact.
    """

    def __init__(self, options: OptionStore):
        self.options = options

    @staticmethod
    def status_key(site_id: int) -> str:
        return f"{STATUS_OPTION_PREFIX}{site_id}"

    @staticmethod
    def date_range_key(site_id: int) -> str:
        return f"{IMPORTED_DATE_RANGE_PREFIX}{site_id}"

    async def get(self, site_id: int) -> StatusLookup:
        # Status is polled by operators while a worker updates it
        raw = await self.options.get(self.status_key(site_id), bypass_cache=True)
        if not raw:
            return NotFound(site_id)
        return Found(parse_status(raw, site_id))

    async def save(self, status: ImportStatus):
        await self.options.set(self.status_key(status.site_id), status.to_json())

    async def delete(self, site_id: int):
        await self.options.delete(self.status_key(site_id))
        await self.options.delete(self.date_range_key(site_id))

    async def list_all(self) -> List[str]:
        """Raw stored records for every site"""
        return await self.options.list_by_prefix(STATUS_OPTION_PREFIX)

    async def get_imported_date_range(self, site_id: int) -> ImportedDateRange:
        raw = await self.options.get(self.date_range_key(site_id), bypass_cache=True)
        try:
            return ImportedDateRange.from_option_value(raw)
        except ValueError as e:
            raise CorruptRecordError(
                "Stored imported date range is invalid",
                context={"site_id": site_id, "value": raw},
                original_exception=e
            )

    async def set_imported_date_range(
        self,
        site_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None
    ) -> ImportedDateRange:
        """Update the given side(s) of the marker, leaving the other untouched"""
        current = await self.get_imported_date_range(site_id)

        updated = ImportedDateRange(
            start=start if start is not None else current.start,
            end=end if end is not None else current.end,
        )
        await self.options.set(self.date_range_key(site_id), updated.to_option_value())
        return updated
