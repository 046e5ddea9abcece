"""
Import Status Manager - lifecycle of per-site import jobs.

Every write is a read-modify-write of the whole record through the store.
Nothing here locks: concurrent writers for the same site race and the last
write wins. Workers are expected to hold the site's ImportLock while they
report progress, which is also what the liveness probe looks at.

State machine:
    started -> ongoing -> finished
    ongoing <-> rate_limited
    started | ongoing -> errored
    killed is derived on read and never stored
"""

from datetime import date, datetime, timedelta
from typing import Callable, Iterable, List, Optional, Tuple
import logging

from core.clock import utc_now
from core.exceptions import (
    AlreadyFinishedError,
    ConflictError,
    CorruptRecordError,
    InvalidRangeError,
    NotFoundError,
)
from imports.liveness import LivenessProbe
from imports.log_files import ImportLogFiles
from imports.progress import estimate_days_left_to_finish
from imports.sites import SiteRegistry
from imports.status_store import Found, ImportStatusStore, StatusLookup, parse_status
from models.base import ImportState
from schemas.import_status import (
    CustomDimension,
    ImportedDateRange,
    ImportStatus,
    ImportStatusView,
    SiteSummary,
    SourceInfo,
)

logger = logging.getLogger(__name__)

# A running job whose worker vanished is only reported killed after this long
KILLED_AFTER_SECONDS = 300

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

RUNNING_STATES = (ImportState.STARTED, ImportState.ONGOING)


class ImportStatusManager:
    """
    Sole mutation and query surface for import job status.

    Responsibilities:
    - Enforce the job state machine
    - Track monotonic progress and the imported date range marker
    - Queue and dequeue re-import ranges
    - Enrich statuses for display (site, ETA, killed detection)
    """

    def __init__(
        self,
        store: ImportStatusStore,
        liveness: LivenessProbe,
        sites: SiteRegistry,
        log_files: Optional[ImportLogFiles] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.liveness = liveness
        self.sites = sites
        self.log_files = log_files
        self.clock = clock

    # --------------------------------------------------
    # Reads
    # --------------------------------------------------

    async def find_import_status(self, site_id: int) -> StatusLookup:
        """Found(status) or NotFound(site_id), without raising for a missing job"""
        return await self.store.get(site_id)

    async def get_import_status(self, site_id: int) -> ImportStatus:
        lookup = await self.store.get(site_id)
        if not isinstance(lookup, Found):
            raise NotFoundError("Import was cancelled.", context={"site_id": site_id})
        return lookup.status

    async def get_imported_date_range(self, site_id: int) -> ImportedDateRange:
        return await self.store.get_imported_date_range(site_id)

    # --------------------------------------------------
    # Worker-side transitions
    # --------------------------------------------------

    async def starting_import(
        self,
        source: SourceInfo,
        site_id: int,
        extra_custom_dimensions: Iterable[CustomDimension] = (),
    ) -> ImportStatus:
        lookup = await self.store.get(site_id)
        if isinstance(lookup, Found) and lookup.status.state != ImportState.FINISHED:
            raise ConflictError(
                f"An import is already in progress for site {site_id}, cancel the existing import first.",
                context={"site_id": site_id, "state": lookup.status.state.value}
            )

        now = self.clock()
        status = ImportStatus(
            site_id=site_id,
            state=ImportState.STARTED,
            source_info=source,
            import_start_time=now,
            last_job_start_time=now,
            extra_custom_dimensions=list(extra_custom_dimensions),
            days_finished_since_rate_limit=0,
            reimport_ranges=[],
        )
        await self.store.save(status)

        logger.debug(f"Import started for site {site_id} (property: {source.property_id})")
        return status

    async def day_import_finished(self, site_id: int, day: date):
        status = await self.get_import_status(site_id)
        status.state = ImportState.ONGOING

        # Days may complete out of order; progress never moves backwards
        if status.last_date_imported is None or not status.last_date_imported > day:
            status.last_date_imported = day
            await self.store.set_imported_date_range(site_id, end=day)

        if isinstance(status.days_finished_since_rate_limit, int):
            status.days_finished_since_rate_limit += 1

        await self.store.save(status)

    async def import_archive_finished(self, site_id: int, day: date):
        status = await self.get_import_status(site_id)
        status.last_day_archived = day
        await self.store.save(status)

    async def finished_import(self, site_id: int):
        status = await self.get_import_status(site_id)
        status.state = ImportState.FINISHED
        status.import_end_time = self.clock()
        await self.store.save(status)

        logger.debug(f"Import finished for site {site_id}")

    async def errored_import(self, site_id: int, message: str):
        status = await self.get_import_status(site_id)
        status.state = ImportState.ERRORED
        status.error_message = message
        await self.store.save(status)

        logger.debug(f"Import errored for site {site_id}: {message}")

    async def rate_limit_reached(self, site_id: int):
        status = await self.get_import_status(site_id)
        status.state = ImportState.RATE_LIMITED
        await self.store.save(status)

        logger.debug(
            f"Import rate limited for site {site_id} after "
            f"{status.days_finished_since_rate_limit} days"
        )

    # --------------------------------------------------
    # Operator-side transitions
    # --------------------------------------------------

    async def set_import_date_range(
        self,
        site_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ):
        if start is not None and end is not None and start > end:
            raise InvalidRangeError(
                "The start date cannot be past the end date.",
                context={"site_id": site_id, "start_date": start, "end_date": end}
            )

        status = await self.get_import_status(site_id)
        status.import_range_start = start
        status.import_range_end = end

        # A new range means there may be more work to do
        if status.state == ImportState.FINISHED:
            status.state = ImportState.ONGOING

        await self.store.save(status)

        if start is not None:
            await self.store.set_imported_date_range(site_id, start=start)

    async def set_is_verbose_logging_enabled(self, site_id: int, enabled: bool):
        status = await self.get_import_status(site_id)
        status.is_verbose_logging_enabled = enabled
        await self.store.save(status)

    async def resume_import(self, site_id: int):
        status = await self.get_import_status(site_id)
        if status.state == ImportState.FINISHED:
            raise AlreadyFinishedError(
                "This import cannot be resumed since it is finished.",
                context={"site_id": site_id}
            )
        await self._resume(status)

    async def _resume(self, status: ImportStatus):
        status.state = ImportState.ONGOING
        status.last_job_start_time = self.clock()
        status.days_finished_since_rate_limit = 0
        await self.store.save(status)

        logger.debug(f"Import resumed for site {status.site_id}")

    async def re_import_date_range(self, site_id: int, start: date, end: date):
        if end < start:
            raise InvalidRangeError(
                "The end date of a re-import cannot be before its start date.",
                context={"site_id": site_id, "start_date": start, "end_date": end}
            )

        status = await self.get_import_status(site_id)
        if status.reimport_ranges is None:
            status.reimport_ranges = []
        status.reimport_ranges.append((start, end))
        await self.store.save(status)

    async def schedule_reimport(self, site_id: int, start: date, end: date):
        """Queue a re-import range and restart the job, reopening it if finished"""
        await self.re_import_date_range(site_id, start, end)
        await self._resume(await self.get_import_status(site_id))

    async def remove_re_import_entry(self, site_id: int, entry: Tuple[date, date]):
        status = await self.get_import_status(site_id)
        if status.reimport_ranges is None:
            status.reimport_ranges = []
            await self.store.save(status)
            return

        if not status.reimport_ranges:
            return

        target = tuple(entry)
        status.reimport_ranges = [r for r in status.reimport_ranges if tuple(r) != target]
        await self.store.save(status)

    async def delete_status(self, site_id: int):
        await self.store.delete(site_id)

        if self.log_files is not None:
            removed = self.log_files.remove(site_id)
            if removed:
                logger.debug(f"Removed import logs for site {site_id}: {removed}")

        logger.debug(f"Import status deleted for site {site_id}")

    # --------------------------------------------------
    # Enrichment
    # --------------------------------------------------

    async def get_all_statuses(self, check_liveness: bool = False) -> List[ImportStatusView]:
        """
        Every stored status, enriched for display.

        Args:
            check_liveness: report started/ongoing jobs with no live worker as killed

        Returns:
            Views ordered by site id. Records that cannot be parsed are skipped.
        """
        views = []
        for raw in await self.store.list_all():
            try:
                status = parse_status(raw)
            except CorruptRecordError as e:
                logger.warning(f"Skipping corrupt import status: {e}")
                continue
            views.append(await self._enrich(status, check_liveness))

        return sorted(views, key=lambda v: v.site_id)

    async def _enrich(self, status: ImportStatus, check_liveness: bool) -> ImportStatusView:
        now = self.clock()
        site = await self.sites.get_site(status.site_id)

        view = ImportStatusView(
            site_id=status.site_id,
            state=status.state,
            site=SiteSummary(id=site.id, name=site.name) if site else None,
            source_info=status.source_info,
            source_info_pretty=status.source_info.pretty(),
            last_date_imported=status.last_date_imported,
            import_start_time=_format_datetime(status.import_start_time),
            import_end_time=_format_datetime(status.import_end_time),
            last_job_start_time=_format_datetime(status.last_job_start_time),
            last_day_archived=status.last_day_archived,
            import_range_start=status.import_range_start,
            import_range_end=status.import_range_end,
            extra_custom_dimensions=status.extra_custom_dimensions,
            days_finished_since_rate_limit=status.days_finished_since_rate_limit,
            reimport_ranges=status.reimport_ranges or [],
            error_message=status.error_message,
            is_verbose_logging_enabled=status.is_verbose_logging_enabled,
        )

        if status.import_range_end is not None:
            view.estimated_days_left_to_finish = estimate_days_left_to_finish(
                status, now, site.created_on if site else None
            )

        if check_liveness and await self._is_killed(status, now):
            view.state = ImportState.KILLED

        return view

    async def _is_killed(self, status: ImportStatus, now: datetime) -> bool:
        if status.state not in RUNNING_STATES:
            return False

        # Give a freshly (re)started worker time to take its lock
        if status.last_job_start_time >= now - timedelta(seconds=KILLED_AFTER_SECONDS):
            return False

        return not await self.liveness.is_alive(status.site_id)


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.strftime(DATETIME_FORMAT)
