import logging
from typing import List, Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.ext.asyncio import async_sessionmaker
from core.config import settings
from core.exceptions import ImportStatusException
from imports.factory import create_status_manager
from models.base import ImportState

logger = logging.getLogger(__name__)


class ImportWatchdog:
    """Periodically reports imports that claim to run but have no live worker"""

    def __init__(
        self,
        session_factory: Optional[async_sessionmaker] = None,
        interval_minutes: int = settings.WATCHDOG_INTERVAL_MINUTES
    ):
        if session_factory is None:
            from core.database import async_session_maker
            session_factory = async_session_maker

        self.scheduler = AsyncIOScheduler()
        self.SessionLocal = session_factory
        self.interval_minutes = interval_minutes

    async def check_imports(self) -> List[int]:
        """Job to detect killed imports. Returns their site ids."""
        logger.debug("Watchdog: checking import liveness")
        killed = []
        async with self.SessionLocal() as session:
            try:
                manager = create_status_manager(session)
                statuses = await manager.get_all_statuses(check_liveness=True)
            except ImportStatusException as e:
                logger.error(f"Watchdog: could not read import statuses - {e}")
                return killed

        for status in statuses:
            if status.state == ImportState.KILLED:
                killed.append(status.site_id)
                logger.warning(
                    f"Watchdog: import for site {status.site_id} looks killed "
                    f"(last job start {status.last_job_start_time}, "
                    f"last date imported {status.last_date_imported})"
                )
        return killed

    def start(self):
        """Start the scheduler"""
        self.scheduler.add_job(
            self.check_imports,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id="import_watchdog",
            replace_existing=True
        )
        self.scheduler.start()
        logger.info("Import watchdog started")

    def stop(self):
        self.scheduler.shutdown()
        logger.info("Import watchdog stopped")
