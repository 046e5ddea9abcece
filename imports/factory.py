"""
Wiring of the status manager onto a database session
"""

from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from imports.liveness import LockLivenessProbe
from imports.locks import SqlLockBackend
from imports.log_files import ImportLogFiles
from imports.option_store import OptionStore
from imports.sites import SqlSiteRegistry
from imports.status_manager import ImportStatusManager
from imports.status_store import ImportStatusStore


def create_status_manager(db_session: AsyncSession) -> ImportStatusManager:
    """Build a manager whose store, locks and site lookups share one session"""
    return ImportStatusManager(
        store=ImportStatusStore(OptionStore(db_session)),
        liveness=LockLivenessProbe(SqlLockBackend(db_session)),
        sites=SqlSiteRegistry(db_session),
        log_files=ImportLogFiles(settings.IMPORT_LOG_DIR, settings.HOSTNAME),
    )
