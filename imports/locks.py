"""
Named locks with a time to live, backed by the locks table
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable
import logging
import uuid

from sqlalchemy import delete, insert, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.clock import utc_now
from core.exceptions import LockUnavailableError, StorageError
from models.lock import Lock

logger = logging.getLogger(__name__)

IMPORT_LOCK_PREFIX = "ImportReports.lock_"

# Workers refresh well within this window while a site is being imported
IMPORT_LOCK_TTL_SECONDS = 30 * 60


def import_lock_key(site_id: int) -> str:
    return f"{IMPORT_LOCK_PREFIX}{site_id}"


class SqlLockBackend:
    """
    Mutual exclusion keyed by arbitrary strings.

    A lock is held while its row exists and has not expired. Acquisition is
    an INSERT on the primary key, so at most one holder wins.
    """

    def __init__(self, db_session: AsyncSession, clock: Callable[[], datetime] = utc_now):
        self.db = db_session
        self.clock = clock
        self.token = uuid.uuid4().hex

    def _now_ts(self) -> int:
        return int(self.clock().timestamp())

    async def try_acquire(self, key: str, ttl_seconds: int) -> bool:
        now = self._now_ts()
        try:
            await self.db.execute(
                delete(Lock)
                .where(Lock.key == key, Lock.expiry_time <= now)
                .execution_options(synchronize_session=False)
            )
            await self.db.execute(
                insert(Lock).values(key=key, value=self.token, expiry_time=now + ttl_seconds)
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            return False
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(
                "Failed to acquire lock",
                context={"operation": "acquire", "key": key},
                original_exception=e
            )

        logger.debug(f"Acquired lock {key} for {ttl_seconds}s")
        return True

    async def extend(self, key: str, ttl_seconds: int) -> bool:
        """Push the expiry of a lock this backend holds; False if it is no longer ours"""
        try:
            result = await self.db.execute(
                update(Lock)
                .where(Lock.key == key, Lock.value == self.token)
                .values(expiry_time=self._now_ts() + ttl_seconds)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(
                "Failed to extend lock",
                context={"operation": "extend", "key": key},
                original_exception=e
            )
        return result.rowcount > 0

    async def release(self, key: str):
        try:
            await self.db.execute(
                delete(Lock)
                .where(Lock.key == key, Lock.value == self.token)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(
                "Failed to release lock",
                context={"operation": "release", "key": key},
                original_exception=e
            )
        logger.debug(f"Released lock {key}")


class ImportLock:
    """
    Site-scoped lock held by a worker for the whole time it imports a site.

    Usage:
        async with ImportLock(backend).hold(site_id):
            ...  # import days, calling refresh() periodically
    """

    def __init__(self, backend: SqlLockBackend, ttl_seconds: int = IMPORT_LOCK_TTL_SECONDS):
        self.backend = backend
        self.ttl_seconds = ttl_seconds

    async def acquire(self, site_id: int):
        key = import_lock_key(site_id)
        if not await self.backend.try_acquire(key, self.ttl_seconds):
            raise LockUnavailableError(
                "An import is already running for this site",
                context={"site_id": site_id, "key": key}
            )

    async def refresh(self, site_id: int) -> bool:
        return await self.backend.extend(import_lock_key(site_id), self.ttl_seconds)

    async def release(self, site_id: int):
        await self.backend.release(import_lock_key(site_id))

    @asynccontextmanager
    async def hold(self, site_id: int):
        await self.acquire(site_id)
        try:
            yield self
        finally:
            await self.release(site_id)
