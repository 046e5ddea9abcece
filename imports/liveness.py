"""
Detection of whether a job claiming to run still has a live worker
"""

from abc import ABC, abstractmethod
import logging

from imports.locks import SqlLockBackend, import_lock_key

logger = logging.getLogger(__name__)

PROBE_LOCK_TTL_SECONDS = 3


class LivenessProbe(ABC):
    """Failure detector for import workers"""

    @abstractmethod
    async def is_alive(self, site_id: int) -> bool:
        pass


class LockLivenessProbe(LivenessProbe):
    """
    Infers liveness from the site's import lock.

    If the lock can be taken, no worker holds it: release it right away and
    report not alive. If it cannot, a worker holds it. This is a heuristic,
    not a proof, and is only used to tell killed jobs apart on read.
    """

    def __init__(self, backend: SqlLockBackend, ttl_seconds: int = PROBE_LOCK_TTL_SECONDS):
        self.backend = backend
        self.ttl_seconds = ttl_seconds

    async def is_alive(self, site_id: int) -> bool:
        key = import_lock_key(site_id)
        if await self.backend.try_acquire(key, self.ttl_seconds):
            await self.backend.release(key)
            return False
        return True
