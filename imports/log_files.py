"""
Per-site import and archive log files written by import workers
"""

from pathlib import Path
from typing import List, Optional
import logging
import socket

logger = logging.getLogger(__name__)


class ImportLogFiles:
    """Locates and removes the log files a worker writes for a site on a host"""

    def __init__(self, log_dir: str, hostname: Optional[str] = None):
        self.log_dir = Path(log_dir)
        self.hostname = hostname or socket.gethostname()

    def import_log_file(self, site_id: int) -> Path:
        return self.log_dir / f"gaimportlog.{site_id}.{self.hostname}.log"

    def archive_log_file(self, site_id: int) -> Path:
        return self.log_dir / f"gaimportlog.archive.{site_id}.{self.hostname}.log"

    def remove(self, site_id: int) -> List[Path]:
        """Best-effort removal; returns the files actually deleted"""
        removed = []
        for path in (self.import_log_file(site_id), self.archive_log_file(site_id)):
            try:
                path.unlink()
                removed.append(path)
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.warning(f"Could not remove import log {path}: {e}")
        return removed
