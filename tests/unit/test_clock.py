from datetime import timedelta, timezone
from unittest.mock import MagicMock
from core.clock import utc_now
from imports.locks import SqlLockBackend
from imports.status_manager import ImportStatusManager


def test_utc_now_is_timezone_aware():
    now = utc_now()

    assert now.tzinfo is not None
    assert now.utcoffset() == timedelta(0)
    assert now.tzinfo == timezone.utc


def test_components_default_to_utc_clock():
    manager = ImportStatusManager(store=MagicMock(), liveness=MagicMock(), sites=MagicMock())

    assert manager.clock is utc_now
    assert SqlLockBackend(MagicMock()).clock is utc_now
