import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch
from core.exceptions import StorageError
from imports.watchdog import ImportWatchdog
from models.base import ImportState
from schemas.import_status import ImportStatus


def make_status(site_id, source_info, state, started_ago):
    started = datetime.now(timezone.utc) - started_ago
    return ImportStatus(
        site_id=site_id,
        state=state,
        source_info=source_info,
        import_start_time=started,
        last_job_start_time=started,
    )


def test_watchdog_initialization(session_factory):
    watchdog = ImportWatchdog(session_factory=session_factory, interval_minutes=5)

    assert watchdog.scheduler is not None
    assert watchdog.SessionLocal is session_factory
    assert watchdog.interval_minutes == 5


def test_watchdog_start_registers_job(session_factory):
    watchdog = ImportWatchdog(session_factory=session_factory)
    watchdog.scheduler = MagicMock()

    watchdog.start()

    kwargs = watchdog.scheduler.add_job.call_args.kwargs
    assert kwargs["id"] == "import_watchdog"
    assert watchdog.scheduler.start.called

    watchdog.stop()
    assert watchdog.scheduler.shutdown.called


@pytest.mark.asyncio
async def test_check_imports_reports_killed(session_factory, status_store, source_info):
    await status_store.save(make_status(1, source_info, ImportState.ONGOING, timedelta(hours=1)))
    await status_store.save(make_status(2, source_info, ImportState.ONGOING, timedelta(seconds=30)))
    await status_store.save(make_status(3, source_info, ImportState.FINISHED, timedelta(hours=1)))

    watchdog = ImportWatchdog(session_factory=session_factory)
    killed = await watchdog.check_imports()

    assert killed == [1]


@pytest.mark.asyncio
async def test_check_imports_survives_storage_errors(session_factory):
    with patch("imports.watchdog.create_status_manager") as mock_factory:
        mock_factory.return_value.get_all_statuses.side_effect = StorageError("db down")

        watchdog = ImportWatchdog(session_factory=session_factory)
        killed = await watchdog.check_imports()

    assert killed == []
