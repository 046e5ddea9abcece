"""
Status tracking and liveness supervision for per-site bulk import jobs.

Modules:
    option_store: String key/value storage over the options table
    status_store: Status record and imported date range repository
    locks: Named TTL locks and the worker-side ImportLock
    liveness: Lock-based detection of vanished import workers
    progress: Days-left estimate from import progress
    status_manager: The import job state machine and read enrichment
    sites: Import target lookup
    log_files: Per-site worker log files
    end_date: Configured maximum import end date
    factory: Wiring of the manager onto a database session
    watchdog: APScheduler job reporting killed imports

Example:
    manager = create_status_manager(session)

    await manager.starting_import(SourceInfo(property="UA-1-1"), site_id=1)
    await manager.day_import_finished(1, date(2024, 1, 1))

    for status in await manager.get_all_statuses(check_liveness=True):
        print(status.site_id, status.state, status.estimated_days_left_to_finish)

Workers hold the site lock for the whole run so the liveness probe can
tell a live import from a killed one:

    async with ImportLock(SqlLockBackend(session)).hold(site_id):
        ...
"""

__all__ = [
    "OptionStore",
    "ImportStatusStore",
    "SqlLockBackend",
    "ImportLock",
    "LivenessProbe",
    "LockLivenessProbe",
    "estimate_days_left_to_finish",
    "ImportStatusManager",
    "SqlSiteRegistry",
    "ImportLogFiles",
    "create_status_manager",
    "ImportWatchdog",
]
