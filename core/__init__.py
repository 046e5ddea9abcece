"""
Core utilities and configuration for the import status service.

This package provides foundational components used by the status manager,
the API and the scheduled watchdog:

Modules:
    config: Application configuration and environment variable management
    database: Database connection and session management
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration and utilities
    clock: Timezone-aware current time

Usage:
    from core.config import settings
    from core.database import async_session_maker
    from core.clock import utc_now
    from core.exceptions import NotFoundError, ConflictError
    from core.logging import setup_logging

Example:
    # Initialize logging
    setup_logging()

    # Get database session
    async with async_session_maker() as session:
        # Perform database operations
        pass
"""

__all__ = [
    "settings",
    "async_session_maker",
    "utc_now",
    "setup_logging",
    # Exceptions
    "ImportStatusException",
    "NotFoundError",
    "ConflictError",
    "InvalidRangeError",
    "AlreadyFinishedError",
    "CorruptRecordError",
    "StorageError",
    "LockUnavailableError",
    "ConfigurationError",
]
