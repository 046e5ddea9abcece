"""
Custom exceptions for import status tracking with structured error context.

Every error raised by the status manager, its store, or the lock helpers
derives from ImportStatusException so callers (API routes, workers, the
watchdog) can surface the error kind and message verbatim to an operator.

Exception Hierarchy:
    ImportStatusException (base)
    ├── NotFoundError          no status record for the site
    ├── ConflictError          a job is already active for the site
    ├── InvalidRangeError      start date after end date
    ├── AlreadyFinishedError   resume requested on a finished job
    ├── CorruptRecordError     stored record cannot be deserialized
    ├── StorageError           key/value or lock table access failed
    ├── LockUnavailableError   a worker could not take the site lock
    └── ConfigurationError     a setting holds an unusable value
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class ImportStatusException(Exception):
    """
    Base exception for all import status errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (site id, dates, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": {k: str(v) for k, v in self.context.items()},
            "timestamp": self.timestamp.isoformat(),
        }


class NotFoundError(ImportStatusException):
    """
    No status record exists for the site.

    Expected and recoverable: callers treat it as "no active job".
    """
    pass


class ConflictError(ImportStatusException):
    """A new import was requested while an unfinished one exists."""
    pass


class InvalidRangeError(ImportStatusException):
    """
    A date range has its start after its end.

    Context should include:
        - start_date
        - end_date
    """
    pass


class AlreadyFinishedError(ImportStatusException):
    """Resume was requested for an import that already finished."""
    pass


class CorruptRecordError(ImportStatusException):
    """
    A stored record is missing required fields or holds unparseable values.

    Context should include:
        - site_id
        - field_errors: validation errors reported by the schema
    """
    pass


class StorageError(ImportStatusException):
    """
    Reading or writing the option/lock tables failed.

    Context should include:
        - operation: get, set, delete, list
        - key: option name or lock key
    """
    pass


class LockUnavailableError(ImportStatusException):
    """Another worker already holds the site's import lock."""
    pass


class ConfigurationError(ImportStatusException):
    """
    A setting holds a value the service cannot use.

    Context should include:
        - setting: name of the setting
        - value: the configured value
    """
    pass
