"""
SQLAlchemy ORM models for database tables.

This package defines the database schema used by the import status service:

Models:
    base: Base declarative class and shared enums (ImportState, DimensionScope)
    option: Generic key/value option storage (status records, range markers)
    lock: Named locks with a time to live (worker liveness)
    site: Import target registry

Usage:
    from models import Option, Lock, Site
    from models.base import ImportState

Note:
    Status records are not mapped to columns. They live as JSON strings in
    the options table and are validated by schemas.import_status.ImportStatus.
"""

from models.base import Base, ImportState, DimensionScope
from models.option import Option
from models.lock import Lock
from models.site import Site

__all__ = [
    "Base",
    "ImportState",
    "DimensionScope",
    "Option",
    "Lock",
    "Site",
]
