"""
Pydantic schemas for data validation and serialization.

Schemas:
    import_status: Persisted ImportStatus record, its nested types, the
        imported date range marker and the enriched ImportStatusView
    api: API endpoint request/response schemas

Features:
    - Validation of stored records on load (corrupt records are rejected)
    - camelCase JSON keys for storage and API payloads
    - OpenAPI schema generation for FastAPI

Usage:
    from schemas.import_status import ImportStatus, SourceInfo
    from schemas.api import StartImportRequest, HealthCheckResponse

Example:
    status = ImportStatus.model_validate_json(raw)
    assert status.state == ImportState.ONGOING
    raw = status.to_json()
"""

__all__ = [
    "ImportStatus",
    "ImportStatusView",
    "ImportedDateRange",
    "SourceInfo",
    "CustomDimension",
    "StartImportRequest",
    "ChangeEndDateRequest",
    "DateRangeRequest",
    "HealthCheckResponse",
]
