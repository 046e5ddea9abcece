"""
Pydantic schemas for API request/response models
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict
from datetime import date, datetime, timezone
from schemas.import_status import CamelModel, CustomDimension, SourceInfo


# ============================================================================
# Import Action Schemas
# ============================================================================

class StartImportRequest(CamelModel):
    """Body of POST /imports"""
    site_id: int = Field(..., ge=1)
    source_info: SourceInfo
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    extra_custom_dimensions: List[CustomDimension] = Field(default_factory=list)
    is_verbose_logging_enabled: bool = False

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "siteId": 3,
            "sourceInfo": {"account": "1234", "property": "UA-1234-1", "view": "5678"},
            "startDate": "2024-01-01",
            "endDate": "2024-06-30",
            "extraCustomDimensions": [
                {"dimension": "ga:userType", "dimensionScope": "visit"}
            ],
            "isVerboseLoggingEnabled": False
        }
    })


class ChangeEndDateRequest(CamelModel):
    """Body of PUT /imports/{site_id}/end-date. Null clears the end date."""
    end_date: Optional[date] = None


class DateRangeRequest(CamelModel):
    """Body of POST /imports/{site_id}/reimports"""
    start_date: date
    end_date: date


class OperationResult(BaseModel):
    result: str = "ok"


class ErrorResponse(BaseModel):
    error: str
    message: str


# ============================================================================
# Health Check Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field(..., description="Overall system status: healthy, degraded, unhealthy")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    database_connected: bool
    total_imports: int = 0
    imports_by_state: Dict[str, int] = Field(default_factory=dict)

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "timestamp": "2024-01-15T10:30:00Z",
                "database_connected": True,
                "total_imports": 3,
                "imports_by_state": {"ongoing": 2, "finished": 1}
            }
        }
