"""
Admin actions on import jobs: start, change end date, resume, re-import, delete
"""

from datetime import date
from typing import List
from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from api.dependencies import get_status_manager, require_api_key
from core.config import settings
from core.exceptions import ImportStatusException
from imports.end_date import limit_max_end_date
from imports.status_manager import ImportStatusManager
from imports.status_store import NotFound
from schemas.api import (
    ChangeEndDateRequest,
    DateRangeRequest,
    ErrorResponse,
    OperationResult,
    StartImportRequest,
)
from schemas.import_status import ImportStatus, ImportStatusView
import logging

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/imports",
    tags=["Imports"],
    dependencies=[Depends(require_api_key)]
)


def _limit_end_date(manager: ImportStatusManager, end_date):
    return limit_max_end_date(end_date, settings.IMPORT_MAX_END_DATE, manager.clock().date())


@router.get("", response_model=List[ImportStatusView])
async def list_imports(manager: ImportStatusManager = Depends(get_status_manager)):
    """All import statuses, with jobs that lost their worker reported as killed"""
    return await manager.get_all_statuses(check_liveness=True)


@router.get(
    "/{site_id}",
    response_model=ImportStatus,
    responses={404: {"model": ErrorResponse}}
)
async def get_import(site_id: int, manager: ImportStatusManager = Depends(get_status_manager)):
    lookup = await manager.find_import_status(site_id)
    if isinstance(lookup, NotFound):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=ErrorResponse(
                error="NotFoundError",
                message=f"No import for site {site_id}"
            ).model_dump()
        )
    return lookup.status


@router.post("", response_model=ImportStatus, status_code=status.HTTP_201_CREATED)
async def start_import(
    request: Request,
    body: StartImportRequest,
    manager: ImportStatusManager = Depends(get_status_manager)
):
    """
    Create the status record for a new import.

    The workers pick the job up on their next run. If the requested range
    or options cannot be applied the job is marked errored and the error is
    returned.
    """
    request_id = getattr(request.state, "request_id", "-")
    logger.info(f"[{request_id}] POST /imports - site_id={body.site_id}")

    # No record is created when the end date cannot be resolved
    end_date = _limit_end_date(manager, body.end_date)

    await manager.starting_import(
        body.source_info,
        body.site_id,
        body.extra_custom_dimensions
    )

    try:
        if body.start_date is not None or end_date is not None:
            await manager.set_import_date_range(body.site_id, body.start_date, end_date)

        if body.is_verbose_logging_enabled:
            await manager.set_is_verbose_logging_enabled(body.site_id, True)
    except ImportStatusException as e:
        await manager.errored_import(body.site_id, e.message)
        raise
    except Exception as e:
        await manager.errored_import(body.site_id, str(e))
        raise

    return await manager.get_import_status(body.site_id)


@router.put("/{site_id}/end-date", response_model=OperationResult)
async def change_import_end_date(
    site_id: int,
    body: ChangeEndDateRequest,
    manager: ImportStatusManager = Depends(get_status_manager)
):
    """Change the requested end date, keeping the start date"""
    current = await manager.get_import_status(site_id)
    await manager.set_import_date_range(
        site_id,
        current.import_range_start,
        _limit_end_date(manager, body.end_date)
    )
    return OperationResult()


@router.post("/{site_id}/resume", response_model=OperationResult)
async def resume_import(site_id: int, manager: ImportStatusManager = Depends(get_status_manager)):
    await manager.resume_import(site_id)
    return OperationResult()


@router.post("/{site_id}/reimports", response_model=OperationResult)
async def schedule_reimport(
    site_id: int,
    body: DateRangeRequest,
    manager: ImportStatusManager = Depends(get_status_manager)
):
    """Queue a date range for re-import and restart the job"""
    end_date = _limit_end_date(manager, body.end_date)
    await manager.schedule_reimport(site_id, body.start_date, end_date)
    return OperationResult()


@router.delete("/{site_id}/reimports", response_model=OperationResult)
async def remove_reimport(
    site_id: int,
    start_date: date = Query(..., description="Start of the queued range"),
    end_date: date = Query(..., description="End of the queued range"),
    manager: ImportStatusManager = Depends(get_status_manager)
):
    await manager.remove_re_import_entry(site_id, (start_date, end_date))
    return OperationResult()


@router.delete("/{site_id}", response_model=OperationResult)
async def delete_import(site_id: int, manager: ImportStatusManager = Depends(get_status_manager)):
    """Cancel an import: drop its status, range marker and log files"""
    await manager.delete_status(site_id)
    return OperationResult()
