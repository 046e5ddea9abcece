"""
Estimate of the days an import still needs, from the progress made so far
"""

from datetime import date, datetime
from typing import Optional
import math

from schemas.import_status import Estimate, ImportStatus

UNKNOWN = "unknown"

SECONDS_PER_DAY = 86400


def estimate_days_left_to_finish(
    status: ImportStatus,
    now: datetime,
    site_created_on: Optional[date] = None,
) -> Estimate:
    """
    Extrapolate the remaining days from the import rate so far.

    Returns the number of days, UNKNOWN when it cannot be computed, or None
    when the import has been running for less than a day. Never raises.
    """
    try:
        if status.last_date_imported is None or status.import_range_end is None:
            return UNKNOWN

        range_start = status.import_range_start or site_created_on
        if range_start is None:
            return UNKNOWN

        days_running = math.floor(
            (now - status.import_start_time).total_seconds() / SECONDS_PER_DAY
        )
        if days_running == 0:
            return None

        days_left_in_range = (status.import_range_end - status.last_date_imported).days
        days_already_imported = (status.last_date_imported - range_start).days

        import_rate = days_already_imported / days_running
        if import_rate <= 0:
            return UNKNOWN

        return max(0, math.ceil(days_left_in_range / import_rate))
    except (TypeError, ValueError, ArithmeticError):
        return UNKNOWN
