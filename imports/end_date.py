"""
Configured upper bound for import end dates
"""

from datetime import date, timedelta
from typing import Optional

from core.exceptions import ConfigurationError


def resolve_max_end_date(configured: Optional[str], today: date) -> Optional[date]:
    """
    Turn the IMPORT_MAX_END_DATE setting into a date.

    Accepts "today"/"now", "yesterday"/"yesterdaySameTime", or YYYY-MM-DD.
    Empty means no limit. Anything else raises ConfigurationError.
    """
    if not configured:
        return None

    value = configured.strip()
    if value in ("today", "now"):
        return today
    if value in ("yesterday", "yesterdaySameTime"):
        return today - timedelta(days=1)
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ConfigurationError(
            f"IMPORT_MAX_END_DATE is not a valid date: {configured!r}",
            context={"setting": "IMPORT_MAX_END_DATE", "value": configured},
            original_exception=e
        )


def limit_max_end_date(
    end_date: Optional[date],
    configured: Optional[str],
    today: date,
) -> Optional[date]:
    """Clamp a requested end date to the configured maximum, if any"""
    max_end_date = resolve_max_end_date(configured, today)
    if max_end_date is None:
        return end_date

    if end_date is None or end_date > max_end_date:
        return max_end_date
    return end_date
