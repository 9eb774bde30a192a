"""Date and time utilities.

Calendar-date windows are expanded to epoch-second bounds in local time:
the start date from 00:00:00 and the end date through 23:59:59.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time

logger = logging.getLogger(__name__)

DATE_KEY_FORMAT = "%Y-%m-%d"

END_OF_DAY = time(23, 59, 59)


def start_of_day_ts(day: date) -> int:
    """Epoch seconds of local midnight on day."""
    return int(datetime.combine(day, time.min).timestamp())


def end_of_day_ts(day: date) -> int:
    """Epoch seconds of 23:59:59 local time on day."""
    return int(datetime.combine(day, END_OF_DAY).timestamp())


def window_bounds(start_date: date, end_date: date) -> tuple[int, int]:
    """Expand an inclusive calendar-date window to epoch-second bounds.

    Args:
        start_date: First day of the window.
        end_date: Last day of the window (included through end of day).

    Returns:
        (start_ts, end_ts) suitable for MessageStore.fetch_messages.
    """
    return start_of_day_ts(start_date), end_of_day_ts(end_date)


def local_date_key(epoch_seconds: int) -> str | None:
    """Format the local calendar date of an epoch timestamp as YYYY-MM-DD.

    Returns:
        The date key, or None if the timestamp is outside the platform range.
    """
    try:
        return datetime.fromtimestamp(epoch_seconds).strftime(DATE_KEY_FORMAT)
    except (ValueError, OSError, OverflowError) as e:
        logger.debug("Failed to convert timestamp %s: %s", epoch_seconds, e)
        return None


def parse_date_key(key: str) -> date:
    """Parse a YYYY-MM-DD key produced by local_date_key."""
    return datetime.strptime(key, DATE_KEY_FORMAT).date()
