"""Utility modules for groupstats."""

from groupstats.utils.datetime_utils import (
    end_of_day_ts,
    local_date_key,
    parse_date_key,
    start_of_day_ts,
    window_bounds,
)
from groupstats.utils.error_handling import Ok, Outcome, Unavailable, attempt
from groupstats.utils.logging import setup_logging

__all__ = [
    "Ok",
    "Outcome",
    "Unavailable",
    "attempt",
    "end_of_day_ts",
    "local_date_key",
    "parse_date_key",
    "setup_logging",
    "start_of_day_ts",
    "window_bounds",
]
