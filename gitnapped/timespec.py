"""
Time window and author resolution for gitnapped runs.

Turns the user-facing --since/--until/--period and author options into
the plain values the analyzer consumes.
"""

from datetime import datetime, timedelta
from typing import Optional, Tuple
import logging
import re

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_PERIOD_RE = re.compile(r'^(\d+)([YMWDH])$')

# unit -> (timedelta argument, multiplier)
_PERIOD_UNITS = {
    'Y': ('days', 365),
    'M': ('days', 30),
    'W': ('weeks', 1),
    'D': ('days', 1),
    'H': ('hours', 1),
}


def parse_period(period: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Parse a relative period into its start time.

    Supports:
        - Y: Years (365 days each), e.g. "2Y"
        - M: Months (30 days each), e.g. "6M"
        - W: Weeks, e.g. "2W"
        - D: Days, e.g. "5D"
        - H: Hours, e.g. "12H"

    Args:
        period: Period string
        now: Reference time (defaults to the current local time)

    Returns:
        Start of the period, or None if the string is not a valid period
        or the start falls outside the supported date range
    """
    match = _PERIOD_RE.match(period.strip()) if period else None
    if not match:
        return None

    amount = int(match.group(1))
    name, factor = _PERIOD_UNITS[match.group(2)]
    now = now or datetime.now()

    try:
        return now - timedelta(**{name: amount * factor})
    except OverflowError:
        logger.debug(f"Period {period!r} reaches outside the supported date range")
        return None


def resolve_window(
    since: Optional[str] = None,
    until: Optional[str] = None,
    period: Optional[str] = None,
    now: Optional[datetime] = None
) -> Tuple[str, str]:
    """
    Resolve the analyzed time window.

    A valid period wins over since/until. Otherwise since defaults to
    yesterday and until to today.

    Returns:
        (since, until) strings accepted by git's --since/--until
    """
    now = now or datetime.now()

    if period:
        start = parse_period(period, now)
        if start is not None:
            logger.debug(f"Using relative period {period!r}")
            return start.strftime(DATETIME_FORMAT), now.strftime(DATETIME_FORMAT)
        logger.warning(f"Invalid period format {period!r} - expected format like 6M, 2Y, 5D, 12H")

    resolved_since = since or (now - timedelta(days=1)).strftime(DATE_FORMAT)
    resolved_until = until or now.strftime(DATE_FORMAT)
    return resolved_since, resolved_until


def resolve_author(
    all_authors: bool = False,
    cli_author: Optional[str] = None,
    config_author: Optional[str] = None,
    require_explicit: bool = False
) -> Optional[str]:
    """
    Decide which author filter applies.

    Priority: --all-authors, then --author, then the config author.
    With require_explicit (single directory mode) a missing --author
    means all authors.

    Returns:
        Author pattern, or None for all authors
    """
    if require_explicit and not cli_author and not all_authors:
        logger.warning("No author provided, assuming all-authors mode")
        return None
    if all_authors:
        return None
    if cli_author:
        return cli_author
    return config_author or None
