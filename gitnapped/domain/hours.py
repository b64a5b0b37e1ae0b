"""
Temporal classification of commits for gitnapped.

Commit timestamps come from `git log --date=iso-strict` and follow the
grammar:

    YYYY-MM-DD[Thh:mm[:ss[.fff]][Z|+hh:mm|-hh:mm]]

The date part feeds the per-day histogram; the local time of day decides
whether a commit was made inside the configured working hours. The UTC
offset is ignored; hour and minute are read off the committer's clock.
"""

from dataclasses import dataclass
from typing import Optional
import re

_TIMESTAMP_RE = re.compile(
    r'^(?P<date>\d{4}-\d{2}-\d{2})'
    r'(?:[T ](?P<time>.*))?$'
)

_TIME_RE = re.compile(
    r'^(?P<hour>\d{2}):(?P<minute>\d{2})'
    r'(?::\d{2}(?:\.\d+)?)?'
    r'(?:Z|[+-]\d{2}:?\d{2})?$'
)

_WINDOW_RE = re.compile(r'^\s*(\d{1,2}):(\d{2})\s*-\s*(\d{1,2}):(\d{2})\s*$')


@dataclass(frozen=True)
class CommitTimestamp:
    """
    A parsed commit timestamp.

    hour/minute are None when the date is readable but the time of day
    is not; such commits are still dated but cannot be classified.
    """
    date: str
    hour: Optional[int] = None
    minute: Optional[int] = None

    @property
    def classifiable(self) -> bool:
        return self.hour is not None and self.minute is not None


def parse_commit_timestamp(token: str) -> Optional[CommitTimestamp]:
    """
    Parse a timestamp token from a commit log line.

    Args:
        token: Timestamp such as "2024-03-01T23:15:02+01:00"

    Returns:
        CommitTimestamp, or None when not even the date can be read
    """
    match = _TIMESTAMP_RE.match(token.strip())
    if not match:
        return None

    date = match.group('date')
    time_part = match.group('time')
    if not time_part:
        return CommitTimestamp(date=date)

    time_match = _TIME_RE.match(time_part)
    if not time_match:
        return CommitTimestamp(date=date)

    hour = int(time_match.group('hour'))
    minute = int(time_match.group('minute'))
    if hour > 23 or minute > 59:
        return CommitTimestamp(date=date)

    return CommitTimestamp(date=date, hour=hour, minute=minute)


def is_within_working_hours(
    hour: int,
    minute: int,
    start_hour: int,
    start_minute: int,
    end_hour: int,
    end_minute: int
) -> bool:
    """
    Check whether hour:minute falls inside [start, end], both ends inclusive.

    The window does not wrap around midnight: when end is before start,
    nothing is inside.
    """
    commit_minutes = hour * 60 + minute
    start = start_hour * 60 + start_minute
    end = end_hour * 60 + end_minute
    return start <= commit_minutes <= end


@dataclass(frozen=True)
class WorkingHours:
    """Inclusive working-hours window, e.g. 09:00-17:00."""
    start_hour: int = 9
    start_minute: int = 0
    end_hour: int = 17
    end_minute: int = 0

    @classmethod
    def parse(cls, spec: str) -> 'WorkingHours':
        """
        Parse a "HH:MM-HH:MM" window.

        Raises:
            ValueError: If spec is not a valid window
        """
        match = _WINDOW_RE.match(spec or '')
        if not match:
            raise ValueError(f"Invalid working hours {spec!r}, expected HH:MM-HH:MM")

        start_hour, start_minute, end_hour, end_minute = (int(g) for g in match.groups())
        for hour, minute in ((start_hour, start_minute), (end_hour, end_minute)):
            if hour > 23 or minute > 59:
                raise ValueError(f"Invalid working hours {spec!r}, time out of range")

        return cls(start_hour, start_minute, end_hour, end_minute)

    @property
    def wraps_midnight(self) -> bool:
        return (self.end_hour, self.end_minute) < (self.start_hour, self.start_minute)

    def contains(self, hour: int, minute: int) -> bool:
        return is_within_working_hours(
            hour, minute,
            self.start_hour, self.start_minute,
            self.end_hour, self.end_minute
        )

    def is_out_of_hours(self, timestamp: CommitTimestamp) -> Optional[bool]:
        """
        Classify a commit timestamp.

        Returns:
            True/False, or None when the timestamp has no usable time of day
        """
        if not timestamp.classifiable:
            return None
        return not self.contains(timestamp.hour, timestamp.minute)

    def __str__(self) -> str:
        return (
            f"{self.start_hour:02d}:{self.start_minute:02d}-"
            f"{self.end_hour:02d}:{self.end_minute:02d}"
        )
