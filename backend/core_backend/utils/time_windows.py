"""
Validity-window checks shared by menus and coupons.

A window is a pair of optional datetimes. ``None`` on either side means the
window is open on that side. Both bounds are inclusive.
"""
from datetime import timezone as dt_timezone
from enum import Enum

from django.utils import timezone


class WindowState(str, Enum):
    OPEN = "open"
    NOT_STARTED = "not_started"
    ENDED = "ended"


def check_window(start, end, now=None) -> WindowState:
    """Return where ``now`` falls relative to the ``[start, end]`` window."""
    if now is None:
        now = timezone.now()
    if start is not None and now < start:
        return WindowState.NOT_STARTED
    if end is not None and now > end:
        return WindowState.ENDED
    return WindowState.OPEN


def month_bounds(now=None):
    """
    Start (inclusive) and end (exclusive) of the calendar month containing
    ``now``, in UTC.
    """
    if now is None:
        now = timezone.now()
    now = now.astimezone(dt_timezone.utc) if timezone.is_aware(now) else timezone.make_aware(now, dt_timezone.utc)
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end
