"""
Time-window resolution for the Lead Dashboard.
Maps a time-frame selector to the created_at boundary used to scope
which leads are counted, and applies that boundary in memory.

Usage:
    from scripts.lib.time_windows import resolve_window_start, filter_leads_by_date_range

    start = resolve_window_start("1M")
    in_window = filter_leads_by_date_range(leads, start)
"""
from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Union

from models.lead_models import TimeFrame
from scripts.lib.logger import setup_logger

logger = setup_logger("time_windows")

# Rolling day-based windows; month/year windows go through _sub_months.
_DAY_WINDOWS = {
    TimeFrame.ONE_DAY: 1,
    TimeFrame.ONE_WEEK: 7,
}
_MONTH_WINDOWS = {
    TimeFrame.ONE_MONTH: 1,
    TimeFrame.SIX_MONTHS: 6,
    TimeFrame.ONE_YEAR: 12,
}

# Fractional seconds following HH:MM:SS
_FRACTION = re.compile(r"(?<=:\d\d)\.(\d+)")


@dataclass(frozen=True)
class QueryWindow:
    """created_at bounds handed to the data-access layer."""
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    start_inclusive: bool = False


def _now_utc() -> datetime:
    """Current UTC time, timezone-aware."""
    return datetime.now(timezone.utc)


def _six_digit_fraction(match: re.Match) -> str:
    return "." + match.group(1)[:6].ljust(6, "0")


def parse_timestamp(ts: Union[str, datetime, None]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp to a timezone-aware datetime (naive = UTC).

    Postgres drops trailing zeros from fractional seconds, so the fraction
    is padded or trimmed to microseconds before parsing.
    """
    if ts is None:
        return None
    if isinstance(ts, datetime):
        dt = ts
    else:
        text = _FRACTION.sub(_six_digit_fraction, str(ts).replace("Z", "+00:00"), count=1)
        try:
            dt = datetime.fromisoformat(text)
        except (ValueError, TypeError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _sub_months(dt: datetime, months: int) -> datetime:
    """Step back whole calendar months, clamping to the last day of the target month."""
    month_index = dt.year * 12 + (dt.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def _coerce_time_frame(time_frame) -> Optional[TimeFrame]:
    if isinstance(time_frame, TimeFrame):
        return time_frame
    try:
        return TimeFrame(time_frame)
    except (ValueError, TypeError):
        logger.debug("Unrecognised time frame %r, applying no lower bound", time_frame)
        return None


def resolve_window_start(time_frame, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Resolve a time-frame selector to the start of its rolling window.

    Args:
        time_frame: A TimeFrame or its string value ("1D", "1W", ...).
        now: Evaluation instant (default: current UTC time).

    Returns:
        now minus the selector's duration, or None for ALL, CUSTOM and
        unrecognised selectors (no lower bound).
    """
    tf = _coerce_time_frame(time_frame)
    if tf is None:
        return None

    now = now or _now_utc()
    if tf in _DAY_WINDOWS:
        return now - timedelta(days=_DAY_WINDOWS[tf])
    if tf in _MONTH_WINDOWS:
        return _sub_months(now, _MONTH_WINDOWS[tf])

    # ALL has no lower bound; CUSTOM ranges are supplied by the caller
    return None


def resolve_query_bounds(
    time_frame,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> QueryWindow:
    """
    Build the created_at bounds for a fetch.

    Rolling frames give an exclusive start and no end. CUSTOM passes the
    user-picked pair through with an inclusive start; without a start date
    the custom range is ignored and every lead qualifies.
    """
    tf = _coerce_time_frame(time_frame)
    if tf == TimeFrame.CUSTOM:
        if date_from is None:
            return QueryWindow()
        return QueryWindow(
            start=parse_timestamp(date_from),
            end=parse_timestamp(date_to),
            start_inclusive=True,
        )
    return QueryWindow(start=resolve_window_start(tf, now=now))


def filter_leads_by_date_range(
    leads: Iterable[dict],
    start: Optional[datetime],
    end: Optional[datetime] = None,
    start_inclusive: bool = False,
) -> List[dict]:
    """
    Keep leads whose created_at is strictly after start and not after end.

    Either bound may be None; start_inclusive also admits leads created
    exactly at start. Leads with an unparseable created_at are dropped
    whenever a bound applies. Input records are not modified.
    """
    if start is None and end is None:
        return list(leads)

    start = parse_timestamp(start)
    end = parse_timestamp(end)

    in_window = []
    skipped = 0
    for lead in leads:
        created_at = parse_timestamp(lead.get("created_at"))
        if created_at is None:
            skipped += 1
            continue
        if start is not None:
            if created_at < start or (created_at == start and not start_inclusive):
                continue
        if end is not None and created_at > end:
            continue
        in_window.append(lead)

    if skipped:
        logger.warning("Skipped %d leads with unparseable created_at", skipped)
    return in_window


def apply_window(leads: Iterable[dict], window: QueryWindow) -> List[dict]:
    """In-memory equivalent of the created_at bounds fetch_leads pushes down."""
    return filter_leads_by_date_range(
        leads, window.start, window.end, start_inclusive=window.start_inclusive,
    )
