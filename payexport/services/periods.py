"""Period-to-range table for named relative date windows.

"this_*" periods are open-ended: the range starts at the beginning of the
current week/month/quarter/year and has no upper bound. Every other period is
closed on both sides. Weeks start on Monday, quarters are calendar quarters.
"""

from datetime import date, timedelta

from db.enums import NamedPeriod

DateRange = tuple[date, date | None]


def _quarter_start(d: date) -> date:
    return date(d.year, 3 * ((d.month - 1) // 3) + 1, 1)


def _previous_quarter_start(d: date) -> date:
    start: date = _quarter_start(d)
    if start.month == 1:
        return date(start.year - 1, 10, 1)
    return date(start.year, start.month - 3, 1)


def resolve_named_period(period: NamedPeriod, today: date) -> DateRange:
    """Return ``(start, end)`` for *period* relative to *today*; end may be None."""
    if period is NamedPeriod.TODAY:
        return today, today
    if period is NamedPeriod.YESTERDAY:
        yesterday: date = today - timedelta(days=1)
        return yesterday, yesterday

    if period is NamedPeriod.THIS_WEEK:
        return today - timedelta(days=today.weekday()), None
    if period is NamedPeriod.LAST_WEEK:
        monday: date = today - timedelta(days=today.weekday())
        return monday - timedelta(days=7), monday - timedelta(days=1)

    if period is NamedPeriod.THIS_MONTH:
        return today.replace(day=1), None
    if period is NamedPeriod.LAST_MONTH:
        last_day: date = today.replace(day=1) - timedelta(days=1)
        return last_day.replace(day=1), last_day

    if period is NamedPeriod.THIS_QUARTER:
        return _quarter_start(today), None
    if period is NamedPeriod.LAST_QUARTER:
        return _previous_quarter_start(today), _quarter_start(today) - timedelta(days=1)

    if period is NamedPeriod.THIS_YEAR:
        return date(today.year, 1, 1), None
    if period is NamedPeriod.LAST_YEAR:
        return date(today.year - 1, 1, 1), date(today.year - 1, 12, 31)

    raise ValueError(f"Unknown period: {period!r}")
