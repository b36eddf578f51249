from datetime import date, datetime
import calendar
from utils.constants import DATE_FORMAT

# ── Display date format options ───────────────────────────────────────────────

_STRFTIME_MAP = {
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD/MM/YYYY": "%d/%m/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
    "DD.MM.YYYY": "%d.%m.%Y",
    "MM-DD-YYYY": "%m-%d-%Y",
}


def today() -> date:
    return date.today()


def parse_date(date_str: str | None) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def format_date(d: date | None) -> str | None:
    return d.strftime(DATE_FORMAT) if d else None


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    return min(day, last_day_of_month(year, month))


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start's month to end's month (may be negative)."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def add_months(d: date, n: int, preferred_day: int | None = None) -> date:
    """Add n months to date d, clamping to month end.

    preferred_day pins the day of month to an anchor instead of d.day, so
    repeated calls never drift (Jan 31 -> Feb 28 -> Mar 31).
    """
    month = d.month - 1 + n
    year = d.year + month // 12
    month = month % 12 + 1
    day = clamp_day_to_month(year, month, preferred_day or d.day)
    return date(year, month, day)


def days_until(d: date, ref: date | None = None) -> int:
    return (d - (ref or today())).days


def relative_day_label(d: date, ref: date | None = None) -> str:
    """'today', 'tomorrow', 'in 5 days', 'yesterday' or '3 days ago'."""
    delta = days_until(d, ref)
    if delta == 0:
        return "today"
    if delta == 1:
        return "tomorrow"
    if delta == -1:
        return "yesterday"
    return f"in {delta} days" if delta > 0 else f"{-delta} days ago"


def format_display_date(value: date | str | None, fmt_key: str = "MM/DD/YYYY") -> str:
    """Convert a date (or YYYY-MM-DD storage string) to the user-facing display format."""
    if not value:
        return ""
    d = value if isinstance(value, date) else parse_date(value)
    if d is None:
        return str(value)
    return d.strftime(_STRFTIME_MAP.get(fmt_key, "%m/%d/%Y"))


def parse_display_date(display_str: str, fmt_key: str) -> date | None:
    """Parse a date in the given display format. Returns None on failure.

    Falls back to ISO 8601 parse if the display format doesn't match.
    """
    if not display_str:
        return None
    fmt = _STRFTIME_MAP.get(fmt_key, "%m/%d/%Y")
    try:
        return datetime.strptime(display_str.strip(), fmt).date()
    except ValueError:
        return parse_date(display_str.strip().replace("/", "-").replace(".", "-"))
