from datetime import date, datetime
import calendar
from utils.constants import DATE_FORMAT


def today() -> date:
    return date.today()


def now_timestamp() -> str:
    """Local ISO-8601 timestamp used for created_at / updated_at columns."""
    return datetime.now().isoformat(timespec="seconds")


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def parse_timestamp(ts: str) -> datetime | None:
    """Parse an ISO-8601 timestamp (date-only strings allowed). None on failure."""
    if not ts:
        return None
    try:
        return datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except ValueError:
        d = parse_date(ts[:10])
        return datetime(d.year, d.month, d.day) if d else None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def clamp_day_to_month(year: int, month: int, day: int) -> int:
    """Clamp day to valid range for the given year/month."""
    max_day = calendar.monthrange(year, month)[1]
    return min(day, max_day)


def next_month_of(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) of the month after the given one."""
    if month == 12:
        return year + 1, 1
    return year, month + 1
