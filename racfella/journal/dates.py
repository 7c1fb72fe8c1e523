"""Date parsing for goal due dates and listing filters."""

import calendar
import re
from datetime import date, datetime, time, timedelta
from typing import Optional

MONTHS = [
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
]

_ISO_RE = re.compile(r"^(\d{4})[-/](\d{2})[-/](\d{2})$")
_RELATIVE_RE = re.compile(r"^(?:in\s+)?(\d+)\s+(day|days|week|weeks|month|months|year|years)$")
_MONTH_RE = re.compile(rf"^(?:by\s+)?({'|'.join(MONTHS)})(?:\s+(\d{{4}}))?$")
_QUARTER_RE = re.compile(r"^q([1-4])\s+(\d{4})$")
_BY_YEAR_RE = re.compile(r"^by\s+(\d{4})$")


def add_months(day: date, months: int) -> date:
    """Shift a date by whole months, clamping to the last day of the month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def _shift(today: date, amount: int, unit: str) -> date:
    if unit.startswith("day"):
        return today + timedelta(days=amount)
    if unit.startswith("week"):
        return today + timedelta(weeks=amount)
    if unit.startswith("month"):
        return add_months(today, amount)
    return add_months(today, amount * 12)


def parse_due_date(raw: Optional[str], today: Optional[date] = None) -> Optional[date]:
    """Parse a goal due phrase.

    Understands ISO dates, "in 3 weeks", "6 months", "next week/month/year",
    "end of month/year", "(by) march (2026)", "q2 2026" and "by 2027".

    Args:
        raw: Due phrase as written by the user or the classifier.
        today: Reference date, defaults to today.

    Returns:
        The due date, or None if the phrase is not understood.
    """
    if not raw:
        return None
    text = raw.strip().lower().rstrip(".")
    today = today or date.today()

    m = _ISO_RE.match(text)
    if m:
        try:
            return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            return None

    m = _RELATIVE_RE.match(text)
    if m:
        return _shift(today, int(m.group(1)), m.group(2))

    if text == "next week":
        return today + timedelta(days=7)
    if text == "next month":
        return add_months(today.replace(day=1), 1)
    if text == "next year":
        return date(today.year + 1, 1, 1)
    if text == "end of month":
        return today.replace(day=calendar.monthrange(today.year, today.month)[1])
    if text == "end of year":
        return date(today.year, 12, 31)

    m = _MONTH_RE.match(text)
    if m:
        month = MONTHS.index(m.group(1)) + 1
        if m.group(2):
            year = int(m.group(2))
        else:
            # A month already behind us means next year's
            year = today.year + 1 if month < today.month else today.year
        return date(year, month, 1)

    m = _QUARTER_RE.match(text)
    if m:
        return date(int(m.group(2)), (int(m.group(1)) - 1) * 3 + 1, 1)

    m = _BY_YEAR_RE.match(text)
    if m:
        return date(int(m.group(1)), 12, 31)

    try:
        return datetime.fromisoformat(raw.strip()).date()
    except ValueError:
        return None


def parse_date_bound(value: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    """Parse a filter bound.

    A date without a time covers the whole day: lower bounds start at
    midnight, upper bounds (``end_of_day=True``) end at 23:59:59.999999.

    Args:
        value: ISO date or datetime string.
        end_of_day: Whether this is an inclusive upper bound.

    Returns:
        Naive local datetime, or None if absent or unparseable.
    """
    if not value:
        return None
    text = value.strip()

    m = _ISO_RE.match(text)
    if m:
        try:
            day = date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
        except ValueError:
            return None
        return datetime.combine(day, time.max if end_of_day else time.min)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
