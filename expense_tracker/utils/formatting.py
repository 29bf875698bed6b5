"""Date, colour and CSV formatting shared by the response formatters.

Every function is pure: values may be ``date``, ``datetime`` or ISO strings,
and nothing here touches the database.
"""
import calendar
import csv
import io
from datetime import date, datetime, time
from typing import Iterable, Optional, Sequence, Tuple, Union

DateLike = Union[date, datetime, str]

EXPORT_HEADERS = ["Title", "Amount", "Category", "Date"]

CHART_COLORS = {
    "Food": "#10b981",
    "Travel": "#3b82f6",
    "Bills": "#f59e0b",
    "Shopping": "#ec4899",
    "Transport": "#8b5cf6",
    "Education": "#06b6d4",
    "Others": "#ef4444",
}
DEFAULT_CHART_COLOR = "#6b7280"

BADGE_COLORS = {
    "Food": "#dcfce7",
    "Travel": "#dbeafe",
    "Bills": "#fef3c7",
    "Shopping": "#fce7f3",
    "Transport": "#f3e8ff",
    "Education": "#fef3c7",
    "Others": "#fee2e2",
}
DEFAULT_BADGE_COLOR = "#f3f4f6"


# =========================
# Parsing
# =========================
def to_datetime(value: Optional[DateLike]) -> Optional[datetime]:
    """Coerce a stored or submitted date into a naive ``datetime``.

    Returns ``None`` for anything that cannot be read as a date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo else value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parsed.replace(tzinfo=None) if parsed.tzinfo else parsed
    return None


def iso_date_key(value: Optional[DateLike]) -> Optional[str]:
    """``YYYY-MM-DD`` bucket key, or ``None`` when the value is not a date.

    Stored strings with trailing garbage are keyed by their leading date.
    """
    parsed = to_datetime(value)
    if parsed is None and isinstance(value, str):
        parsed = to_datetime(value.strip()[:10])
    if parsed is None:
        return None
    return parsed.isoformat()[:10]


# =========================
# Display formats
# =========================
def format_date_for_display(value: DateLike) -> str:
    """Day, short month and year, e.g. ``7 Aug 2024``."""
    parsed = to_datetime(value)
    if parsed is None:
        return ""
    return f"{parsed.day} {parsed.strftime('%b')} {parsed.year}"


# =========================
# Calendar helpers
# =========================
def days_in_month(month: int, year: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_date_range(month: int, year: int) -> Tuple[datetime, datetime]:
    """Inclusive bounds of a calendar month."""
    start = datetime(year, month, 1)
    end = datetime.combine(date(year, month, days_in_month(month, year)), time.max)
    return start, end


def end_of_day(value: DateLike) -> Optional[datetime]:
    parsed = to_datetime(value)
    if parsed is None:
        return None
    return datetime.combine(parsed.date(), time.max)


def month_label(month: int, year: int) -> str:
    return f"{month}/{year}"


def shift_month(month: int, year: int, offset: int) -> Tuple[int, int]:
    """Move ``offset`` months away from (month, year)."""
    index = year * 12 + (month - 1) + offset
    return index % 12 + 1, index // 12


# =========================
# Colours
# =========================
def chart_color(category_name: str) -> str:
    return CHART_COLORS.get(category_name, DEFAULT_CHART_COLOR)


def badge_color(category_name: str) -> str:
    return BADGE_COLORS.get(category_name, DEFAULT_BADGE_COLOR)


# =========================
# CSV
# =========================
def format_amount(amount) -> str:
    value = float(amount)
    if value.is_integer():
        return str(int(value))
    return str(value)


def build_csv(rows: Iterable[Sequence], headers: Sequence[str] = EXPORT_HEADERS) -> str:
    """Render rows with every field quoted, one line per row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    writer.writerows(rows)
    # no newline after the last row
    return buffer.getvalue()[:-1]


def export_row(title: str, amount, category_name: str, value: DateLike) -> list:
    return [title, format_amount(amount), category_name, format_date_for_display(value)]
