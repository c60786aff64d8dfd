"""Pure display helpers shared by the pages. No network calls in here."""

import calendar
from datetime import date, datetime, timezone as dt_timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

INVALID_DATE = "Invalid Date"

NO_DUE_DATE = "No Due Date"
OVERDUE = "Overdue"
DUE_TODAY = "Due Today"
UPCOMING = "Upcoming"

# symbol, decimals
CURRENCIES = {
    "USD": ("$", 2),
    "EUR": ("€", 2),
    "GBP": ("£", 2),
    "CNY": ("CN¥", 2),
    "INR": ("₹", 2),
    "JPY": ("¥", 0),
    "AUD": ("A$", 2),
    "CAD": ("CA$", 2),
    "LKR": ("Rs", 2),
    "VND": ("₫", 0),
}


def format_currency(amount, currency: Optional[str] = "USD") -> str:
    code = (currency or "USD").upper()
    symbol, decimals = CURRENCIES.get(code, (f"{code} ", 2))
    value = float(amount or 0)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{abs(value):,.{decimals}f}"


def _parse(value):
    """Return a date or datetime for ``value``, or None when it is not one."""
    if isinstance(value, datetime) or isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        if "T" in value or " " in value.strip():
            return datetime.fromisoformat(value)
        return date.fromisoformat(value)
    except ValueError:
        return None


def _to_date(value) -> Optional[date]:
    parsed = _parse(value)
    if isinstance(parsed, datetime):
        return parsed.date()
    return parsed


def format_date(value, timezone: Optional[str] = None) -> str:
    parsed = _parse(value)
    if parsed is None:
        return INVALID_DATE

    if isinstance(parsed, datetime) and timezone:
        try:
            zone = ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError):
            zone = None
        if zone is not None:
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=dt_timezone.utc)
            parsed = parsed.astimezone(zone)

    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def get_month_name(month: int) -> Optional[str]:
    if 1 <= month <= 12:
        return calendar.month_name[month]
    return None


def format_transaction_type(type_name: Optional[str]) -> str:
    if not type_name:
        return "Unknown"
    if type_name in ("TYPE_INCOME", "INCOME"):
        return "Income"
    if type_name in ("TYPE_EXPENSE", "EXPENSE"):
        return "Expense"
    cleaned = type_name.replace("TYPE_", "")
    return cleaned[:1] + cleaned[1:].lower()


def get_relative_date(value, today: Optional[date] = None) -> str:
    target = _to_date(value)
    if target is None:
        return INVALID_DATE

    today = today or date.today()
    diff_days = (today - target).days
    if diff_days == 0:
        return "Today"
    if diff_days == 1:
        return "Yesterday"
    if diff_days == -1:
        return "Tomorrow"
    return format_date(value)


def budget_percentage(current_spending, budgeted_amount) -> float:
    budgeted = float(budgeted_amount or 0)
    if budgeted <= 0:
        return 0.0
    percentage = float(current_spending or 0) / budgeted * 100
    return max(0.0, min(percentage, 100.0))


def budget_remaining(budgeted_amount, current_spending) -> float:
    """Positive while under budget, negative once over it."""
    return float(budgeted_amount or 0) - float(current_spending or 0)


def progress_level(percentage: float) -> str:
    if percentage >= 100:
        return "over"
    if percentage >= 90:
        return "warning"
    return "ok"


def due_status(next_due_date, today: Optional[date] = None) -> str:
    due = _to_date(next_due_date)
    if due is None:
        return NO_DUE_DATE

    today = today or date.today()
    if due < today:
        return OVERDUE
    if due == today:
        return DUE_TODAY
    return UPCOMING


def format_time(seconds: int) -> str:
    seconds = max(int(seconds), 0)
    return f"{seconds // 60}:{seconds % 60:02d}"
