"""
Calculate weekly and monthly activity statistics.
"""

from datetime import date, timedelta

from bodybalance.errors import InvalidArgument
from bodybalance.models import parse_date


def _entry_date_str(entry) -> str | None:
    if isinstance(entry, dict):
        return entry.get("date")
    return getattr(entry, "date", None)


def calculate_stats(entries: list, today: date | str | None = None) -> dict:
    """
    Calculate weekly and monthly entry statistics for one activity kind.

    Args:
        entries: Activity records (or dicts with a 'date' key)
        today: Override today's date for testing (date or YYYY-MM-DD).
            Defaults to current date.

    Returns:
        Dictionary with entry statistics:
        - entries_today: Entries logged today
        - entries_this_week: Entries Mon-Sun of current week
        - entries_this_month: Entries in current calendar month
        - entries_last_7_days: Rolling 7-day entry count
        - entries_last_30_days: Rolling 30-day entry count
        - total_entries: Total entries from available data
    """
    today_date = date.today() if today is None else parse_date(today)

    # Initialize counters
    entries_today = 0
    entries_this_week = 0
    entries_this_month = 0
    entries_last_7_days = 0
    entries_last_30_days = 0
    total_entries = 0

    # Week boundaries (Monday to Sunday)
    week_start = today_date - timedelta(days=today_date.weekday())  # Monday
    week_end = week_start + timedelta(days=6)  # Sunday

    # Rolling period boundaries
    seven_days_ago = today_date - timedelta(days=6)  # Include today = 7 days
    thirty_days_ago = today_date - timedelta(days=29)  # Include today = 30 days

    for entry in entries:
        try:
            entry_date = parse_date(_entry_date_str(entry))
        except InvalidArgument:
            continue

        total_entries += 1

        if entry_date == today_date:
            entries_today += 1

        if week_start <= entry_date <= week_end:
            entries_this_week += 1

        if entry_date.year == today_date.year and entry_date.month == today_date.month:
            entries_this_month += 1

        if seven_days_ago <= entry_date <= today_date:
            entries_last_7_days += 1

        if thirty_days_ago <= entry_date <= today_date:
            entries_last_30_days += 1

    return {
        "entries_today": entries_today,
        "entries_this_week": entries_this_week,
        "entries_this_month": entries_this_month,
        "entries_last_7_days": entries_last_7_days,
        "entries_last_30_days": entries_last_30_days,
        "total_entries": total_entries,
    }


def calculate_activity_stats(history: dict, today: date | str | None = None) -> dict:
    """Calculate statistics for every activity kind in a history mapping."""
    return {kind: calculate_stats(entries, today) for kind, entries in history.items()}
