"""
Calculate tracking streaks from activity entries.
"""

from datetime import date, timedelta

from bodybalance.models import parse_date


def _entry_date(entry) -> date:
    """Extract the calendar date from a record, a mapping or a bare date."""
    if isinstance(entry, dict):
        return parse_date(entry.get("date"))
    if isinstance(entry, (date, str)):
        return parse_date(entry)
    return parse_date(getattr(entry, "date", None))


def _unique_dates(entries) -> list[date]:
    """Return the distinct entry dates, most recent first."""
    return sorted({_entry_date(entry) for entry in entries}, reverse=True)


def compute_streak(entries) -> int:
    """
    Count consecutive tracked days ending at the most recent entry.

    Entries may arrive in any order and several entries on the same day
    count once. The streak is anchored at the latest entry, not at today,
    so a single entry is always a 1-day streak.

    Args:
        entries: Activity records, dicts with a 'date' key, or dates

    Returns:
        Streak length in days (0 for no entries)

    Raises:
        InvalidArgument: If an entry carries a malformed date
    """
    dates = _unique_dates(entries)
    if not dates:
        return 0

    streak = 1
    previous = dates[0]

    for current in dates[1:]:
        if previous - current != timedelta(days=1):
            # Gap found, streak ends
            break
        streak += 1
        previous = current

    return streak


def longest_streak(entries) -> int:
    """
    Calculate the longest run of consecutive tracked days in the history.

    Args:
        entries: Activity records, dicts with a 'date' key, or dates

    Returns:
        Longest streak count
    """
    dates = _unique_dates(entries)
    if not dates:
        return 0

    longest = 1
    current_run = 1

    for i in range(1, len(dates)):
        if dates[i - 1] - dates[i] == timedelta(days=1):
            current_run += 1
            longest = max(longest, current_run)
        else:
            current_run = 1

    return longest


def calculate_streaks(history: dict) -> dict:
    """
    Calculate current and longest streaks for each activity kind.

    Args:
        history: Mapping of activity kind ('weight', 'meal', 'exercise')
            to its entries

    Returns:
        Dictionary keyed by activity kind, each with:
        - current_streak: Streak ending at the latest entry
        - longest_streak: Longest streak found in the data
        - last_entry_date: Most recent entry date (or None)
    """
    result = {}
    for kind, entries in history.items():
        dates = _unique_dates(entries)
        result[kind] = {
            "current_streak": compute_streak(dates),
            "longest_streak": longest_streak(dates),
            "last_entry_date": dates[0].isoformat() if dates else None,
        }
    return result
