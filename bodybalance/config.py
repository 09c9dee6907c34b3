"""
Configuration management for bodybalance.

Loads settings from environment variables.
"""

import os
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

# Load .env file from project root
load_dotenv()

BODYBALANCE_TIMEZONE = os.getenv("BODYBALANCE_TIMEZONE", "UTC")
BODYBALANCE_LANGUAGE = os.getenv("BODYBALANCE_LANGUAGE", "en")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

SUPPORTED_LANGUAGES = ("en", "he")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_timezone() -> ZoneInfo:
    """Return the user's local time zone used for calendar-day decisions."""
    return ZoneInfo(BODYBALANCE_TIMEZONE)


def validate_config():
    """Validate that configuration values are usable."""
    problems = []

    try:
        get_timezone()
    except (ZoneInfoNotFoundError, ValueError):
        problems.append(f"BODYBALANCE_TIMEZONE ({BODYBALANCE_TIMEZONE!r} is not a known time zone)")

    if BODYBALANCE_LANGUAGE not in SUPPORTED_LANGUAGES:
        problems.append(
            f"BODYBALANCE_LANGUAGE (expected one of {', '.join(SUPPORTED_LANGUAGES)})"
        )

    if LOG_LEVEL.upper() not in LOG_LEVELS:
        problems.append(f"LOG_LEVEL (expected one of {', '.join(LOG_LEVELS)})")

    if problems:
        raise ValueError(
            f"Invalid configuration: {', '.join(problems)}\n"
            "Please copy .env.example to .env and fix these values."
        )
