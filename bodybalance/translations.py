"""
Localized display strings for achievements, challenges and levels.

Achievements and challenges are identified by stable ids; the titles shown
to the user are derived here for the active language.
"""

DEFAULT_LANGUAGE = "en"

LEVEL_TITLES = {
    1: {"en": "Beginner", "he": "מתחיל"},
    2: {"en": "Novice", "he": "מתקדם"},
    3: {"en": "Apprentice", "he": "שוליה"},
    4: {"en": "Adept", "he": "מומחה מתחיל"},
    5: {"en": "Expert", "he": "מומחה"},
    6: {"en": "Master", "he": "אומן"},
    7: {"en": "Advanced Master", "he": "אומן מתקדם"},
    8: {"en": "Champion", "he": "גיבור"},
    9: {"en": "Legend", "he": "אגדה"},
    10: {"en": "Undefeated", "he": "בלתי מנוצח"},
}

ACTIVITY_NAMES = {
    "weight": {"en": "Weight", "he": "משקל"},
    "meal": {"en": "Meal", "he": "ארוחות"},
    "exercise": {"en": "Exercise", "he": "אימון"},
}

WORKOUT_TYPES = {
    "general": {"en": "general", "he": "כללי"},
    "cardio": {"en": "cardio", "he": "קרדיו"},
    "strength": {"en": "strength", "he": "כוח"},
    "flexibility": {"en": "flexibility", "he": "גמישות"},
}

INTENSITY_NAMES = {
    "light": {"en": "light", "he": "קל"},
    "moderate": {"en": "moderate", "he": "בינוני"},
    "intense": {"en": "intense", "he": "אינטנסיבי"},
}

# Templates keyed by milestone family, formatted with activity/count/level
ACHIEVEMENT_TEXT = {
    "streak": {
        "en": (
            "{count} Day {activity} Tracking Streak",
            "You've tracked your {activity_lower} for {count} consecutive days",
        ),
        "he": (
            "מעקב {activity} {count} ימים ברצף",
            "עקבת אחר {activity} {count} ימים ברצף",
        ),
    },
    "entries": {
        "en": (
            "{count} {activity} Entries",
            "You've recorded {count} {activity_lower} entries",
        ),
        "he": (
            "{count} רשומות {activity}",
            "הוספת {count} רשומות {activity}",
        ),
    },
    "level": {
        "en": (
            "Level Up to {count}!",
            "Congratulations! You've reached level {count} - {level_title}",
        ),
        "he": (
            "עלית לרמה {count}!",
            "כל הכבוד! השגת רמה {count} - {level_title}",
        ),
    },
    "special:first-challenge": {
        "en": ("A Journey Begins", "Completed your first daily challenge"),
        "he": ("מסע מתחיל בצעד הראשון", "השלמת את האתגר היומי הראשון שלך"),
    },
}

CHALLENGE_TEXT = {
    "setup-schedule": {
        "en": (
            "Set up your training schedule",
            "Customize your daily challenges by setting up a schedule",
        ),
        "he": (
            "הגדר את לוח הזמנים שלך",
            "התאם אישית את האתגרים היומיים שלך על ידי הגדרת לוח זמנים",
        ),
    },
    "daily-workout": {
        "en": (
            "Complete a {intensity} {workout_type} workout",
            "Do your scheduled workout for today and log it in the system",
        ),
        "he": (
            "השלם אימון {workout_type} {intensity}",
            "בצע את האימון המתוכנן שלך להיום ותעד אותו במערכת",
        ),
    },
    "rest-day": {
        "en": (
            "Rest Day - Take care of your body",
            "Use this day for stretching, flexibility or active recovery",
        ),
        "he": (
            "יום מנוחה - טפל בגופך",
            "השתמש ביום זה למתיחות, גמישות או מנוחה פעילה",
        ),
    },
    "daily-nutrition": {
        "en": (
            "Log {meal_count} meals today",
            "Track your nutrition with proper meal entries",
        ),
        "he": (
            "תעד {meal_count} ארוחות היום",
            "עקוב אחר התזונה שלך עם רישום מסודר של הארוחות",
        ),
    },
    "weekly-weight": {
        "en": (
            "Log your weekly weight",
            "Track your progress with a weekly weight measurement",
        ),
        "he": (
            "תעד את המשקל השבועי שלך",
            "עקוב אחר התקדמותך עם מדידת משקל שבועית",
        ),
    },
}


def _pick(table: dict, language: str):
    return table.get(language) or table[DEFAULT_LANGUAGE]


def level_title(level: int, language: str = DEFAULT_LANGUAGE) -> str:
    """Get the display title for a level, e.g. 'Apprentice' for level 3."""
    titles = LEVEL_TITLES.get(min(level, max(LEVEL_TITLES)))
    if not titles:
        return ""
    return _pick(titles, language)


def achievement_text(milestone_id: str, language: str = DEFAULT_LANGUAGE) -> tuple[str, str]:
    """
    Derive the localized title and description for a milestone.

    Args:
        milestone_id: Stable milestone id such as 'streak:weight:7',
            'entries:meal:50', 'level:3' or 'special:first-challenge'
        language: Display language code

    Returns:
        Tuple of (title, description)
    """
    if milestone_id in ACHIEVEMENT_TEXT:
        return _pick(ACHIEVEMENT_TEXT[milestone_id], language)

    parts = milestone_id.split(":")
    family = parts[0]
    values = {"count": parts[-1], "activity": "", "activity_lower": "", "level_title": ""}

    if family in ("streak", "entries"):
        activity = _pick(ACTIVITY_NAMES[parts[1]], language)
        values["activity"] = activity
        values["activity_lower"] = activity.lower()
    elif family == "level":
        values["level_title"] = level_title(int(parts[1]), language)
    else:
        raise KeyError(f"No display text for milestone {milestone_id!r}")

    title, description = _pick(ACHIEVEMENT_TEXT[family], language)
    return title.format(**values), description.format(**values)


def challenge_text(challenge_id: str, language: str = DEFAULT_LANGUAGE, **values) -> tuple[str, str]:
    """
    Derive the localized title and description for a daily challenge.

    Keyword values fill the title template (meal_count, intensity,
    workout_type).
    """
    if "intensity" in values:
        values["intensity"] = _pick(
            INTENSITY_NAMES.get(values["intensity"], {DEFAULT_LANGUAGE: values["intensity"]}),
            language,
        )
    if "workout_type" in values:
        values["workout_type"] = _pick(
            WORKOUT_TYPES.get(values["workout_type"], {DEFAULT_LANGUAGE: values["workout_type"]}),
            language,
        )
    title, description = _pick(CHALLENGE_TEXT[challenge_id], language)
    return title.format(**values), description
