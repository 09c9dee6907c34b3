"""
CLI display functions for bodybalance.
"""

from bodybalance.translations import level_title


def get_milestone_message(streak_days: int) -> str | None:
    """
    Get milestone message for a given streak length.

    Args:
        streak_days: Current streak in days

    Returns:
        Milestone message string or None if no milestone
    """
    milestones = {
        3: "Three days in a row!",
        7: "One week strong!",
        30: "One month champion!",
    }
    return milestones.get(streak_days)


def display_streaks(streaks: dict) -> None:
    """
    Display streak information per activity kind with milestone messages.

    Args:
        streaks: Dictionary from calculate_streaks(), keyed by activity kind,
            each containing current_streak and last_entry_date
    """
    print("🔥 Tracking Streaks:")
    for kind, info in streaks.items():
        current = info["current_streak"]
        if current == 0:
            status = "no entries yet"
        else:
            day_word = "day" if current == 1 else "days"
            status = f"{current} {day_word}"
            milestone = get_milestone_message(current)
            if milestone:
                status = f"{status} - {milestone}"
        print(f"   {kind.capitalize():<10} {status}")
    print()


def format_progress_bar(percent: int, width: int = 20) -> str:
    """Render a text progress bar like '[#####---------------]'."""
    filled = percent * width // 100
    return "[" + "#" * filled + "-" * (width - filled) + "]"


def display_level(xp: dict, language: str = "en") -> None:
    """
    Display level and progress to the next level.

    Args:
        xp: Dictionary with level, total_xp_earned, percent and
            next_level_threshold (the dashboard 'xp' section)
        language: Display language for the level title
    """
    level = xp["level"]
    print(f"⚡ Level {level} - {level_title(level, language)}")
    if xp.get("next_level_threshold") is None:
        print(f"   {xp['total_xp_earned']} XP (max level)")
    else:
        print(
            f"   {format_progress_bar(xp['percent'])} {xp['percent']}% "
            f"({xp['total_xp_earned']}/{xp['next_level_threshold']} XP)"
        )
    print()


def format_challenge(challenge: dict) -> str:
    """
    Format a daily challenge for display.

    Args:
        challenge: Dictionary with title, xp_reward and is_completed

    Returns:
        Formatted string for display
    """
    mark = "[x]" if challenge["is_completed"] else "[ ]"
    return f"  {mark} {challenge['title']:<45} +{challenge['xp_reward']} XP"


def display_challenges(challenges: list[dict]) -> None:
    """Display today's challenges with completion marks."""
    completed = sum(1 for c in challenges if c["is_completed"])
    print(f"🎯 Daily Challenges ({completed}/{len(challenges)} completed):")
    if not challenges:
        print("   No daily challenges right now")
    for challenge in challenges:
        print(format_challenge(challenge))
    if challenges and completed == len(challenges):
        earned = sum(c["xp_reward"] for c in challenges)
        print(f"   All daily challenges completed! XP earned today: {earned}")
    print()
