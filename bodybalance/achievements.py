"""
Achievement system for bodybalance.

Provides gamified achievements for tracking streaks, entry counts, level-ups
and the first completed daily challenge. Every achievement is keyed by a
stable milestone id (e.g. 'streak:weight:7') so switching the display
language can never produce a duplicate.
"""

import logging
from dataclasses import asdict, dataclass, fields
from datetime import date

from bodybalance.models import ACTIVITY_KINDS, new_id
from bodybalance.streak_calculator import compute_streak
from bodybalance.translations import DEFAULT_LANGUAGE, achievement_text
from bodybalance.xp_ledger import MAX_LEVEL, XpState

logger = logging.getLogger(__name__)

FIRST_CHALLENGE_ID = "special:first-challenge"


@dataclass
class Milestone:
    """Represents an achievement that can be unlocked."""

    id: str
    type: str  # "medal", "trophy" or "badge"
    category: str
    level: str  # "bronze", "silver" or "gold"
    xp_reward: int
    activity: str | None = None
    threshold: int = 0


@dataclass
class Achievement:
    """An unlocked achievement as stored on the user profile."""

    id: str
    milestone_id: str
    title: str
    description: str
    type: str
    category: str
    level: str
    xp_reward: int
    date_earned: str
    progress: int | None = None
    max_progress: int | None = None
    notification_sent: bool = False

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Achievement":
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


@dataclass
class EvaluationResult:
    """Newly unlocked achievements and the XP they grant in total."""

    new_achievements: list[Achievement]
    xp_to_award: int


STREAK_LEVELS = {3: "bronze", 7: "silver", 30: "gold"}
ENTRY_COUNT_LEVELS = {10: "bronze", 50: "silver", 100: "gold"}

# Streak-based achievements
STREAK_MILESTONES = [
    Milestone(
        id=f"streak:{activity}:{days}",
        type="medal",
        category="consistency",
        level=level,
        xp_reward=days * 10,
        activity=activity,
        threshold=days,
    )
    for activity in ACTIVITY_KINDS
    for days, level in STREAK_LEVELS.items()
]

# Entry count achievements
ENTRY_MILESTONES = [
    Milestone(
        id=f"entries:{activity}:{count}",
        type="trophy",
        category="milestone",
        level=level,
        xp_reward=count,
        activity=activity,
        threshold=count,
    )
    for activity in ACTIVITY_KINDS
    for count, level in ENTRY_COUNT_LEVELS.items()
]

FIRST_CHALLENGE_MILESTONE = Milestone(
    id=FIRST_CHALLENGE_ID,
    type="badge",
    category="special",
    level="bronze",
    xp_reward=25,
)

# Combined catalog of activity-driven achievements
MILESTONES = STREAK_MILESTONES + ENTRY_MILESTONES


def level_up_milestone(level: int) -> Milestone:
    """Build the badge milestone for reaching a level."""
    if level >= MAX_LEVEL:
        tier = "gold"
    elif level >= 5:
        tier = "silver"
    else:
        tier = "bronze"
    return Milestone(
        id=f"level:{level}",
        type="badge",
        category="milestone",
        level=tier,
        xp_reward=0,
        threshold=level,
    )


def mint_achievement(
    milestone: Milestone,
    today: date | str,
    language: str = DEFAULT_LANGUAGE,
) -> Achievement:
    """Create the stored achievement record for a milestone."""
    title, description = achievement_text(milestone.id, language)
    return Achievement(
        id=new_id("achievement"),
        milestone_id=milestone.id,
        title=title,
        description=description,
        type=milestone.type,
        category=milestone.category,
        level=milestone.level,
        xp_reward=milestone.xp_reward,
        date_earned=str(today),
        progress=milestone.threshold or None,
        max_progress=milestone.threshold or None,
    )


def level_up_achievement(level: int, today: date | str, language: str = DEFAULT_LANGUAGE) -> Achievement:
    """Mint the level-up badge for a level reached. It grants no XP."""
    return mint_achievement(level_up_milestone(level), today, language)


def first_challenge_achievement(today: date | str, language: str = DEFAULT_LANGUAGE) -> Achievement:
    """Mint the 'A Journey Begins' badge for the first completed challenge."""
    return mint_achievement(FIRST_CHALLENGE_MILESTONE, today, language)


def earned_milestone_ids(achievements: list) -> set[str]:
    """Collect the milestone ids already present in an achievement list."""
    ids = set()
    for achievement in achievements:
        if isinstance(achievement, dict):
            ids.add(achievement.get("milestone_id"))
        else:
            ids.add(achievement.milestone_id)
    return ids


def check_achievements(
    streaks: dict[str, int],
    entry_counts: dict[str, int],
    unlocked_ids: set[str],
) -> list[Milestone]:
    """
    Check for newly unlocked activity milestones.

    Args:
        streaks: Current streak per activity kind
        entry_counts: Total entry count per activity kind
        unlocked_ids: Set of already unlocked milestone IDs

    Returns:
        List of newly unlocked Milestone objects
    """
    newly_unlocked = []

    for milestone in MILESTONES:
        # Skip already unlocked achievements
        if milestone.id in unlocked_ids:
            continue

        if milestone.type == "medal":
            value = streaks.get(milestone.activity, 0)
        else:
            value = entry_counts.get(milestone.activity, 0)

        if value >= milestone.threshold:
            newly_unlocked.append(milestone)

    return newly_unlocked


def evaluate(
    history: dict,
    current_achievements: list,
    xp_state: XpState | None = None,
    today: date | str | None = None,
    language: str = DEFAULT_LANGUAGE,
) -> EvaluationResult:
    """
    Evaluate activity history against the achievement catalog.

    Pure: nothing is mutated and the XP ledger is not called. The caller
    stores the new achievements and awards xp_to_award exactly once.
    Calling again with the same inputs plus the returned achievements
    yields nothing new.

    Args:
        history: Mapping of activity kind to its entries
        current_achievements: Achievements already earned
        xp_state: Current XP state; a level above 1 without its level-up
            badge mints one for the current level
        today: Date stamped on new achievements (defaults to today)
        language: Language for the stored display text

    Returns:
        EvaluationResult with the new achievements and summed XP reward
    """
    if today is None:
        today = date.today()

    unlocked_ids = earned_milestone_ids(current_achievements)

    streaks = {kind: compute_streak(history.get(kind, [])) for kind in ACTIVITY_KINDS}
    entry_counts = {kind: len(history.get(kind, [])) for kind in ACTIVITY_KINDS}

    milestones = check_achievements(streaks, entry_counts, unlocked_ids)

    if xp_state is not None and xp_state.level > 1:
        level_milestone = level_up_milestone(xp_state.level)
        if level_milestone.id not in unlocked_ids:
            milestones.append(level_milestone)

    new_achievements = [mint_achievement(m, today, language) for m in milestones]
    xp_to_award = sum(a.xp_reward for a in new_achievements)

    for achievement in new_achievements:
        logger.info("Achievement unlocked: %s (+%d XP)", achievement.milestone_id, achievement.xp_reward)

    return EvaluationResult(new_achievements=new_achievements, xp_to_award=xp_to_award)


def localize(achievement: Achievement, language: str) -> dict:
    """Return an achievement as a dict with title/description in a language."""
    data = achievement.to_dict()
    title, description = achievement_text(achievement.milestone_id, language)
    data["title"] = title
    data["description"] = description
    return data


def sort_achievements(achievements: list[Achievement]) -> list[Achievement]:
    """Sort achievements most recent first."""
    return sorted(achievements, key=lambda a: a.date_earned, reverse=True)


def get_all_achievements_status(
    unlocked_achievements: list[Achievement],
    language: str = DEFAULT_LANGUAGE,
) -> list[dict]:
    """
    Get all catalog achievements with their unlock status.

    Args:
        unlocked_achievements: Achievements earned so far
        language: Display language for titles

    Returns:
        List of all activity and special milestones with unlock status, in
        catalog order
    """
    # Create a lookup for unlocked achievements
    unlocked_lookup = {a.milestone_id: a for a in unlocked_achievements}

    result = []
    for milestone in MILESTONES + [FIRST_CHALLENGE_MILESTONE]:
        unlocked_record = unlocked_lookup.get(milestone.id)
        title, description = achievement_text(milestone.id, language)
        result.append({
            "id": milestone.id,
            "title": title,
            "description": description,
            "type": milestone.type,
            "category": milestone.category,
            "level": milestone.level,
            "threshold": milestone.threshold,
            "xp_reward": milestone.xp_reward,
            "unlocked": unlocked_record is not None,
            "date_earned": unlocked_record.date_earned if unlocked_record else None,
        })

    return result
