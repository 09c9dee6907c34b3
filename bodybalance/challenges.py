"""
Daily challenge generation and completion for bodybalance.

A day's challenge set is derived from the user's weekly training schedule.
Completion is recorded in a log keyed by date, separate from the challenge
objects, so regenerating the set on the same day keeps completed flags and
never re-grants XP.
"""

import logging
from dataclasses import asdict, dataclass, field, fields, replace
from datetime import date, timedelta

from bodybalance.errors import InvalidArgument
from bodybalance.models import WEEKDAYS, UserSchedule, parse_date
from bodybalance.translations import DEFAULT_LANGUAGE, challenge_text

logger = logging.getLogger(__name__)

SETUP_SCHEDULE = "setup-schedule"
DAILY_WORKOUT = "daily-workout"
REST_DAY = "rest-day"
DAILY_NUTRITION = "daily-nutrition"
WEEKLY_WEIGHT = "weekly-weight"

CHALLENGE_IDS = (SETUP_SCHEDULE, DAILY_WORKOUT, REST_DAY, DAILY_NUTRITION, WEEKLY_WEIGHT)

WORKOUT_REWARDS = {"intense": 20, "moderate": 15, "light": 10}
SETUP_REWARD = 25
REST_DAY_REWARD = 5
NUTRITION_REWARD = 10
WEIGHT_REWARD = 5

COMPLETION_RETENTION_DAYS = 7
COMPLETED_HISTORY_LIMIT = 20


@dataclass
class Challenge:
    """A task for one calendar day."""

    id: str
    title: str
    description: str
    xp_reward: int
    category: str  # "nutrition", "exercise", "weight" or "tracking"
    is_completed: bool = False
    deadline: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Challenge":
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


@dataclass
class ChallengeSet:
    """Result of a generation pass."""

    challenges: list[Challenge]
    generation_date: str
    completion_log: dict[str, list[str]] = field(default_factory=dict)
    regenerated: bool = False


@dataclass
class CompletionResult:
    """Result of completing a challenge."""

    challenges: list[Challenge]
    completion_log: dict[str, list[str]]
    xp_to_award: int
    is_first_completion_today: bool
    challenge: Challenge
    requires_setup: bool = False
    newly_completed: bool = False


def weekday_name(day: date) -> str:
    """Lower-case weekday name, e.g. 'sunday'."""
    return WEEKDAYS[(day.weekday() + 1) % 7]


def is_week_start(day: date, week_start: str = "sunday") -> bool:
    """True on the first or second day of the tracked week."""
    try:
        start = WEEKDAYS.index(week_start)
    except ValueError:
        raise InvalidArgument(f"Unknown week start day: {week_start!r}")
    today = WEEKDAYS.index(weekday_name(day))
    return (today - start) % 7 in (0, 1)


def _make(challenge_id: str, xp_reward: int, category: str, today: date, language: str, **values) -> Challenge:
    title, description = challenge_text(challenge_id, language, **values)
    return Challenge(
        id=challenge_id,
        title=title,
        description=description,
        xp_reward=xp_reward,
        category=category,
        deadline=f"{today.isoformat()}T23:59:59",
    )


def build_challenges(
    schedule: UserSchedule | None,
    today: date,
    language: str = DEFAULT_LANGUAGE,
) -> list[Challenge]:
    """
    Build the uncompleted challenge set for a day.

    Args:
        schedule: The user's training schedule, or None before onboarding
        today: The calendar day to build for
        language: Display language for titles

    Returns:
        List of Challenge objects, all pending
    """
    if schedule is None or not schedule.has_completed_setup:
        return [_make(SETUP_SCHEDULE, SETUP_REWARD, "tracking", today, language)]

    challenges = []
    day_plan = schedule.day_for(weekday_name(today))

    if day_plan is not None and day_plan.is_training:
        intensity = day_plan.intensity or "moderate"
        workout_type = day_plan.training_type[0] if day_plan.training_type else "general"
        challenges.append(_make(
            DAILY_WORKOUT,
            WORKOUT_REWARDS.get(intensity, WORKOUT_REWARDS["moderate"]),
            "exercise",
            today,
            language,
            intensity=intensity,
            workout_type=workout_type,
        ))
    else:
        challenges.append(_make(REST_DAY, REST_DAY_REWARD, "exercise", today, language))

    challenges.append(_make(
        DAILY_NUTRITION,
        NUTRITION_REWARD,
        "nutrition",
        today,
        language,
        meal_count=schedule.meal_count or 3,
    ))

    if is_week_start(today, schedule.week_start):
        challenges.append(_make(WEEKLY_WEIGHT, WEIGHT_REWARD, "weight", today, language))

    return challenges


def prune_completion_log(
    completion_log: dict[str, list[str]],
    today: date | str,
    retention_days: int = COMPLETION_RETENTION_DAYS,
) -> dict[str, list[str]]:
    """
    Drop completion entries older than the retention window.

    Returns:
        A new log keeping only dates within retention_days of today
    """
    today = parse_date(today)
    cutoff = today - timedelta(days=retention_days)
    pruned = {}
    for day, ids in completion_log.items():
        try:
            day_date = parse_date(day)
        except InvalidArgument:
            logger.warning("Dropping completion log entry with bad date %r", day)
            continue
        if day_date >= cutoff:
            pruned[day] = list(ids)
    return pruned


def generate_for_today(
    schedule: UserSchedule | None,
    last_generation_date: str | None,
    today: date | str,
    completion_log: dict[str, list[str]] | None = None,
    language: str = DEFAULT_LANGUAGE,
) -> ChallengeSet:
    """
    Produce today's challenges with completion flags restored.

    Args:
        schedule: The user's training schedule, or None before onboarding
        last_generation_date: Date of the previous generation pass (or None)
        today: Current calendar day in the user's time zone
        completion_log: Mapping of date to completed challenge ids
        language: Display language for titles

    Returns:
        ChallengeSet with today's challenges and the pruned completion log
    """
    today = parse_date(today)
    today_str = today.isoformat()
    completion_log = prune_completion_log(completion_log or {}, today)

    completed_today = set(completion_log.get(today_str, []))
    challenges = [
        replace(c, is_completed=c.id in completed_today)
        for c in build_challenges(schedule, today, language)
    ]

    regenerated = last_generation_date != today_str
    if regenerated:
        logger.debug("Generated %d challenges for %s", len(challenges), today_str)

    return ChallengeSet(
        challenges=challenges,
        generation_date=today_str,
        completion_log=completion_log,
        regenerated=regenerated,
    )


def complete_challenge(
    challenge_id: str,
    challenges: list[Challenge],
    completion_log: dict[str, list[str]],
    today: date | str,
) -> CompletionResult:
    """
    Mark one of today's challenges as completed.

    Completing an already-completed challenge is a no-op that awards no
    XP.

    Args:
        challenge_id: Catalog id of the challenge
        challenges: Today's challenge set
        completion_log: Mapping of date to completed challenge ids
        today: Current calendar day

    Returns:
        CompletionResult with the updated challenges and log, the XP to
        award, and whether this is the first completion of the day

    Raises:
        InvalidArgument: If the id is not a known challenge or not part of
            today's set
    """
    if challenge_id not in CHALLENGE_IDS:
        raise InvalidArgument(f"Unknown challenge id: {challenge_id!r}")

    challenge = next((c for c in challenges if c.id == challenge_id), None)
    if challenge is None:
        raise InvalidArgument(f"Challenge {challenge_id!r} is not part of today's set")

    today_str = parse_date(today).isoformat()
    completed_today = list(completion_log.get(today_str, []))
    requires_setup = challenge_id == SETUP_SCHEDULE

    if challenge.is_completed or challenge_id in completed_today:
        return CompletionResult(
            challenges=[replace(c) for c in challenges],
            completion_log={k: list(v) for k, v in completion_log.items()},
            xp_to_award=0,
            is_first_completion_today=False,
            challenge=replace(challenge, is_completed=True),
            requires_setup=requires_setup,
        )

    is_first = not completed_today and not any(c.is_completed for c in challenges if c.id != challenge_id)

    new_log = {k: list(v) for k, v in completion_log.items()}
    new_log[today_str] = completed_today + [challenge_id]

    updated = [replace(c, is_completed=c.is_completed or c.id == challenge_id) for c in challenges]
    completed = replace(challenge, is_completed=True)

    logger.info("Challenge completed: %s (+%d XP)", challenge_id, challenge.xp_reward)

    return CompletionResult(
        challenges=updated,
        completion_log=new_log,
        xp_to_award=challenge.xp_reward,
        is_first_completion_today=is_first,
        challenge=completed,
        requires_setup=requires_setup,
        newly_completed=True,
    )


def record_completed(
    history: list[dict],
    challenge: Challenge,
    completed_at: str,
    limit: int = COMPLETED_HISTORY_LIMIT,
) -> list[dict]:
    """
    Add a completed challenge to the front of the completion history.

    Args:
        history: Previously completed challenges, most recent first
        challenge: The challenge just completed
        completed_at: ISO timestamp of the completion
        limit: Maximum number of entries kept

    Returns:
        A new history list holding at most `limit` entries
    """
    entry = {**challenge.to_dict(), "is_completed": True, "completed_date": completed_at}
    return [entry] + list(history)[:limit - 1]
