"""
Profile session for bodybalance.

Owns the single in-memory copy of the user's data, wires the streak,
XP, achievement and challenge modules together, and writes the whole
user-data blob back to storage after every logical update.
"""

import functools
import logging
from dataclasses import asdict, dataclass, field, fields, replace
from datetime import date, datetime

from bodybalance import achievements as achievement_engine
from bodybalance import challenges as challenge_engine
from bodybalance.achievements import FIRST_CHALLENGE_ID, Achievement
from bodybalance.challenges import Challenge
from bodybalance.config import BODYBALANCE_LANGUAGE, SUPPORTED_LANGUAGES, get_timezone
from bodybalance.errors import InvalidArgument, MissingProfile, StorageUnavailable
from bodybalance.models import (
    ACTIVITY_KINDS,
    UserProfile,
    UserSchedule,
    create_entry,
    entry_from_dict,
    parse_date,
)
from bodybalance.stats_calculator import calculate_activity_stats
from bodybalance.storage import LANGUAGE_KEY, USER_DATA_KEY, BlobStorage
from bodybalance.streak_calculator import calculate_streaks
from bodybalance.translations import level_title
from bodybalance.xp_ledger import LevelProgress, XpAward, XpState, award_xp, level_progress

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Everything stored in the user-data blob."""

    profile: UserProfile | None = None
    xp: XpState | None = None
    entries: dict[str, list] = field(default_factory=lambda: {kind: [] for kind in ACTIVITY_KINDS})
    achievements: list[Achievement] = field(default_factory=list)
    challenges: list[Challenge] = field(default_factory=list)
    challenge_date: str | None = None
    completion_log: dict[str, list[str]] = field(default_factory=dict)
    completed_challenges: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "user_profile": self.profile.to_dict() if self.profile else None,
            "xp": self.xp.to_dict() if self.xp else None,
            "entries": {
                kind: [asdict(entry) for entry in entries]
                for kind, entries in self.entries.items()
            },
            "achievements": [a.to_dict() for a in self.achievements],
            "daily_challenges": {
                "generation_date": self.challenge_date,
                "challenges": [c.to_dict() for c in self.challenges],
                "completion_log": self.completion_log,
            },
            "completed_challenges": self.completed_challenges,
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> "AppState":
        if not data:
            return cls()
        profile = data.get("user_profile")
        stored_entries = data.get("entries") or {}
        daily = data.get("daily_challenges") or {}
        return cls(
            profile=UserProfile.from_dict(profile) if profile else None,
            xp=XpState.from_dict(data.get("xp")) if profile or data.get("xp") else None,
            entries={
                kind: [entry_from_dict(kind, e) for e in stored_entries.get(kind, [])]
                for kind in ACTIVITY_KINDS
            },
            achievements=[Achievement.from_dict(a) for a in data.get("achievements", [])],
            challenges=[Challenge.from_dict(c) for c in daily.get("challenges", [])],
            challenge_date=daily.get("generation_date"),
            completion_log=daily.get("completion_log") or {},
            completed_challenges=data.get("completed_challenges") or [],
        )


@dataclass
class ChallengeOutcome:
    """What happened when a challenge was completed."""

    challenge: Challenge
    xp_awarded: int
    new_achievements: list[Achievement]
    requires_setup: bool = False
    leveled_up: bool = False


def requires_profile(default=None):
    """
    Turn a session method into a silent no-op while no profile exists.

    Args:
        default: Value returned instead; a callable is invoked to build it
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs):
            if self.state.profile is None:
                logger.debug("%s skipped: no user profile", func.__name__)
                return default() if callable(default) else default
            return func(self, *args, **kwargs)
        return wrapper
    return decorator


def _local_now() -> datetime:
    return datetime.now(get_timezone())


class ProfileSession:
    """The in-memory user state plus its persistence."""

    def __init__(self, storage: BlobStorage | None = None, clock=None):
        """
        Initialize the session and load stored data.

        Args:
            storage: BlobStorage instance. Creates default if not provided.
            clock: Callable returning the current datetime in the user's
                time zone. Defaults to the configured zone.
        """
        self.storage = storage or BlobStorage()
        self.clock = clock or _local_now
        self.state = AppState.from_dict(self.storage.load_blob(USER_DATA_KEY))
        self.language = self.storage.load_blob(LANGUAGE_KEY) or BODYBALANCE_LANGUAGE

    def today(self) -> date:
        """Current calendar day in the user's time zone."""
        return self.clock().date()

    def _save(self) -> None:
        """Write the whole user-data blob."""
        try:
            self.storage.persist_blob(USER_DATA_KEY, self.state.to_dict())
        except StorageUnavailable:
            logger.error("Could not persist user data; keeping in-memory state", exc_info=True)
            raise

    # Profile

    @property
    def has_profile(self) -> bool:
        return self.state.profile is not None

    def require_profile(self) -> UserProfile:
        """Return the profile or raise MissingProfile."""
        if self.state.profile is None:
            raise MissingProfile("No user profile has been created yet")
        return self.state.profile

    def create_profile(self, profile: UserProfile) -> UserProfile:
        """
        Create or replace the user profile.

        The profile weight is recorded as today's weight entry (updating an
        existing entry for today). XP starts at level 1 the first time.
        """
        today = self.today().isoformat()
        weights = self.state.entries["weight"]
        todays = next((e for e in weights if e.date == today), None)
        if todays is None:
            weights.insert(0, create_entry("weight", date=today, weight=profile.weight))
        else:
            todays.weight = profile.weight

        if self.state.profile is None:
            logger.info("Created profile for %s", profile.name)
        if self.state.xp is None:
            self.state.xp = XpState()
        if profile.training_schedule is None and self.state.profile is not None:
            profile.training_schedule = self.state.profile.training_schedule

        self.state.profile = profile
        self.state.challenge_date = None
        self._save()
        return profile

    @requires_profile()
    def update_training_schedule(self, schedule: UserSchedule) -> UserSchedule:
        """Store a new training schedule; today's challenges are rebuilt."""
        self.state.profile.training_schedule = schedule
        self.state.challenge_date = None
        self._save()
        return schedule

    def set_language(self, language: str) -> str:
        """Switch the display language."""
        if language not in SUPPORTED_LANGUAGES:
            raise InvalidArgument(f"Unsupported language: {language!r}")
        self.language = language
        self.storage.persist_blob(LANGUAGE_KEY, language)
        if self.state.profile is not None:
            # Stored challenge titles are in the old language
            self.state.challenge_date = None
            self._save()
        return language

    # Activity entries

    def history(self) -> dict[str, list]:
        """Activity records per kind."""
        return {kind: list(entries) for kind, entries in self.state.entries.items()}

    def _entries(self, kind: str) -> list:
        try:
            return self.state.entries[kind]
        except KeyError:
            raise InvalidArgument(f"Unknown activity kind: {kind!r}")

    @requires_profile()
    def add_entry(self, kind: str, **values):
        """Record a new weight, meal or exercise entry. Entries belong to the profile."""
        entries = self._entries(kind)
        entry = create_entry(kind, **values)
        entries.insert(0, entry)
        self._save()
        return entry

    @requires_profile()
    def update_entry(self, kind: str, entry_id: str, **changes):
        """
        Edit an entry in place.

        Returns:
            The updated entry, or None if no entry has that id
        """
        entries = self._entries(kind)
        for i, entry in enumerate(entries):
            if entry.id == entry_id:
                changes.pop("id", None)
                unknown = set(changes) - {f.name for f in fields(entry)}
                if unknown:
                    raise InvalidArgument(f"Unknown {kind} fields: {', '.join(sorted(unknown))}")
                if "date" in changes:
                    changes["date"] = parse_date(changes["date"]).isoformat()
                entries[i] = replace(entry, **changes)
                self._save()
                return entries[i]
        return None

    @requires_profile(default=False)
    def delete_entry(self, kind: str, entry_id: str) -> bool:
        """Delete an entry. Returns False if no entry has that id."""
        entries = self._entries(kind)
        remaining = [e for e in entries if e.id != entry_id]
        if len(remaining) == len(entries):
            return False
        self.state.entries[kind] = remaining
        self._save()
        return True

    # XP and achievements

    def _earned(self, milestone_id: str) -> bool:
        return any(a.milestone_id == milestone_id for a in self.state.achievements)

    def _add_achievement(self, achievement: Achievement) -> None:
        self.state.achievements.append(achievement)
        logger.info("Achievement notification: %s", achievement.title)

    def _apply_xp(self, amount: int) -> tuple[XpAward, list[Achievement]]:
        """Award XP and mint the level-up badge when a level is crossed."""
        award = award_xp(self.state.xp, amount)
        self.state.xp = award.state
        minted = []
        if award.leveled_up and not self._earned(f"level:{award.new_level}"):
            badge = achievement_engine.level_up_achievement(
                award.new_level, self.today().isoformat(), self.language
            )
            self._add_achievement(badge)
            minted.append(badge)
        return award, minted

    @requires_profile()
    def award_xp(self, amount: int) -> XpAward:
        """
        Add XP to the profile.

        Returns:
            XpAward, or None while no profile exists

        Raises:
            InvalidArgument: If amount is negative
        """
        award, _ = self._apply_xp(amount)
        self._save()
        return award

    @requires_profile()
    def level_progress(self) -> LevelProgress:
        return level_progress(self.state.xp)

    @requires_profile(default=list)
    def check_achievements(self) -> list[Achievement]:
        """
        Evaluate history, store new achievements and award their XP once.

        Returns:
            Achievements unlocked by this call, including any level-up badge
        """
        result = achievement_engine.evaluate(
            self.history(),
            self.state.achievements,
            self.state.xp,
            today=self.today().isoformat(),
            language=self.language,
        )
        for achievement in result.new_achievements:
            self._add_achievement(achievement)

        unlocked = list(result.new_achievements)
        if result.xp_to_award:
            _, badges = self._apply_xp(result.xp_to_award)
            unlocked.extend(badges)

        if unlocked:
            self._save()
        return unlocked

    def mark_notification_sent(self, achievement_id: str) -> bool:
        """Flag an achievement as announced. Returns False if not found."""
        for i, achievement in enumerate(self.state.achievements):
            if achievement.id == achievement_id:
                if not achievement.notification_sent:
                    self.state.achievements[i] = replace(achievement, notification_sent=True)
                    self._save()
                return True
        return False

    def pending_notifications(self) -> list[Achievement]:
        """Achievements not yet announced to the user."""
        return [a for a in self.state.achievements if not a.notification_sent]

    # Daily challenges

    @requires_profile(default=list)
    def todays_challenges(self) -> list[Challenge]:
        """
        Return today's challenges, regenerating them on a new day.

        Completion flags are restored from the completion log, and old log
        entries are pruned on each generation pass.
        """
        today = self.today()
        if self.state.challenge_date == today.isoformat() and self.state.challenges:
            return list(self.state.challenges)

        challenge_set = challenge_engine.generate_for_today(
            self.state.profile.training_schedule,
            self.state.challenge_date,
            today,
            self.state.completion_log,
            self.language,
        )
        self.state.challenges = challenge_set.challenges
        self.state.challenge_date = challenge_set.generation_date
        self.state.completion_log = challenge_set.completion_log
        self._save()
        return list(self.state.challenges)

    @requires_profile()
    def complete_challenge(self, challenge_id: str) -> ChallengeOutcome:
        """
        Complete one of today's challenges.

        Awards the challenge XP once, and mints the first-challenge badge
        the first time any challenge is completed.

        Raises:
            InvalidArgument: If the id is not in today's set
        """
        challenges = self.todays_challenges()
        result = challenge_engine.complete_challenge(
            challenge_id,
            challenges,
            self.state.completion_log,
            self.today(),
        )

        if not result.newly_completed:
            return ChallengeOutcome(
                challenge=result.challenge,
                xp_awarded=0,
                new_achievements=[],
                requires_setup=result.requires_setup,
            )

        self.state.challenges = result.challenges
        self.state.completion_log = result.completion_log
        self.state.completed_challenges = challenge_engine.record_completed(
            self.state.completed_challenges,
            result.challenge,
            self.clock().isoformat(),
        )

        award, unlocked = self._apply_xp(result.xp_to_award)
        xp_awarded = result.xp_to_award
        leveled_up = award.leveled_up

        if result.is_first_completion_today and not self._earned(FIRST_CHALLENGE_ID):
            badge = achievement_engine.first_challenge_achievement(
                self.today().isoformat(), self.language
            )
            self._add_achievement(badge)
            unlocked.append(badge)
            bonus, level_badges = self._apply_xp(badge.xp_reward)
            unlocked.extend(level_badges)
            xp_awarded += badge.xp_reward
            leveled_up = leveled_up or bonus.leveled_up

        self._save()
        return ChallengeOutcome(
            challenge=result.challenge,
            xp_awarded=xp_awarded,
            new_achievements=unlocked,
            requires_setup=result.requires_setup,
            leveled_up=leveled_up,
        )

    # Read models

    @requires_profile()
    def dashboard(self) -> dict:
        """Everything the dashboard shows, in display language."""
        today = self.today()
        history = self.history()
        progress = level_progress(self.state.xp)
        xp = self.state.xp or XpState()
        return {
            "name": self.state.profile.name,
            "language": self.language,
            "xp": {
                "level": xp.level,
                "level_title": level_title(xp.level, self.language),
                "current_xp": xp.current_xp,
                "total_xp_earned": xp.total_xp_earned,
                "percent": progress.percent,
                "next_level_threshold": progress.next_level_threshold,
            },
            "streaks": calculate_streaks(history),
            "stats": calculate_activity_stats(history, today),
            "achievements": [
                achievement_engine.localize(a, self.language)
                for a in achievement_engine.sort_achievements(self.state.achievements)
            ],
            "challenges": [c.to_dict() for c in self.todays_challenges()],
        }
