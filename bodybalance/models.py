"""
Activity records, training schedule and user profile types.

These are the shapes the tracking pages and onboarding flow hand to the
gamification engine. All of them round-trip through plain dicts so they
can be stored in the JSON blob.
"""

import uuid
from dataclasses import asdict, dataclass, field, fields
from datetime import date, datetime

from bodybalance.errors import InvalidArgument

ACTIVITY_KINDS = ("weight", "meal", "exercise")
WEEKDAYS = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")
INTENSITIES = ("light", "moderate", "intense")


def parse_date(value) -> date:
    """
    Parse a calendar date.

    Args:
        value: A date, a datetime, or a string in YYYY-MM-DD format
            (an ISO datetime string is truncated to its date)

    Returns:
        The calendar date

    Raises:
        InvalidArgument: If the value is not a recognizable date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        raise InvalidArgument(f"Malformed date: {value!r}")
    try:
        if len(value) == 10:
            return datetime.strptime(value, "%Y-%m-%d").date()
        # Full ISO datetime only, e.g. 2026-01-20T18:45:00Z
        if len(value) > 10 and value[10] in "T " and value[:10].count("-") == 2:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError as e:
        raise InvalidArgument(f"Malformed date: {value!r}") from e
    raise InvalidArgument(f"Malformed date: {value!r}")


def new_id(prefix: str) -> str:
    """Generate a unique record id such as 'weight-3f2a...'."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _known_fields(cls, data: dict) -> dict:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


@dataclass
class WeightEntry:
    """A logged body weight measurement."""

    id: str
    date: str
    weight: float

    kind = "weight"


@dataclass
class MealEntry:
    """A logged meal."""

    id: str
    date: str
    name: str
    calories: int
    meal_type: str = "snack"  # breakfast, lunch, dinner or snack
    quality: str | None = None
    description: str | None = None

    kind = "meal"


@dataclass
class ExerciseEntry:
    """A logged exercise session."""

    id: str
    date: str
    exercise_type: str
    duration: int
    calories_burned: int = 0
    intensity: str | None = None

    kind = "exercise"


ENTRY_TYPES = {
    "weight": WeightEntry,
    "meal": MealEntry,
    "exercise": ExerciseEntry,
}


def entry_from_dict(kind: str, data: dict):
    """Build an activity record of the given kind from a stored dict."""
    try:
        cls = ENTRY_TYPES[kind]
    except KeyError:
        raise InvalidArgument(f"Unknown activity kind: {kind!r}")
    return cls(**_known_fields(cls, data))


def create_entry(kind: str, **values):
    """
    Create a new activity record with a fresh id.

    The date is validated and normalized to YYYY-MM-DD.
    """
    if kind not in ENTRY_TYPES:
        raise InvalidArgument(f"Unknown activity kind: {kind!r}")
    values["date"] = parse_date(values.get("date")).isoformat()
    values.pop("id", None)
    return entry_from_dict(kind, {"id": new_id(kind), **values})


@dataclass
class TrainingDay:
    """One day of the user's weekly training plan."""

    day: str
    is_training: bool = False
    training_type: list[str] = field(default_factory=list)
    intensity: str | None = None
    duration: int | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "TrainingDay":
        return cls(**_known_fields(cls, data))


@dataclass
class UserSchedule:
    """Weekly training schedule and nutrition preferences from onboarding."""

    schedule: list[TrainingDay] = field(default_factory=list)
    meal_count: int = 3
    week_start: str = "sunday"
    has_completed_setup: bool = False
    preferred_training_time: str | None = None
    diet_type: str | None = None
    goal_weight: float | None = None
    goal_date: str | None = None
    weekly_weight_goal: float | None = None

    def day_for(self, weekday: str) -> TrainingDay | None:
        """Return the schedule entry for a weekday name, if planned."""
        for day in self.schedule:
            if day.day == weekday:
                return day
        return None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "UserSchedule":
        values = _known_fields(cls, data)
        values["schedule"] = [
            TrainingDay.from_dict(d) for d in data.get("schedule", [])
        ]
        return cls(**values)


@dataclass
class UserProfile:
    """The user's personal details as entered on the welcome screen."""

    name: str
    weight: float
    height: float
    activity_level: str = "moderate"
    birth_date: str | None = None
    gender: str | None = None
    weight_goal: str | None = None  # lose, maintain or gain
    target_weight: float | None = None
    training_schedule: UserSchedule | None = None

    def to_dict(self) -> dict:
        data = asdict(self)
        if self.training_schedule is not None:
            data["training_schedule"] = self.training_schedule.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "UserProfile":
        values = _known_fields(cls, data)
        schedule = data.get("training_schedule")
        values["training_schedule"] = (
            UserSchedule.from_dict(schedule) if schedule else None
        )
        return cls(**values)
