"""
FastAPI web application for bodybalance.

Provides REST API endpoints for tracking entries, XP, achievements and
daily challenges.
"""

from dataclasses import asdict

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from bodybalance.achievements import get_all_achievements_status, localize, sort_achievements
from bodybalance.config import validate_config
from bodybalance.errors import InvalidArgument, StorageUnavailable
from bodybalance.models import INTENSITIES, WEEKDAYS, TrainingDay, UserProfile, UserSchedule
from bodybalance.session import ProfileSession
from bodybalance.stats_calculator import calculate_activity_stats
from bodybalance.storage import BlobStorage
from bodybalance.streak_calculator import calculate_streaks
from bodybalance.translations import level_title

app = FastAPI(
    title="bodybalance",
    description="A gamified personal health tracker",
    version="0.1.0",
)


class ProfileCreate(BaseModel):
    """Request model for creating or updating the user profile."""

    name: str = Field(..., min_length=1, max_length=100)
    weight: float = Field(..., gt=0, le=500, description="Body weight in kg")
    height: float = Field(..., gt=0, le=300, description="Height in cm")
    activity_level: str = Field("moderate", pattern="^(sedentary|light|moderate|active|veryActive)$")
    birth_date: str | None = None
    gender: str | None = Field(None, pattern="^(male|female|other)$")
    weight_goal: str | None = Field(None, pattern="^(lose|maintain|gain)$")
    target_weight: float | None = Field(None, gt=0, le=500)


class TrainingDayModel(BaseModel):
    """One day of the weekly training plan."""

    day: str = Field(..., pattern=f"^({'|'.join(WEEKDAYS)})$")
    is_training: bool = False
    training_type: list[str] = Field(default_factory=list)
    intensity: str | None = Field(None, pattern=f"^({'|'.join(INTENSITIES)})$")
    duration: int | None = Field(None, ge=0, le=600)


class ScheduleUpdate(BaseModel):
    """Request model for the training schedule set up during onboarding."""

    schedule: list[TrainingDayModel] = Field(..., max_length=7)
    meal_count: int = Field(3, ge=1, le=10, description="Meals per day (1-10)")
    week_start: str = Field("sunday", pattern="^(sunday|monday)$")
    has_completed_setup: bool = True
    preferred_training_time: str | None = Field(None, pattern="^(morning|afternoon|evening)$")
    diet_type: str | None = None
    goal_weight: float | None = None
    goal_date: str | None = None
    weekly_weight_goal: float | None = None


class EntryCreate(BaseModel):
    """Request model for a tracking entry; fields depend on the entry kind."""

    date: str = Field(..., description="Calendar date (YYYY-MM-DD)")
    weight: float | None = Field(None, gt=0, le=500)
    name: str | None = Field(None, max_length=200)
    calories: int | None = Field(None, ge=0)
    meal_type: str | None = Field(None, pattern="^(breakfast|lunch|dinner|snack)$")
    quality: str | None = None
    description: str | None = Field(None, max_length=2000)
    exercise_type: str | None = Field(None, max_length=100)
    duration: int | None = Field(None, ge=0)
    calories_burned: int | None = Field(None, ge=0)
    intensity: str | None = None


class EntryUpdate(EntryCreate):
    """Request model for editing an entry; only the given fields change."""

    date: str | None = Field(None, description="Calendar date (YYYY-MM-DD)")


class XpAwardRequest(BaseModel):
    """Request model for awarding XP."""

    amount: int = Field(..., description="XP to add (must not be negative)")


class LanguageUpdate(BaseModel):
    """Request model for switching the display language."""

    language: str = Field(..., description="Language code: 'en' or 'he'")


REQUIRED_ENTRY_FIELDS = {
    "weight": ("weight",),
    "meal": ("name", "calories"),
    "exercise": ("exercise_type", "duration"),
}


def _get_session() -> ProfileSession:
    """Open a session on the default blob store."""
    # Validate configuration
    try:
        validate_config()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=f"Configuration error: {e}")

    try:
        return ProfileSession(BlobStorage())
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))


def _require_profile(session: ProfileSession) -> None:
    if not session.has_profile:
        raise HTTPException(status_code=404, detail="Profile not found")


def _xp_payload(session: ProfileSession) -> dict:
    progress = session.level_progress()
    xp = session.state.xp
    return {
        "level": xp.level,
        "level_title": level_title(xp.level, session.language),
        "current_xp": xp.current_xp,
        "total_xp_earned": xp.total_xp_earned,
        "percent": progress.percent,
        "current_level_floor": progress.current_level_floor,
        "next_level_threshold": progress.next_level_threshold,
    }


def _achievement_payload(session: ProfileSession, achievements) -> list[dict]:
    return [localize(a, session.language) for a in achievements]


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/api/profile")
def get_profile():
    """
    Get the user profile with XP standing.

    Returns:
        JSON with profile and xp
    """
    session = _get_session()
    _require_profile(session)
    return {
        "profile": session.state.profile.to_dict(),
        "xp": _xp_payload(session),
    }


@app.post("/api/profile")
def create_profile(profile: ProfileCreate):
    """
    Create or update the user profile.

    Args:
        profile: ProfileCreate with personal details

    Returns:
        JSON with the stored profile and xp
    """
    session = _get_session()
    try:
        created = session.create_profile(UserProfile(**profile.model_dump()))
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {"profile": created.to_dict(), "xp": _xp_payload(session)}


@app.put("/api/schedule")
def update_schedule(update: ScheduleUpdate):
    """
    Store the weekly training schedule.

    Returns:
        JSON with the schedule and today's regenerated challenges
    """
    session = _get_session()
    _require_profile(session)

    values = update.model_dump()
    values["schedule"] = [TrainingDay(**day) for day in values["schedule"]]

    try:
        schedule = session.update_training_schedule(UserSchedule(**values))
        challenges = session.todays_challenges()
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))

    return {
        "schedule": schedule.to_dict(),
        "challenges": [c.to_dict() for c in challenges],
    }


@app.get("/api/entries/{kind}")
def list_entries(kind: str):
    """List entries of one kind, most recent first."""
    session = _get_session()
    entries = session.history().get(kind)
    if entries is None:
        raise HTTPException(status_code=400, detail=f"Unknown activity kind: {kind}")
    entries = sorted(entries, key=lambda e: e.date, reverse=True)
    return {"entries": [asdict(e) for e in entries]}


@app.post("/api/entries/{kind}")
def add_entry(kind: str, entry: EntryCreate):
    """
    Log a weight, meal or exercise entry and check achievements.

    Returns:
        JSON with the created entry and any achievements it unlocked
    """
    if kind not in REQUIRED_ENTRY_FIELDS:
        raise HTTPException(status_code=400, detail=f"Unknown activity kind: {kind}")

    values = entry.model_dump(exclude_none=True)
    missing = [f for f in REQUIRED_ENTRY_FIELDS[kind] if f not in values]
    if missing:
        raise HTTPException(status_code=400, detail=f"Missing fields: {', '.join(missing)}")

    session = _get_session()
    _require_profile(session)
    try:
        created = session.add_entry(kind, **values)
        unlocked = session.check_achievements()
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))

    return {
        "entry": asdict(created),
        "new_achievements": _achievement_payload(session, unlocked),
    }


@app.patch("/api/entries/{kind}/{entry_id}")
def update_entry(kind: str, entry_id: str, entry: EntryUpdate):
    """Edit an existing entry."""
    session = _get_session()
    _require_profile(session)
    try:
        updated = session.update_entry(kind, entry_id, **entry.model_dump(exclude_none=True))
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    if updated is None:
        raise HTTPException(status_code=404, detail="Entry not found")
    return {"entry": asdict(updated)}


@app.delete("/api/entries/{kind}/{entry_id}")
def delete_entry(kind: str, entry_id: str):
    """Delete an entry."""
    session = _get_session()
    _require_profile(session)
    try:
        deleted = session.delete_entry(kind, entry_id)
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Entry not found")
    return {"deleted": entry_id}


@app.get("/api/xp")
def get_xp():
    """
    Get the current level and progress to the next level.

    Returns:
        JSON with level, titles and progress percent
    """
    session = _get_session()
    _require_profile(session)
    return _xp_payload(session)


@app.post("/api/xp/award")
def award_xp(request: XpAwardRequest):
    """
    Award XP to the profile.

    Returns:
        JSON with the new XP standing, the level-up flag and any level badge
    """
    session = _get_session()
    _require_profile(session)

    before = len(session.state.achievements)
    try:
        award = session.award_xp(request.amount)
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))

    return {
        "xp": _xp_payload(session),
        "leveled_up": award.leveled_up,
        "previous_level": award.previous_level,
        "new_achievements": _achievement_payload(session, session.state.achievements[before:]),
    }


@app.get("/api/achievements")
def get_achievements():
    """
    Get earned achievements and the full catalog with unlock status.

    Returns:
        JSON with achievements, catalog, recently completed challenges and summary
    """
    session = _get_session()
    earned = sort_achievements(session.state.achievements)
    catalog = get_all_achievements_status(earned, session.language)
    return {
        "achievements": _achievement_payload(session, earned),
        "catalog": catalog,
        "completed_challenges": session.state.completed_challenges,
        "summary": {
            "earned": len(earned),
            "catalog_total": len(catalog),
            "catalog_unlocked": sum(1 for a in catalog if a["unlocked"]),
            "total_xp_from_achievements": sum(a.xp_reward for a in earned),
        },
    }


@app.post("/api/achievements/check")
def check_achievements():
    """Evaluate tracking history and unlock any earned achievements."""
    session = _get_session()
    _require_profile(session)
    try:
        unlocked = session.check_achievements()
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {
        "new_achievements": _achievement_payload(session, unlocked),
        "xp": _xp_payload(session),
    }


@app.post("/api/achievements/{achievement_id}/notified")
def mark_notified(achievement_id: str):
    """Mark an achievement notification as shown."""
    session = _get_session()
    if not session.mark_notification_sent(achievement_id):
        raise HTTPException(status_code=404, detail="Achievement not found")
    return {"id": achievement_id, "notification_sent": True}


@app.get("/api/challenges")
def get_challenges():
    """
    Get today's challenges with completion flags.

    Returns:
        JSON with challenges and completed count
    """
    session = _get_session()
    _require_profile(session)
    try:
        challenges = session.todays_challenges()
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {
        "date": session.state.challenge_date,
        "challenges": [c.to_dict() for c in challenges],
        "completed": sum(1 for c in challenges if c.is_completed),
    }


@app.post("/api/challenges/{challenge_id}/complete")
def complete_challenge(challenge_id: str):
    """
    Complete one of today's challenges.

    Returns:
        JSON with the challenge, XP awarded, new achievements and whether
        the client should open the schedule setup flow
    """
    session = _get_session()
    _require_profile(session)
    try:
        outcome = session.complete_challenge(challenge_id)
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))

    return {
        "challenge": outcome.challenge.to_dict(),
        "xp_awarded": outcome.xp_awarded,
        "leveled_up": outcome.leveled_up,
        "requires_setup": outcome.requires_setup,
        "new_achievements": _achievement_payload(session, outcome.new_achievements),
        "xp": _xp_payload(session),
    }


@app.get("/api/stats")
def get_stats():
    """
    Get streaks and entry statistics per activity kind.

    Returns:
        JSON with streaks and stats
    """
    session = _get_session()
    history = session.history()
    return {
        "streaks": calculate_streaks(history),
        "stats": calculate_activity_stats(history, session.today()),
    }


@app.get("/api/language")
def get_language():
    """Get the display language."""
    session = _get_session()
    return {"language": session.language}


@app.post("/api/language")
def set_language(update: LanguageUpdate):
    """Switch the display language."""
    session = _get_session()
    try:
        language = session.set_language(update.language)
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {"language": language}
