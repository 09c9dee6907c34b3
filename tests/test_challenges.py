"""Tests for daily challenge generation and completion."""

from datetime import date

import pytest

from bodybalance.challenges import (
    DAILY_NUTRITION,
    DAILY_WORKOUT,
    REST_DAY,
    SETUP_SCHEDULE,
    WEEKLY_WEIGHT,
    Challenge,
    build_challenges,
    complete_challenge,
    generate_for_today,
    is_week_start,
    prune_completion_log,
    record_completed,
    weekday_name,
)
from bodybalance.errors import InvalidArgument
from bodybalance.models import TrainingDay, UserSchedule

SUNDAY = date(2026, 1, 18)
MONDAY = date(2026, 1, 19)
TUESDAY = date(2026, 1, 20)
WEDNESDAY = date(2026, 1, 21)


@pytest.fixture
def schedule():
    """A finished onboarding schedule training Tuesday and Wednesday."""
    return UserSchedule(
        schedule=[
            TrainingDay(day="tuesday", is_training=True, training_type=["strength"], intensity="intense"),
            TrainingDay(day="wednesday", is_training=True, training_type=[], intensity=None),
            TrainingDay(day="thursday", is_training=False),
        ],
        meal_count=4,
        has_completed_setup=True,
    )


def ids(challenges):
    return [c.id for c in challenges]


class TestWeekHelpers:
    """Tests for weekday helpers."""

    def test_weekday_name(self):
        assert weekday_name(SUNDAY) == "sunday"
        assert weekday_name(TUESDAY) == "tuesday"

    def test_week_start_sunday(self):
        assert is_week_start(SUNDAY) is True
        assert is_week_start(MONDAY) is True
        assert is_week_start(TUESDAY) is False

    def test_week_start_monday(self):
        assert is_week_start(SUNDAY, "monday") is False
        assert is_week_start(MONDAY, "monday") is True
        assert is_week_start(TUESDAY, "monday") is True

    def test_unknown_week_start(self):
        with pytest.raises(InvalidArgument):
            is_week_start(SUNDAY, "someday")


class TestBuildChallenges:
    """Tests for building a day's challenge set."""

    def test_no_schedule_only_setup(self):
        challenges = build_challenges(None, TUESDAY)

        assert ids(challenges) == [SETUP_SCHEDULE]
        assert challenges[0].xp_reward == 25
        assert challenges[0].category == "tracking"

    def test_unfinished_setup_only_setup(self, schedule):
        schedule.has_completed_setup = False

        assert ids(build_challenges(schedule, TUESDAY)) == [SETUP_SCHEDULE]

    def test_training_day(self, schedule):
        challenges = build_challenges(schedule, TUESDAY)

        assert ids(challenges) == [DAILY_WORKOUT, DAILY_NUTRITION]
        workout = challenges[0]
        assert workout.title == "Complete a intense strength workout"
        assert workout.xp_reward == 20
        assert workout.category == "exercise"

    def test_training_day_defaults(self, schedule):
        """Missing intensity and type fall back to moderate general."""
        workout = build_challenges(schedule, WEDNESDAY)[0]

        assert workout.title == "Complete a moderate general workout"
        assert workout.xp_reward == 15

    def test_rest_day(self, schedule):
        challenges = build_challenges(schedule, date(2026, 1, 22))

        assert ids(challenges) == [REST_DAY, DAILY_NUTRITION]
        assert challenges[0].xp_reward == 5
        assert challenges[0].title == "Rest Day - Take care of your body"

    def test_unplanned_day_is_rest_day(self, schedule):
        assert build_challenges(schedule, date(2026, 1, 23))[0].id == REST_DAY

    def test_nutrition_uses_meal_count(self, schedule):
        nutrition = build_challenges(schedule, TUESDAY)[1]

        assert nutrition.title == "Log 4 meals today"
        assert nutrition.xp_reward == 10
        assert nutrition.category == "nutrition"

    def test_weekly_weight_on_week_start(self, schedule):
        assert ids(build_challenges(schedule, SUNDAY)) == [REST_DAY, DAILY_NUTRITION, WEEKLY_WEIGHT]
        assert WEEKLY_WEIGHT in ids(build_challenges(schedule, MONDAY))
        assert WEEKLY_WEIGHT not in ids(build_challenges(schedule, TUESDAY))

    def test_deadline_is_end_of_day(self, schedule):
        for challenge in build_challenges(schedule, TUESDAY):
            assert challenge.deadline == "2026-01-20T23:59:59"
            assert challenge.is_completed is False

    def test_hebrew_titles(self, schedule):
        nutrition = build_challenges(schedule, TUESDAY, language="he")[1]

        assert nutrition.title == "תעד 4 ארוחות היום"


class TestGenerateForToday:
    """Tests for generation with completion restored."""

    def test_first_generation(self, schedule):
        result = generate_for_today(schedule, None, TUESDAY)

        assert result.generation_date == "2026-01-20"
        assert result.regenerated is True
        assert not any(c.is_completed for c in result.challenges)

    def test_same_day_keeps_completion(self, schedule):
        log = {"2026-01-20": [DAILY_WORKOUT]}

        result = generate_for_today(schedule, "2026-01-20", TUESDAY, log)

        assert result.regenerated is False
        flags = {c.id: c.is_completed for c in result.challenges}
        assert flags == {DAILY_WORKOUT: True, DAILY_NUTRITION: False}

    def test_next_day_resets_completion(self, schedule):
        log = {"2026-01-20": [DAILY_WORKOUT, DAILY_NUTRITION]}

        result = generate_for_today(schedule, "2026-01-20", WEDNESDAY, log)

        assert result.regenerated is True
        assert not any(c.is_completed for c in result.challenges)
        assert result.completion_log == log

    def test_accepts_string_date(self, schedule):
        assert generate_for_today(schedule, None, "2026-01-20").generation_date == "2026-01-20"


class TestPruneCompletionLog:
    """Tests for completion log retention."""

    def test_drops_old_dates(self):
        log = {
            "2026-01-20": ["a"],
            "2026-01-13": ["b"],
            "2026-01-12": ["c"],
        }

        assert prune_completion_log(log, TUESDAY) == {"2026-01-20": ["a"], "2026-01-13": ["b"]}

    def test_drops_bad_dates(self):
        assert prune_completion_log({"garbage": ["a"]}, TUESDAY) == {}


class TestCompleteChallenge:
    """Tests for completing challenges."""

    def test_complete_awards_reward(self, schedule):
        generated = generate_for_today(schedule, None, TUESDAY)

        result = complete_challenge(DAILY_WORKOUT, generated.challenges, generated.completion_log, TUESDAY)

        assert result.xp_to_award == 20
        assert result.newly_completed is True
        assert result.is_first_completion_today is True
        assert result.challenge.is_completed is True
        assert result.completion_log == {"2026-01-20": [DAILY_WORKOUT]}
        assert [c.is_completed for c in result.challenges] == [True, False]

    def test_double_completion_awards_nothing(self, schedule):
        generated = generate_for_today(schedule, None, TUESDAY)
        first = complete_challenge(DAILY_WORKOUT, generated.challenges, generated.completion_log, TUESDAY)

        second = complete_challenge(DAILY_WORKOUT, first.challenges, first.completion_log, TUESDAY)

        assert second.xp_to_award == 0
        assert second.newly_completed is False
        assert second.completion_log == first.completion_log

    def test_second_challenge_is_not_first(self, schedule):
        generated = generate_for_today(schedule, None, TUESDAY)
        first = complete_challenge(DAILY_WORKOUT, generated.challenges, generated.completion_log, TUESDAY)

        second = complete_challenge(DAILY_NUTRITION, first.challenges, first.completion_log, TUESDAY)

        assert second.xp_to_award == 10
        assert second.is_first_completion_today is False
        assert second.completion_log["2026-01-20"] == [DAILY_WORKOUT, DAILY_NUTRITION]

    def test_setup_completion_requires_setup(self):
        generated = generate_for_today(None, None, TUESDAY)

        result = complete_challenge(SETUP_SCHEDULE, generated.challenges, generated.completion_log, TUESDAY)

        assert result.requires_setup is True
        assert result.xp_to_award == 25

    def test_unknown_id_raises(self, schedule):
        generated = generate_for_today(schedule, None, TUESDAY)

        with pytest.raises(InvalidArgument):
            complete_challenge("run-marathon", generated.challenges, {}, TUESDAY)

    def test_id_not_in_todays_set_raises(self, schedule):
        generated = generate_for_today(schedule, None, TUESDAY)

        with pytest.raises(InvalidArgument):
            complete_challenge(REST_DAY, generated.challenges, {}, TUESDAY)

    def test_inputs_not_mutated(self, schedule):
        generated = generate_for_today(schedule, None, TUESDAY)
        log = {}

        complete_challenge(DAILY_WORKOUT, generated.challenges, log, TUESDAY)

        assert log == {}
        assert not any(c.is_completed for c in generated.challenges)


class TestRecordCompleted:
    """Tests for the completed challenge history."""

    def test_most_recent_first(self):
        workout = Challenge(id=DAILY_WORKOUT, title="Workout", description="", xp_reward=15, category="exercise")
        nutrition = Challenge(id=DAILY_NUTRITION, title="Meals", description="", xp_reward=10, category="nutrition")

        history = record_completed([], workout, "2026-01-20T08:00:00")
        history = record_completed(history, nutrition, "2026-01-20T19:00:00")

        assert [h["id"] for h in history] == [DAILY_NUTRITION, DAILY_WORKOUT]
        assert history[0]["completed_date"] == "2026-01-20T19:00:00"
        assert history[0]["is_completed"] is True

    def test_capped_at_twenty(self):
        rest = Challenge(id=REST_DAY, title="Rest", description="", xp_reward=5, category="exercise")
        history = []
        for day in range(1, 26):
            history = record_completed(history, rest, f"2026-01-{day:02d}T12:00:00")

        assert len(history) == 20
        assert history[0]["completed_date"] == "2026-01-25T12:00:00"
        assert history[-1]["completed_date"] == "2026-01-06T12:00:00"

    def test_input_history_not_mutated(self):
        rest = Challenge(id=REST_DAY, title="Rest", description="", xp_reward=5, category="exercise")
        history = []

        record_completed(history, rest, "2026-01-20T12:00:00")

        assert history == []
