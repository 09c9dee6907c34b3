"""Tests for localized display text."""

import pytest

from bodybalance.translations import achievement_text, challenge_text, level_title


class TestLevelTitle:
    def test_english_titles(self):
        assert level_title(1) == "Beginner"
        assert level_title(10) == "Undefeated"

    def test_hebrew_title(self):
        assert level_title(3, "he") == "שוליה"

    def test_unknown_language_falls_back_to_english(self):
        assert level_title(2, "fr") == "Novice"


class TestAchievementText:
    def test_streak_text(self):
        title, description = achievement_text("streak:exercise:7")

        assert title == "7 Day Exercise Tracking Streak"
        assert description == "You've tracked your exercise for 7 consecutive days"

    def test_entry_text(self):
        assert achievement_text("entries:meal:50")[0] == "50 Meal Entries"

    def test_level_text(self):
        title, description = achievement_text("level:5")

        assert title == "Level Up to 5!"
        assert description.endswith("level 5 - Expert")

    def test_special_text(self):
        assert achievement_text("special:first-challenge", "he")[0] == "מסע מתחיל בצעד הראשון"

    def test_unknown_family(self):
        with pytest.raises(KeyError):
            achievement_text("mystery:1")


class TestChallengeText:
    def test_workout_title_localized(self):
        assert challenge_text("daily-workout", "en", intensity="light", workout_type="cardio")[0] == (
            "Complete a light cardio workout"
        )
        assert challenge_text("daily-workout", "he", intensity="light", workout_type="cardio")[0] == (
            "השלם אימון קרדיו קל"
        )

    def test_unlisted_workout_type_passes_through(self):
        title, _ = challenge_text("daily-workout", "en", intensity="moderate", workout_type="yoga")

        assert title == "Complete a moderate yoga workout"
