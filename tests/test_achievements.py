"""Tests for the achievements module."""

from datetime import date, timedelta

import pytest

from bodybalance.achievements import (
    ENTRY_MILESTONES,
    FIRST_CHALLENGE_ID,
    MILESTONES,
    STREAK_MILESTONES,
    Achievement,
    check_achievements,
    evaluate,
    first_challenge_achievement,
    get_all_achievements_status,
    level_up_achievement,
    localize,
    sort_achievements,
)
from bodybalance.xp_ledger import XpState, award_xp


def daily_entries(count: int, end: str = "2026-01-20", step: int = 1) -> list[dict]:
    """Build entries on consecutive days ending at `end`."""
    last = date.fromisoformat(end)
    return [{"date": (last - timedelta(days=i * step)).isoformat()} for i in range(count)]


def spread_entries(count: int, end: str = "2026-01-20") -> list[dict]:
    """Build entries two days apart so no streak forms."""
    return daily_entries(count, end, step=2)


class TestMilestoneDefinitions:
    """Tests for milestone definitions."""

    def test_all_milestones_have_unique_ids(self):
        ids = [m.id for m in MILESTONES]
        assert len(ids) == len(set(ids))

    def test_milestone_counts(self):
        """Three activity kinds times three thresholds for each family."""
        assert len(STREAK_MILESTONES) == 9
        assert len(ENTRY_MILESTONES) == 9

    def test_streak_rewards_and_levels(self):
        expected = {3: ("bronze", 30), 7: ("silver", 70), 30: ("gold", 300)}
        for milestone in STREAK_MILESTONES:
            assert milestone.type == "medal"
            assert milestone.category == "consistency"
            assert (milestone.level, milestone.xp_reward) == expected[milestone.threshold]

    def test_entry_rewards_and_levels(self):
        expected = {10: "bronze", 50: "silver", 100: "gold"}
        for milestone in ENTRY_MILESTONES:
            assert milestone.type == "trophy"
            assert milestone.category == "milestone"
            assert milestone.level == expected[milestone.threshold]
            assert milestone.xp_reward == milestone.threshold

    def test_milestone_ids_are_locale_independent(self):
        ids = {m.id for m in MILESTONES}
        assert "streak:weight:7" in ids
        assert "entries:meal:50" in ids


class TestCheckAchievements:
    """Tests for check_achievements function."""

    def test_nothing_with_zero_stats(self):
        assert check_achievements({}, {}, set()) == []

    def test_streak_3_unlocks(self):
        unlocked = check_achievements({"weight": 3}, {"weight": 3}, set())
        assert [m.id for m in unlocked] == ["streak:weight:3"]

    def test_skips_unlocked_ids(self):
        unlocked = check_achievements(
            {"exercise": 10},
            {"exercise": 10},
            {"streak:exercise:3", "entries:exercise:10"},
        )
        assert {m.id for m in unlocked} == {"streak:exercise:7"}


class TestEvaluate:
    """Tests for the evaluate function."""

    def test_three_day_weight_streak(self):
        """3 consecutive weight entries mint one bronze medal worth 30 XP."""
        history = {"weight": daily_entries(3)}

        result = evaluate(history, [], XpState(), today="2026-01-20")

        assert len(result.new_achievements) == 1
        achievement = result.new_achievements[0]
        assert achievement.milestone_id == "streak:weight:3"
        assert achievement.title == "3 Day Weight Tracking Streak"
        assert achievement.type == "medal"
        assert achievement.level == "bronze"
        assert achievement.xp_reward == 30
        assert achievement.date_earned == "2026-01-20"
        assert result.xp_to_award == 30

    def test_second_call_is_idempotent(self):
        """Evaluating again with the returned achievements yields nothing."""
        history = {"weight": daily_entries(7), "meal": spread_entries(10)}

        first = evaluate(history, [], XpState(), today="2026-01-20")
        second = evaluate(history, first.new_achievements, XpState(), today="2026-01-20")

        assert first.new_achievements
        assert second.new_achievements == []
        assert second.xp_to_award == 0

    def test_multiple_milestones_summed(self):
        history = {"exercise": daily_entries(10)}

        result = evaluate(history, [], XpState(), today="2026-01-20")

        ids = {a.milestone_id for a in result.new_achievements}
        assert ids == {"streak:exercise:3", "streak:exercise:7", "entries:exercise:10"}
        assert result.xp_to_award == 30 + 70 + 10

    def test_entry_count_without_streak(self):
        history = {"meal": spread_entries(50)}

        result = evaluate(history, [], XpState(), today="2026-01-20")

        ids = {a.milestone_id for a in result.new_achievements}
        assert ids == {"entries:meal:10", "entries:meal:50"}
        assert result.xp_to_award == 60

    def test_gap_prevents_streak_medal(self):
        history = {"weight": [{"date": "2026-01-20"}, {"date": "2026-01-19"}, {"date": "2026-01-17"}]}

        result = evaluate(history, [], XpState(), today="2026-01-20")

        assert result.new_achievements == []

    def test_level_badge_for_current_level(self):
        state = award_xp(XpState(), 150).state

        result = evaluate({}, [], state, today="2026-01-20")

        assert len(result.new_achievements) == 1
        badge = result.new_achievements[0]
        assert badge.milestone_id == "level:2"
        assert badge.type == "badge"
        assert badge.category == "milestone"
        assert badge.xp_reward == 0
        assert result.xp_to_award == 0

    def test_no_level_badge_at_level_one(self):
        assert evaluate({}, [], XpState(), today="2026-01-20").new_achievements == []

    def test_level_badge_not_duplicated(self):
        state = award_xp(XpState(), 150).state
        existing = [level_up_achievement(2, "2026-01-19")]

        assert evaluate({}, existing, state, today="2026-01-20").new_achievements == []

    def test_dedup_ignores_language(self):
        """An achievement earned in Hebrew blocks the English one."""
        history = {"weight": daily_entries(3)}
        hebrew = evaluate(history, [], None, today="2026-01-20", language="he")

        english = evaluate(history, hebrew.new_achievements, None, today="2026-01-20", language="en")

        assert hebrew.new_achievements[0].title != "3 Day Weight Tracking Streak"
        assert english.new_achievements == []

    def test_dedup_against_stored_dicts(self):
        history = {"weight": daily_entries(3)}
        stored = [{"milestone_id": "streak:weight:3"}]

        assert evaluate(history, stored, None, today="2026-01-20").new_achievements == []

    def test_history_is_not_mutated(self):
        history = {"weight": daily_entries(3)}
        snapshot = [dict(e) for e in history["weight"]]

        evaluate(history, [], XpState(), today="2026-01-20")

        assert history["weight"] == snapshot


class TestSpecialAchievements:
    """Tests for level-up and first-challenge badges."""

    @pytest.mark.parametrize("level,tier", [(2, "bronze"), (5, "silver"), (9, "silver"), (10, "gold")])
    def test_level_badge_tier(self, level, tier):
        assert level_up_achievement(level, "2026-01-20").level == tier

    def test_level_badge_title(self):
        badge = level_up_achievement(3, "2026-01-20")
        assert badge.title == "Level Up to 3!"
        assert "Apprentice" in badge.description

    def test_first_challenge_badge(self):
        badge = first_challenge_achievement("2026-01-20")

        assert badge.milestone_id == FIRST_CHALLENGE_ID
        assert badge.title == "A Journey Begins"
        assert badge.type == "badge"
        assert badge.category == "special"
        assert badge.xp_reward == 25


class TestReadModels:
    """Tests for display helpers."""

    def test_sort_most_recent_first(self):
        older = level_up_achievement(2, "2026-01-01")
        newer = level_up_achievement(3, "2026-01-10")

        assert sort_achievements([older, newer]) == [newer, older]

    def test_localize_rederives_title(self):
        badge = level_up_achievement(2, "2026-01-20", language="en")

        data = localize(badge, "he")

        assert data["title"] == "עלית לרמה 2!"
        assert data["milestone_id"] == "level:2"

    def test_catalog_status(self):
        earned = evaluate({"weight": daily_entries(3)}, [], None, today="2026-01-20").new_achievements

        catalog = get_all_achievements_status(earned)

        assert len(catalog) == len(MILESTONES) + 1
        by_id = {item["id"]: item for item in catalog}
        assert by_id["streak:weight:3"]["unlocked"] is True
        assert by_id["streak:weight:3"]["date_earned"] == "2026-01-20"
        assert by_id["streak:weight:7"]["unlocked"] is False
        assert by_id[FIRST_CHALLENGE_ID]["unlocked"] is False

    def test_round_trip_dict(self):
        badge = first_challenge_achievement("2026-01-20")

        assert Achievement.from_dict(badge.to_dict()) == badge
