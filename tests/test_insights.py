"""Tests for rule-based insights."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from fitlog.models.tracking import WeeklyStats
from fitlog.services import insights as rules
from fitlog.services.insights import build_insights


def test_truncation_drops_volume_message():
    result = build_insights(85, 20, WeeklyStats(workouts=1, meals=1, total=2))
    assert result == [
        rules.CONSISTENCY_TIERS[0][1],
        rules.STREAK_TIERS[0][1],
        rules.BALANCED,
    ]


def test_volume_message_survives_when_no_streak_tier():
    result = build_insights(10, 1, WeeklyStats())
    assert result == [rules.CONSISTENCY_TIERS[3][1], rules.NO_ACTIVITY]


def test_messages_carry_emoji_prefix():
    result = build_insights(85, 20, WeeklyStats(workouts=9, meals=1, total=10))
    assert [message.split(" ", 1)[0] for message in result] == ["🔥", "🏆", "🍎"]


@pytest.mark.parametrize("score,expected", [
    (100, 0), (80, 0), (79, 1), (60, 1), (59, 2), (40, 2), (39, 3), (0, 3),
])
def test_consistency_tier_is_always_first(score, expected):
    result = build_insights(score, 0, WeeklyStats(workouts=3, meals=3, total=6))
    assert result[0] == rules.CONSISTENCY_TIERS[expected][1]


@pytest.mark.parametrize("streak,expected", [
    (14, rules.STREAK_TIERS[0][1]),
    (7, rules.STREAK_TIERS[1][1]),
    (3, rules.STREAK_TIERS[2][1]),
])
def test_streak_tiers(streak, expected):
    assert build_insights(50, streak, WeeklyStats(workouts=1, meals=1, total=2))[1] == expected


def test_no_streak_message_below_three():
    result = build_insights(50, 2, WeeklyStats(workouts=1, meals=1, total=2))
    assert result == [rules.CONSISTENCY_TIERS[2][1], rules.BALANCED]


@pytest.mark.parametrize("workouts,meals,expected", [
    (5, 2, rules.MORE_MEALS),
    (3, 0, rules.MORE_MEALS),
    (1, 3, rules.MORE_WORKOUTS),
    (2, 3, rules.BALANCED),
])
def test_balance_rules(workouts, meals, expected):
    result = build_insights(0, 0, WeeklyStats(workouts=workouts, meals=meals, total=workouts + meals))
    assert result[1] == expected


def test_high_weekly_volume():
    result = build_insights(0, 0, WeeklyStats(workouts=4, meals=4, total=8))
    assert result == [rules.CONSISTENCY_TIERS[3][1], rules.BALANCED, rules.HIGH_ACTIVITY]


def test_never_more_than_three():
    result = build_insights(90, 30, WeeklyStats(workouts=10, meals=0, total=10))
    assert len(result) == 3


class TestInsightGenerator:
    def test_unknown_user_gets_nothing(self, insights):
        assert insights.generate(uuid4()) == []

    def test_weekly_stats_window(self, store, insights):
        user = store.add_user()
        now = datetime(2024, 3, 10, 12, tzinfo=timezone.utc)
        store.add_log(user.id, now - timedelta(days=1))
        store.add_log(user.id, now - timedelta(days=2), category="meal")
        store.add_log(user.id, now - timedelta(days=6, hours=23), category="meal")
        store.add_log(user.id, now - timedelta(days=8))

        assert insights.weekly_stats(user.id, now) == WeeklyStats(workouts=1, meals=2, total=3)

    def test_generate_reads_store(self, store, insights):
        user = store.add_user(current_streak=20, longest_streak=20)
        now = datetime(2024, 3, 31, 12, tzinfo=timezone.utc)
        for i in range(26):
            store.add_log(user.id, now - timedelta(days=i), category="workout" if i % 2 else "meal")

        result = insights.generate(user.id, now)

        assert result[0] == rules.CONSISTENCY_TIERS[0][1]
        assert result[1] == rules.STREAK_TIERS[0][1]
        assert result[2] == rules.BALANCED
