"""Tests for catalog-based habit recommendations."""

import random
from datetime import time

import pytest

from habitgem.core.catalog import CATALOG, GENERIC_SCIENTIFIC_BASIS, STARTER_SET, candidates_for
from habitgem.core.recommendation_engine import (
    INITIAL_LIMIT, PERSONALIZED_LIMIT, RecommendationEngine, deduplicate, favored_categories
)
from habitgem.models import GoalType, HabitCategory, TimeSlot, UserPreferences


@pytest.fixture
def engine():
    return RecommendationEngine(rng=random.Random(3))


def assert_valid(recommendations, target):
    assert all(abs(r.difficulty - target) <= 2 for r in recommendations)
    keys = [(r.category, r.name) for r in recommendations]
    assert len(keys) == len(set(keys))


# ── Cold start ──────────────────────────────────────────────────────────

@pytest.mark.parametrize("difficulty", [1, 3, 5])
def test_initial_respects_difficulty_and_uniqueness(engine, difficulty):
    preferences = UserPreferences(
        habit_categories=list(CATALOG),
        goal_types=[GoalType.HEALTH_IMPROVEMENT],
        difficulty_preference=difficulty,
    )
    recommendations = engine.initial_recommendations(preferences)

    assert len(recommendations) <= INITIAL_LIMIT
    assert_valid(recommendations, difficulty)


def test_initial_goal_adds_missing_category(engine):
    preferences = UserPreferences(
        habit_categories=[HabitCategory.LEARNING],
        goal_types=[GoalType.STRESS_REDUCTION],
        difficulty_preference=2,
    )
    recommendations = engine.initial_recommendations(preferences)
    assert CATALOG[HabitCategory.MINDFULNESS][0] in recommendations


def test_initial_goal_extra_passes_difficulty_filter(engine):
    preferences = UserPreferences(
        habit_categories=[HabitCategory.LEARNING],
        goal_types=[GoalType.HEALTH_IMPROVEMENT],
        difficulty_preference=5,
    )
    recommendations = engine.initial_recommendations(preferences)
    assert [r.id for r in recommendations] == ["learning_skill", "health_posture"]


def test_initial_time_filter(engine):
    # 60 minutes every day -> at most 30 minutes per habit
    slots = {day: [TimeSlot(time(7, 0), time(8, 0))] for day in range(7)}
    preferences = UserPreferences(
        habit_categories=[HabitCategory.FITNESS, HabitCategory.PRODUCTIVITY],
        difficulty_preference=3,
        time_availability=slots,
    )
    recommendations = engine.initial_recommendations(preferences)
    assert recommendations
    assert all(r.estimated_minutes_per_day <= 30 for r in recommendations)

    tight = UserPreferences(
        habit_categories=[HabitCategory.FITNESS],
        difficulty_preference=3,
        time_availability={0: [TimeSlot(time(7, 0), time(7, 30))]},
    )
    assert engine.initial_recommendations(tight) == []


def test_initial_without_catalog_category_uses_generic(engine):
    preferences = UserPreferences(habit_categories=[HabitCategory.FINANCE], difficulty_preference=2)
    recommendations = engine.initial_recommendations(preferences)
    assert len(recommendations) == 1
    assert recommendations[0].category == HabitCategory.FINANCE
    assert recommendations[0].id.startswith("generic_")


def test_generic_recommendation_is_stable(engine):
    preferences = UserPreferences(habit_categories=[HabitCategory.CREATIVITY], difficulty_preference=2)
    first = engine.initial_recommendations(preferences)
    second = engine.initial_recommendations(preferences)
    assert first == second
    assert first[0].id == "generic_creativity"


def test_candidates_for_catalog_category():
    assert candidates_for(HabitCategory.HEALTH, 3) == CATALOG[HabitCategory.HEALTH]


# ── Personalized ────────────────────────────────────────────────────────

def test_personalized_without_habits_is_starter_set(engine):
    assert engine.personalized_recommendations([]) == STARTER_SET


def test_personalized_filters_and_ranks(engine, make_habit):
    habits = [
        make_habit("a", "Meditation", HabitCategory.MINDFULNESS, difficulty=2),
        make_habit("b", "Deep breathing", HabitCategory.MINDFULNESS, difficulty=2),
        make_habit("c", "Daily water", HabitCategory.HEALTH, difficulty=2),
    ]
    recommendations = engine.personalized_recommendations(habits)

    assert 0 < len(recommendations) <= PERSONALIZED_LIMIT
    assert_valid(recommendations, 2)
    names = {r.name.lower() for r in recommendations}
    assert not names & {"meditation", "deep breathing", "daily water"}
    assert recommendations[0].category == HabitCategory.MINDFULNESS


def test_personalized_is_deterministic_with_seeded_rng(make_habit):
    habits = [make_habit("a", "Run", HabitCategory.FITNESS, difficulty=3)]
    first = RecommendationEngine(rng=random.Random(5)).personalized_recommendations(habits)
    second = RecommendationEngine(rng=random.Random(5)).personalized_recommendations(habits)
    assert [r.id for r in first] == [r.id for r in second]


@pytest.mark.parametrize("seed", range(10))
def test_personalized_adds_at_most_one_complementary(make_habit, seed):
    habits = [make_habit("a", "Run", HabitCategory.FITNESS, difficulty=3)]
    recommendations = RecommendationEngine(rng=random.Random(seed)).personalized_recommendations(habits)

    others = [r for r in recommendations if r.category != HabitCategory.FITNESS]
    assert len(others) <= 1
    assert [r.category for r in recommendations].count(HabitCategory.FITNESS) == 3


def test_personalize_remote_results(engine, make_habit):
    habits = [make_habit("a", category=HabitCategory.LEARNING, difficulty=1)]
    remote = CATALOG[HabitCategory.FITNESS] + CATALOG[HabitCategory.LEARNING]
    result = engine.personalize(remote, habits)

    assert len(result) <= PERSONALIZED_LIMIT
    assert_valid(result, 1)
    assert result[0].category == HabitCategory.LEARNING


# ── Helpers ─────────────────────────────────────────────────────────────

def test_deduplicate_keeps_first():
    walk_catalog = CATALOG[HabitCategory.FITNESS][1]
    walk_starter = STARTER_SET[2]
    assert deduplicate([walk_catalog, walk_starter]) == [walk_catalog]


def test_favored_categories_by_count(make_habit):
    habits = [
        make_habit("a", category=HabitCategory.HEALTH),
        make_habit("b", category=HabitCategory.LEARNING),
        make_habit("c", category=HabitCategory.LEARNING),
    ]
    assert favored_categories(habits) == [HabitCategory.LEARNING, HabitCategory.HEALTH]


# ── Evidence ────────────────────────────────────────────────────────────

def test_evidence_from_catalog(engine):
    evidence = engine.evidence_for("mindfulness_meditation")
    assert evidence.scientific_basis == CATALOG[HabitCategory.MINDFULNESS][0].scientific_basis


def test_evidence_generic_fallback(engine):
    evidence = engine.evidence_for("unknown")
    assert evidence.habit_id == "unknown"
    assert evidence.scientific_basis == GENERIC_SCIENTIFIC_BASIS
