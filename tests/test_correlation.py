"""Tests for phi-coefficient habit correlations."""

from datetime import timedelta

import pytest

from habitgem.core.correlation import (
    ContingencyTable, CorrelationEngine, build_contingency_table, classify_strength, phi_coefficient
)
from habitgem.models import CorrelationType


@pytest.fixture
def engine(settings):
    return CorrelationEngine(settings)


@pytest.fixture
def pair(make_habit):
    return make_habit("a", "Meditation"), make_habit("b", "Journaling")


# ── Contingency table ───────────────────────────────────────────────────

def test_table_uses_only_common_dates(history, monday):
    a = history([True, True, False, False], habit_id="a")
    b = history([True, False, True], habit_id="b", start=monday + timedelta(days=1))
    table = build_contingency_table(a, b)
    # common days: +1 (T, T), +2 (F, F), +3 (F, T)
    assert table == ContingencyTable(both=1, only_a=0, only_b=1, neither=1)
    assert table.total == 3


def test_last_record_per_date_wins(record, monday):
    a = [record(monday, True, habit_id="a"), record(monday, False, habit_id="a")]
    b = [record(monday, False, habit_id="b")]
    assert build_contingency_table(a, b).neither == 1


# ── Phi coefficient ─────────────────────────────────────────────────────

def test_table_as_array():
    table = ContingencyTable(both=1, only_a=2, only_b=3, neither=4)
    assert table.as_array().tolist() == [[1, 2], [3, 4]]


def test_phi_matches_closed_form():
    # (4*3 - 1*2) / sqrt(5 * 5 * 6 * 4)
    table = ContingencyTable(both=4, only_a=1, only_b=2, neither=3)
    assert phi_coefficient(table) == pytest.approx(10 / 600 ** 0.5)


def test_phi_zero_denominator():
    assert phi_coefficient(ContingencyTable(both=10)) == 0.0


@pytest.mark.parametrize("table,expected", [
    (ContingencyTable(both=5, neither=5), 1.0),
    (ContingencyTable(only_a=5, only_b=5), -1.0),
    (ContingencyTable(both=2, only_a=2, only_b=2, neither=2), 0.0),
])
def test_phi_known_values(table, expected):
    assert phi_coefficient(table) == pytest.approx(expected)


@pytest.mark.parametrize("counts", [
    (1, 2, 3, 4), (9, 0, 1, 7), (0, 5, 5, 0), (3, 3, 0, 1), (100, 1, 1, 100),
])
def test_phi_bounded_and_idempotent(counts):
    table = ContingencyTable(*counts)
    first = phi_coefficient(table)
    assert -1.0 <= first <= 1.0
    assert phi_coefficient(table) == first


@pytest.mark.parametrize("strength,expected", [
    (0.5, CorrelationType.POSITIVE),
    (-0.5, CorrelationType.NEGATIVE),
    (0.3, CorrelationType.NEUTRAL),
    (0.0, CorrelationType.NEUTRAL),
])
def test_classify_strength(strength, expected):
    assert classify_strength(strength) == expected


# ── correlate ───────────────────────────────────────────────────────────

@pytest.mark.parametrize("common_days", [0, 1, 4])
def test_fewer_than_five_common_days_is_zero(engine, pair, history, common_days):
    statuses = [i % 2 == 0 for i in range(common_days)]
    a = history(statuses, habit_id="a")
    b = history(statuses, habit_id="b")
    correlation = engine.correlate(pair[0], a, pair[1], b)
    assert correlation.strength == 0
    assert correlation.type == CorrelationType.NEUTRAL


def test_identical_histories_positive(engine, pair, history):
    statuses = [i % 2 == 0 for i in range(10)]
    correlation = engine.correlate(pair[0], history(statuses, habit_id="a"),
                                   pair[1], history(statuses, habit_id="b"))
    assert correlation.strength == pytest.approx(1.0)
    assert correlation.type == CorrelationType.POSITIVE
    assert "Meditation" in correlation.description


def test_opposite_histories_negative(engine, pair, history):
    statuses = [i % 2 == 0 for i in range(10)]
    correlation = engine.correlate(pair[0], history(statuses, habit_id="a"),
                                   pair[1], history([not s for s in statuses], habit_id="b"))
    assert correlation.strength == pytest.approx(-1.0)
    assert correlation.type == CorrelationType.NEGATIVE


# ── find_correlations ───────────────────────────────────────────────────

def test_find_correlations_needs_two_habits(engine, make_habit, history):
    habit = make_habit("a")
    assert engine.find_correlations([habit], {"a": history([True] * 10, habit_id="a")}) == []
    assert engine.find_correlations([], {}) == []


def test_find_correlations_sorted_by_magnitude(engine, make_habit, history):
    base = [i % 2 == 0 for i in range(12)]
    # c matches a on all but two days
    partial = list(base)
    partial[0] = not partial[0]
    partial[1] = not partial[1]
    habits = [make_habit("a"), make_habit("b"), make_habit("c")]
    records = {
        "a": history(base, habit_id="a"),
        "b": history([not s for s in base], habit_id="b"),
        "c": history(partial, habit_id="c"),
    }

    correlations = engine.find_correlations(habits, records)

    strengths = [abs(c.strength) for c in correlations]
    assert strengths == sorted(strengths, reverse=True)
    assert all(s > 0.3 for s in strengths)
    assert (correlations[0].habit_id_a, correlations[0].habit_id_b) == ("a", "b")


def test_find_correlations_filters_weak_pairs(engine, make_habit, history):
    habits = [make_habit("a"), make_habit("b")]
    records = {
        "a": history([True, True, False, False] * 3, habit_id="a"),
        "b": history([True, False] * 6, habit_id="b"),
    }
    assert engine.find_correlations(habits, records) == []
