"""Tests for the remote-first service facades and the service manager."""

import random
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from habitgem.core.catalog import STARTER_SET
from habitgem.core.feedback_templates import DEFAULT_FEEDBACK, FeedbackTemplateEngine
from habitgem.core.insight_generator import KEEP_LOGGING_MESSAGE, InsightGenerator
from habitgem.core.pattern_analyzer import PatternAnalyzer
from habitgem.core.recommendation_engine import RecommendationEngine
from habitgem.models import (
    CorrelationType, FeedbackType, HabitCategory, ReportPeriod, Trend, UserPreferences, WeeklyFrequency
)
from habitgem.services import (
    AIServiceClient, HabitAnalysisService, HabitRecommendationService, InMemoryRecordStore,
    ProgressFeedbackService, RecordStore, RemoteErrorKind, RemoteResult, ServiceManager,
    close_all_services, get_service_manager, initialize_all_services
)
from habitgem.services.api_models import (
    HabitAnalysisResponse, HabitRecommendationResponse, ProgressFeedbackResponse
)
from habitgem.services.feedback_service import GENERIC_ANALYSIS, previous_streak
from habitgem.services.recommendation_service import initial_cache_key, personalized_cache_key


# ── Fixtures ────────────────────────────────────────────────────────────

@pytest.fixture
def disabled_client(disabled_ai_settings):
    return AIServiceClient(disabled_ai_settings)


@pytest.fixture
def mock_client():
    return AsyncMock(spec=AIServiceClient)


@pytest.fixture
def broken_store():
    store = AsyncMock(spec=RecordStore)
    for method in ("list_records", "list_records_by_date_range", "list_habits", "get_habit", "current_streak"):
        getattr(store, method).side_effect = RuntimeError("storage unavailable")
    return store


@pytest.fixture
def store(habit, weekday_history):
    store = InMemoryRecordStore()
    store.add_habit(habit)
    store.add_records(weekday_history)
    return store


def remote_recommendations():
    return HabitRecommendationResponse.model_validate({
        "recommendations": [{
            "id": "r1",
            "name": "Evening stretch",
            "category": "FITNESS",
            "difficulty": 2,
            "suggested_frequency": {"type": "WEEKLY", "days_of_week": ["MONDAY", "THURSDAY"]},
            "estimated_time_per_day": 10,
        }],
        "request_id": "req-1",
    })


# ── Record store ────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_in_memory_store_queries(store, make_habit, history, monday):
    other = store.add_habit(make_habit("h2", user_id="u2"))
    store.add_records(history([True] * 3, habit_id=other.id))

    assert [h.id for h in await store.list_habits("u1")] == ["h1"]
    records = await store.list_records_by_date_range("u1", monday, monday + timedelta(days=6))
    assert len(records) == 7
    assert {r.habit_id for r in records} == {"h1"}
    assert await store.get_habit("missing") is None


@pytest.mark.asyncio
async def test_store_derived_metrics(store, monday):
    assert await store.current_streak("h1") == 2
    assert await store.longest_streak("h1") == 5
    assert await store.completion_rate("h1", (monday, monday + timedelta(days=6))) == pytest.approx(5 / 7)


# ── Recommendations ─────────────────────────────────────────────────────

def test_initial_cache_key():
    assert initial_cache_key(UserPreferences.default()) == "anonymous_HEALTH_MINDFULNESS_PRODUCTIVITY_2"


@pytest.mark.asyncio
async def test_initial_recommendations_fall_back_to_catalog(store, disabled_client):
    service = HabitRecommendationService(store, disabled_client)
    recommendations = await service.get_initial_recommendations()
    assert recommendations == RecommendationEngine().initial_recommendations(UserPreferences.default())


@pytest.mark.asyncio
async def test_initial_recommendations_from_remote_are_cached(store, mock_client):
    mock_client.get_recommendations.return_value = RemoteResult.ok(remote_recommendations())
    service = HabitRecommendationService(store, mock_client)

    first = await service.get_initial_recommendations(UserPreferences.default())
    second = await service.get_initial_recommendations(UserPreferences.default())

    assert first == second
    assert first[0].name == "Evening stretch"
    assert first[0].suggested_frequency == WeeklyFrequency((1, 4))
    mock_client.get_recommendations.assert_awaited_once()
    request = mock_client.get_recommendations.call_args.args[0]
    assert request.user_id == "anonymous"
    assert request.preferences.difficulty_preference == 2


@pytest.mark.asyncio
async def test_personalized_with_broken_store_uses_starter_set(broken_store, disabled_client):
    service = HabitRecommendationService(broken_store, disabled_client)
    assert await service.get_personalized_recommendations("u1") == STARTER_SET


@pytest.mark.asyncio
async def test_personalized_remote_sends_existing_habits(store, mock_client):
    mock_client.get_recommendations.return_value = RemoteResult.ok(remote_recommendations())
    service = HabitRecommendationService(store, mock_client)

    recommendations = await service.get_personalized_recommendations("u1")

    request = mock_client.get_recommendations.call_args.args[0]
    assert request.existing_habits == ["h1"]
    assert [r.id for r in recommendations] == ["r1"]


def test_personalized_cache_key_tracks_preferences():
    assert personalized_cache_key("u1", None) == "u1"
    easy = personalized_cache_key("u1", UserPreferences(difficulty_preference=1))
    hard = personalized_cache_key("u1", UserPreferences(difficulty_preference=5))
    assert easy != hard
    assert easy == personalized_cache_key("u1", UserPreferences(difficulty_preference=1))


@pytest.mark.asyncio
async def test_personalized_cache_separates_preferences(store, mock_client):
    mock_client.get_recommendations.return_value = RemoteResult.ok(remote_recommendations())
    service = HabitRecommendationService(store, mock_client)

    await service.get_personalized_recommendations("u1", UserPreferences(difficulty_preference=2))
    await service.get_personalized_recommendations("u1", UserPreferences(difficulty_preference=2))
    await service.get_personalized_recommendations("u1", UserPreferences(difficulty_preference=4))

    assert mock_client.get_recommendations.await_count == 2


@pytest.mark.asyncio
async def test_evidence_is_cached(store, disabled_client):
    service = HabitRecommendationService(store, disabled_client)
    first = await service.get_habit_evidence("mindfulness_meditation")
    second = await service.get_habit_evidence("mindfulness_meditation")

    assert first is second
    assert service.get_cache_stats()["evidence"]["hits"] == 1


# ── Analysis ────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_insights_computed_locally_when_disabled(store, disabled_client, settings, weekday_history):
    service = HabitAnalysisService(store, disabled_client, settings)
    expected = InsightGenerator(PatternAnalyzer(settings)).generate_insight("h1", weekday_history)
    assert await service.get_habit_insights("u1", "h1") == expected


@pytest.mark.asyncio
async def test_insights_from_remote(store, mock_client, settings):
    mock_client.get_analysis.return_value = RemoteResult.ok(HabitAnalysisResponse.model_validate({
        "insights": [{
            "habit_id": "h1",
            "best_performing_days": ["MONDAY"],
            "completion_trend": "improving",
            "consistency_score": 0.8,
            "insight_message": "Great",
        }],
        "request_id": "r",
    }))
    insight = await HabitAnalysisService(store, mock_client, settings).get_habit_insights("u1", "h1")

    assert insight.best_performing_days == [0]
    assert insight.completion_trend == Trend.IMPROVING
    assert mock_client.get_analysis.call_args.args[0].analysis_type == "INSIGHTS"


@pytest.mark.asyncio
async def test_empty_remote_insights_fall_back(store, mock_client, settings):
    mock_client.get_analysis.return_value = RemoteResult.ok(
        HabitAnalysisResponse(insights=[], request_id="r")
    )
    insight = await HabitAnalysisService(store, mock_client, settings).get_habit_insights("u1", "h1")
    assert insight.best_performing_days == [0, 1]


@pytest.mark.asyncio
async def test_insights_with_broken_store(broken_store, disabled_client, settings):
    insight = await HabitAnalysisService(broken_store, disabled_client, settings).get_habit_insights("u1", "h1")
    assert insight.completion_trend == Trend.NOT_ENOUGH_DATA
    assert insight.insight_message == KEEP_LOGGING_MESSAGE


@pytest.mark.asyncio
async def test_suggestions_for_missing_habit(store, disabled_client, settings):
    service = HabitAnalysisService(store, disabled_client, settings)
    assert await service.get_optimization_suggestions("u1", "missing") == []


@pytest.mark.asyncio
async def test_suggestions_computed_locally(store, disabled_client, settings, habit, weekday_history):
    service = HabitAnalysisService(store, disabled_client, settings)
    expected = InsightGenerator(PatternAnalyzer(settings)).generate_suggestions(habit, weekday_history)
    assert await service.get_optimization_suggestions("u1", "h1") == expected


@pytest.mark.asyncio
async def test_suggestions_fall_back_on_timeout(store, mock_client, settings):
    mock_client.get_analysis.return_value = RemoteResult.fail(RemoteErrorKind.TIMEOUT, "timed out")
    suggestions = await HabitAnalysisService(store, mock_client, settings).get_optimization_suggestions("u1", "h1")
    assert suggestions


@pytest.mark.asyncio
async def test_missing_remote_suggestions_fall_back(store, mock_client, settings, habit, weekday_history):
    mock_client.get_analysis.return_value = RemoteResult.ok(HabitAnalysisResponse.model_validate({
        "insights": [{
            "habit_id": "h1",
            "completion_trend": "STABLE",
            "consistency_score": 0.5,
            "insight_message": "ok",
        }],
        "request_id": "r",
    }))
    suggestions = await HabitAnalysisService(store, mock_client, settings).get_optimization_suggestions("u1", "h1")

    expected = InsightGenerator(PatternAnalyzer(settings)).generate_suggestions(habit, weekday_history)
    assert suggestions
    assert suggestions == expected


@pytest.mark.asyncio
async def test_correlations(store, disabled_client, settings, make_habit, history, weekday_history):
    store.add_habit(make_habit("h2", "Journal"))
    store.add_records(history([r.is_completed for r in weekday_history], habit_id="h2"))

    correlations = await HabitAnalysisService(store, disabled_client, settings).get_habit_correlations("u1")

    assert len(correlations) == 1
    assert correlations[0].type == CorrelationType.POSITIVE


@pytest.mark.asyncio
async def test_correlations_with_broken_store(broken_store, disabled_client, settings):
    assert await HabitAnalysisService(broken_store, disabled_client, settings).get_habit_correlations("u1") == []


@pytest.mark.asyncio
async def test_local_analytics_passthrough(store, disabled_client, settings, monday):
    service = HabitAnalysisService(store, disabled_client, settings)

    probability = await service.predict_completion("h1", monday + timedelta(days=30))
    clusters = await service.get_habit_clusters("h1", cluster_count=2, seed=1)

    assert 0.0 <= probability <= 1.0
    assert sum(len(members) for members in clusters.values()) == 30
    assert await service.get_trend("h1") in set(Trend)


# ── Feedback ────────────────────────────────────────────────────────────

@pytest.fixture
def feedback_service_factory(disabled_client):
    def _make(store, client=None):
        return ProgressFeedbackService(store, client or disabled_client,
                                       templates=FeedbackTemplateEngine(rng=random.Random(0)))
    return _make


@pytest.mark.asyncio
async def test_streak_feedback_from_templates(habit, history, feedback_service_factory):
    store = InMemoryRecordStore()
    store.add_habit(habit)
    store.add_records(history([True] * 10))

    feedback = await feedback_service_factory(store).get_completion_feedback("u1", "h1")

    assert feedback.type == FeedbackType.STREAK
    assert feedback.message == "10 days of Morning run in a row. You are getting stronger!"


@pytest.mark.asyncio
async def test_first_completion_feedback(habit, history, feedback_service_factory):
    store = InMemoryRecordStore()
    store.add_habit(habit)
    store.add_records(history([True]))

    feedback = await feedback_service_factory(store).get_completion_feedback("u1", "h1")

    assert feedback.type == FeedbackType.COMPLETION
    assert "Morning run" in feedback.message


@pytest.mark.asyncio
async def test_missed_feedback_mentions_lost_streak(habit, history, feedback_service_factory):
    store = InMemoryRecordStore()
    store.add_habit(habit)
    store.add_records(history([True] * 5 + [False]))

    feedback = await feedback_service_factory(store).get_missed_feedback("u1", "h1")

    assert feedback.type == FeedbackType.MISSED
    assert "5" in feedback.message


@pytest.mark.asyncio
async def test_completion_feedback_with_broken_store(broken_store, feedback_service_factory):
    assert await feedback_service_factory(broken_store).get_completion_feedback("u1", "h1") == DEFAULT_FEEDBACK


@pytest.mark.asyncio
async def test_missed_feedback_with_broken_store(broken_store, feedback_service_factory):
    feedback = await feedback_service_factory(broken_store).get_missed_feedback("u1", "h1")
    assert feedback.type == FeedbackType.MISSED


@pytest.mark.asyncio
async def test_remote_feedback(store, mock_client, feedback_service_factory):
    mock_client.get_feedback.return_value = RemoteResult.ok(ProgressFeedbackResponse.model_validate({
        "feedback": {"message": "Nice!", "type": "completion", "emoji": "🎉", "animation_type": "confetti"},
        "request_id": "r",
    }))

    feedback = await feedback_service_factory(store, mock_client).get_completion_feedback("u1", "h1")

    assert feedback.message == "Nice!"
    assert feedback.type == FeedbackType.COMPLETION
    request = mock_client.get_feedback.call_args.args[0]
    assert request.context_data == {"streak": "2", "habit_id": "h1"}
    assert request.feedback_type == "COMPLETION"


def test_previous_streak(history):
    assert previous_streak(history([True] * 4 + [False, False])) == 4
    assert previous_streak(history([False] * 3)) == 0


@pytest.mark.asyncio
async def test_progress_analysis(store, feedback_service_factory, monday):
    analysis = await feedback_service_factory(store).get_progress_analysis("u1", "h1", today=monday + timedelta(days=29))
    assert len(analysis.visual_data) == 7
    assert analysis.streak == 2


@pytest.mark.asyncio
async def test_progress_analysis_missing_habit(store, broken_store, feedback_service_factory):
    assert await feedback_service_factory(store).get_progress_analysis("u1", "missing") == GENERIC_ANALYSIS
    assert await feedback_service_factory(broken_store).get_progress_analysis("u1", "h1") == GENERIC_ANALYSIS


@pytest.mark.asyncio
async def test_periodic_report(make_habit, history, feedback_service_factory, monday):
    store = InMemoryRecordStore()
    store.add_habit(make_habit("a", category=HabitCategory.HEALTH))
    store.add_habit(make_habit("b", category=HabitCategory.LEARNING))
    store.add_records(history([True] * 7, habit_id="a"))
    store.add_records(history([True, False] * 3 + [False], habit_id="b"))

    report = await feedback_service_factory(store).get_periodic_report(
        "u1", ReportPeriod.WEEKLY, end_date=monday + timedelta(days=6)
    )

    assert report.start_date == monday
    assert report.per_habit_rates == pytest.approx({"a": 1.0, "b": 3 / 7})


@pytest.mark.asyncio
async def test_periodic_report_with_broken_store(broken_store, feedback_service_factory, monday):
    report = await feedback_service_factory(broken_store).get_periodic_report(
        "u1", ReportPeriod.MONTHLY, end_date=monday
    )

    assert report.start_date == monday - timedelta(days=7)
    assert report.completion_rate == 0.0
    assert report.insights == [KEEP_LOGGING_MESSAGE]


# ── Service manager ─────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_service_manager_lifecycle(store, disabled_client):
    async with ServiceManager() as manager:
        assert manager.initialize_services(store, disabled_client)
        assert manager.analysis_service is not None
        assert manager.feedback_service.store is store

        health = manager.health_check()
        assert health["status"] == "warning"
        assert "cache" in health["services"]["recommendation_service"]

    assert not manager.initialized
    assert manager.recommendation_service is None


@pytest.mark.asyncio
async def test_global_service_manager(disabled_client):
    assert initialize_all_services(client=disabled_client)
    manager = get_service_manager()
    assert manager is get_service_manager()
    assert isinstance(manager.store, InMemoryRecordStore)

    await close_all_services()
    assert get_service_manager() is not manager
    await close_all_services()
