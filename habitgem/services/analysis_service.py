#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitGem Analytics v4.0 - Habit Analysis Service
Инсайты, предложения по оптимизации и корреляции привычек

Сначала запрашивает удаленный AI сервис, при любой ошибке вычисляет
результат локально через аналитическое ядро.

Версия: 4.0.1
Дата: 2025-06-12
"""

import logging
from datetime import date
from typing import Dict, List, Optional, Tuple

from habitgem.config import AnalyticsConfig, config
from habitgem.core.correlation import CorrelationEngine
from habitgem.core.insight_generator import InsightGenerator
from habitgem.core.pattern_analyzer import PatternAnalyzer, PatternSignal
from habitgem.models.enums import Trend
from habitgem.models.habit import CompletionRecord
from habitgem.models.insights import HabitCorrelation, HabitInsight, OptimizationSuggestion
from habitgem.services.ai_client import AIServiceClient
from habitgem.services.api_models import HabitAnalysisRequest, HabitAnalysisResponse
from habitgem.services.record_store import RecordStore

logger = logging.getLogger(__name__)

ANALYSIS_INSIGHTS = "INSIGHTS"
ANALYSIS_OPTIMIZATION = "OPTIMIZATION"

def _first_insight(response: HabitAnalysisResponse) -> HabitInsight:
    if not response.insights:
        raise ValueError("response contains no insights")
    return response.insights[0].to_domain()

def _suggestions(response: HabitAnalysisResponse) -> List[OptimizationSuggestion]:
    if not response.suggestions:
        raise ValueError("response contains no suggestions")
    return [s.to_domain() for s in response.suggestions]

class HabitAnalysisService:
    """Сервис анализа привычек"""

    def __init__(self, store: RecordStore, client: Optional[AIServiceClient] = None,
                 settings: Optional[AnalyticsConfig] = None):
        self.store = store
        self.client = client or AIServiceClient()
        self.settings = settings or config.analytics
        self.analyzer = PatternAnalyzer(self.settings)
        self.insights = InsightGenerator(self.analyzer)
        self.correlations = CorrelationEngine(self.settings)

    async def _records(self, habit_id: str) -> List[CompletionRecord]:
        try:
            return await self.store.list_records(habit_id)
        except Exception as e:
            logger.error(f"❌ Failed to load records for habit {habit_id}: {e}")
            return []

    # ===== REMOTE FIRST =====

    async def get_habit_insights(self, user_id: str, habit_id: str) -> HabitInsight:
        """Главный инсайт по привычке"""
        result = await self.client.get_analysis(
            HabitAnalysisRequest(user_id=user_id, habit_id=habit_id, analysis_type=ANALYSIS_INSIGHTS)
        )
        remote = result.map(_first_insight)
        if remote.success:
            return remote.value

        records = await self._records(habit_id)
        return remote.or_else_compute(lambda: self.insights.generate_insight(habit_id, records))

    async def get_optimization_suggestions(self, user_id: str, habit_id: str) -> List[OptimizationSuggestion]:
        """Предложения по оптимизации привычки"""
        result = await self.client.get_analysis(
            HabitAnalysisRequest(user_id=user_id, habit_id=habit_id, analysis_type=ANALYSIS_OPTIMIZATION)
        )
        remote = result.map(_suggestions)
        if remote.success:
            return remote.value

        try:
            habit = await self.store.get_habit(habit_id)
        except Exception as e:
            logger.error(f"❌ Failed to load habit {habit_id}: {e}")
            habit = None

        if habit is None:
            logger.warning(f"⚠️ Habit {habit_id} not found, no suggestions")
            return []

        records = await self._records(habit_id)
        return remote.or_else_compute(lambda: self.insights.generate_suggestions(habit, records))

    # ===== LOCAL ONLY =====

    async def get_habit_correlations(self, user_id: str) -> List[HabitCorrelation]:
        """Значимые корреляции между привычками пользователя"""
        try:
            habits = await self.store.list_habits(user_id)
            if len(habits) < 2:
                return []
            records_by_habit: Dict[str, List[CompletionRecord]] = {}
            for habit in habits:
                records_by_habit[habit.id] = await self.store.list_records(habit.id)
        except Exception as e:
            logger.error(f"❌ Failed to load habits for correlations of user {user_id}: {e}")
            return []

        return self.correlations.find_correlations(habits, records_by_habit)

    async def get_habit_patterns(self, habit_id: str) -> PatternSignal:
        records = await self._records(habit_id)
        return self.analyzer.identify_patterns(records)

    async def predict_completion(self, habit_id: str, target_date: date) -> float:
        """Вероятность выполнения привычки в указанную дату"""
        records = await self._records(habit_id)
        return self.analyzer.predict_completion_probability(records, target_date)

    async def get_habit_clusters(self, habit_id: str, cluster_count: Optional[int] = None,
                                 seed: Optional[int] = None) -> Dict[int, List[CompletionRecord]]:
        records = await self._records(habit_id)
        return self.analyzer.cluster_records(records, cluster_count=cluster_count, seed=seed)

    async def get_anomalies(self, habit_id: str) -> List[Tuple[CompletionRecord, float]]:
        records = await self._records(habit_id)
        return self.analyzer.detect_anomalies(records)

    async def get_trend(self, habit_id: str) -> Trend:
        records = await self._records(habit_id)
        return self.insights.resolve_trend(records, self.analyzer.identify_patterns(records))
