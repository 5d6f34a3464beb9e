#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitGem Analytics v4.0 - Progress Feedback Service
Обратная связь при выполнении/пропуске привычки, анализ прогресса и отчеты

Версия: 4.0.1
Дата: 2025-06-12
"""

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Optional

from habitgem.config import config
from habitgem.core.feedback_templates import DEFAULT_FEEDBACK, FeedbackContext, FeedbackTemplateEngine
from habitgem.core.insight_generator import KEEP_LOGGING_MESSAGE, InsightGenerator
from habitgem.core.pattern_analyzer import completion_rate, current_streak, sort_records
from habitgem.models.enums import FeedbackType, ReportPeriod
from habitgem.models.habit import CompletionRecord, Habit
from habitgem.models.insights import FeedbackMessage, PeriodicReport, ProgressAnalysis
from habitgem.services.ai_client import AIServiceClient
from habitgem.services.api_models import ProgressFeedbackRequest, ProgressFeedbackResponse
from habitgem.services.record_store import RecordStore
from habitgem.utils.datetime_utils import now_local, today_local

logger = logging.getLogger(__name__)

GENERIC_ANALYSIS = ProgressAnalysis(
    completion_rate=0.0,
    streak=0,
    insight="Keep going, your data will help us give you a more accurate analysis.",
    suggestion="Try setting a reminder to help you stick with the habit.",
    visual_data=[],
)

def generic_report(period: ReportPeriod, end_date: date) -> PeriodicReport:
    """Отчет-заглушка при недоступности данных"""
    return PeriodicReport(
        period=period,
        start_date=end_date - timedelta(days=7),
        end_date=end_date,
        completion_rate=0.0,
        per_habit_rates={},
        insights=[KEEP_LOGGING_MESSAGE],
        recommendations=["Try doing your habits at a fixed time each day to build a routine."],
    )

def previous_streak(records: List[CompletionRecord]) -> int:
    """Длина серии выполнений, прерванной последними пропусками"""
    ordered = sort_records(records)
    while ordered and not ordered[-1].is_completed:
        ordered.pop()
    return max(0, current_streak(ordered))

def _feedback(response: ProgressFeedbackResponse) -> FeedbackMessage:
    return response.feedback.to_domain()

class ProgressFeedbackService:
    """Сервис обратной связи по прогрессу"""

    def __init__(self, store: RecordStore, client: Optional[AIServiceClient] = None,
                 templates: Optional[FeedbackTemplateEngine] = None,
                 insights: Optional[InsightGenerator] = None):
        self.store = store
        self.client = client or AIServiceClient()
        self.templates = templates or FeedbackTemplateEngine()
        self.insights = insights or InsightGenerator()

    async def build_context(self, habit_id: str, completed: bool = True) -> FeedbackContext:
        """Контекст обратной связи из истории привычки"""
        habit = await self.store.get_habit(habit_id)
        records = await self.store.list_records(habit_id)
        streak = max(0, await self.store.current_streak(habit_id))
        completions = sum(1 for r in records if r.is_completed)

        kwargs = {}
        if habit is not None:
            kwargs.update(habit_name=habit.name, category=habit.category)

        return FeedbackContext(
            streak=streak,
            completed=completed,
            completion_rate=completion_rate(records) if records else None,
            timestamp=now_local(config.timezone),
            is_first_completion=completed and completions == 1,
            previous_streak=0 if completed else previous_streak(records),
            **kwargs
        )

    async def _remote_or_template(self, user_id: str, habit_id: str, context: FeedbackContext) -> FeedbackMessage:
        feedback_type = self.templates.select_feedback_type(context.streak, context.completed)
        result = await self.client.get_feedback(
            ProgressFeedbackRequest(
                user_id=user_id,
                habit_id=habit_id,
                feedback_type=feedback_type.value,
                context_data={'streak': str(context.streak), 'habit_id': habit_id}
            )
        )
        return result.map(_feedback).or_else_compute(lambda: self.templates.generate(context, feedback_type))

    async def get_completion_feedback(self, user_id: str, habit_id: str,
                                      context: Optional[FeedbackContext] = None) -> FeedbackMessage:
        """Обратная связь при выполнении привычки"""
        if context is None:
            try:
                context = await self.build_context(habit_id, completed=True)
            except Exception as e:
                logger.error(f"❌ Failed to build feedback context for habit {habit_id}: {e}")
                return DEFAULT_FEEDBACK

        return await self._remote_or_template(user_id, habit_id, context)

    async def get_missed_feedback(self, user_id: str, habit_id: str,
                                  context: Optional[FeedbackContext] = None) -> FeedbackMessage:
        """Поддерживающее сообщение при пропуске привычки"""
        if context is None:
            try:
                context = await self.build_context(habit_id, completed=False)
            except Exception as e:
                logger.error(f"❌ Failed to build feedback context for habit {habit_id}: {e}")
                return self.templates.generate(FeedbackContext(completed=False), FeedbackType.MISSED)

        return await self._remote_or_template(user_id, habit_id, context)

    async def get_progress_analysis(self, user_id: str, habit_id: str,
                                    today: Optional[date] = None) -> ProgressAnalysis:
        """Анализ прогресса привычки за последние 7 дней"""
        try:
            habit = await self.store.get_habit(habit_id)
            records = await self.store.list_records(habit_id)
        except Exception as e:
            logger.error(f"❌ Failed to load progress of habit {habit_id} for user {user_id}: {e}")
            return GENERIC_ANALYSIS

        if habit is None:
            logger.warning(f"⚠️ Habit {habit_id} not found, returning generic analysis")
            return GENERIC_ANALYSIS

        return self.insights.build_progress_analysis(habit, records, today or today_local(config.timezone))

    async def get_periodic_report(self, user_id: str, period: ReportPeriod,
                                  end_date: Optional[date] = None) -> PeriodicReport:
        """Отчет за день, неделю или месяц"""
        end_date = end_date or today_local(config.timezone)
        start_date = end_date - timedelta(days=period.days - 1)

        try:
            habits: List[Habit] = await self.store.list_habits(user_id)
            records = await self.store.list_records_by_date_range(user_id, start_date, end_date)
        except Exception as e:
            logger.error(f"❌ Failed to build {period.value} report for user {user_id}: {e}")
            return generic_report(period, end_date)

        records_by_habit: Dict[str, List[CompletionRecord]] = defaultdict(list)
        for record in records:
            records_by_habit[record.habit_id].append(record)

        report = self.insights.build_periodic_report(period, end_date, habits, records_by_habit)
        logger.info(f"📊 {period.value} report for user {user_id}: {report.completion_rate:.0%}")
        return report
