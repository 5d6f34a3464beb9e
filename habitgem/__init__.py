"""
HabitGem Analytics v4.0

Аналитическое ядро трекера привычек: паттерны выполнения, корреляции,
инсайты, рекомендации и шаблонная обратная связь с откатом на локальные
вычисления при недоступности AI сервиса.
"""

__version__ = "4.0.1"

from habitgem.config import HabitGemConfig, config
from habitgem.core import (
    CorrelationEngine, FeedbackTemplateEngine, InsightGenerator, PatternAnalyzer,
    RecommendationEngine, TTLCache
)
from habitgem.models import CompletionRecord, Habit, UserPreferences
from habitgem.services import (
    HabitAnalysisService, HabitRecommendationService, InMemoryRecordStore,
    ProgressFeedbackService, RecordStore, get_service_manager
)
from habitgem.utils.logger import setup_logging

__all__ = [
    '__version__',
    'HabitGemConfig', 'config', 'setup_logging',
    'PatternAnalyzer', 'CorrelationEngine', 'InsightGenerator', 'RecommendationEngine',
    'FeedbackTemplateEngine', 'TTLCache',
    'CompletionRecord', 'Habit', 'UserPreferences',
    'HabitAnalysisService', 'HabitRecommendationService', 'ProgressFeedbackService',
    'RecordStore', 'InMemoryRecordStore', 'get_service_manager',
]
