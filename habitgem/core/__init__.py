"""
Аналитическое ядро HabitGem

Чистые вычисления над историей выполнения привычек: паттерны, корреляции,
кластеры, инсайты, рекомендации, шаблоны обратной связи и кэш.
"""

from habitgem.core.pattern_analyzer import (
    PatternAnalyzer, PatternSignal, completion_rate, current_streak, longest_streak, day_of_week_rates
)
from habitgem.core.clustering import extract_features, feature_matrix, kmeans, cluster_records
from habitgem.core.correlation import (
    ContingencyTable, CorrelationEngine, build_contingency_table, phi_coefficient
)
from habitgem.core.insight_generator import InsightGenerator
from habitgem.core.recommendation_engine import RecommendationEngine
from habitgem.core.feedback_templates import (
    MILESTONES, CategoryIndexedTemplates, FeedbackContext, FeedbackTemplateEngine,
    TemplateBucket, render_template, resolve_bucket
)
from habitgem.core.cache import CacheEntry, TTLCache

__all__ = [
    'PatternAnalyzer', 'PatternSignal', 'completion_rate', 'current_streak', 'longest_streak',
    'day_of_week_rates',
    'extract_features', 'feature_matrix', 'kmeans', 'cluster_records',
    'ContingencyTable', 'CorrelationEngine', 'build_contingency_table', 'phi_coefficient',
    'InsightGenerator',
    'RecommendationEngine',
    'MILESTONES', 'CategoryIndexedTemplates', 'FeedbackContext', 'FeedbackTemplateEngine',
    'TemplateBucket', 'render_template', 'resolve_bucket',
    'CacheEntry', 'TTLCache',
]
