"""
Модели данных HabitGem Analytics

Доменные модели (привычки, записи, предпочтения) и модели результатов аналитики.
"""

from habitgem.models.enums import (
    HabitCategory, GoalType, Mood, PatternType, Trend, CorrelationType,
    SuggestionType, FeedbackType, AnimationType, ReportPeriod
)
from habitgem.models.habit import (
    ValidationError, CompletionRecord, Habit, TimeSlot, UserPreferences,
    DailyFrequency, WeeklyFrequency, MonthlyFrequency, IntervalFrequency, Frequency,
    expected_days_per_week, frequency_to_dict, frequency_from_dict, describe_frequency
)
from habitgem.models.insights import (
    HabitStats, HabitInsight, OptimizationSuggestion, HabitCorrelation, DataPoint,
    ProgressAnalysis, PeriodicReport, FeedbackMessage, HabitRecommendation, HabitEvidence
)

__all__ = [
    # Enums
    'HabitCategory', 'GoalType', 'Mood', 'PatternType', 'Trend', 'CorrelationType',
    'SuggestionType', 'FeedbackType', 'AnimationType', 'ReportPeriod',
    # Domain
    'ValidationError', 'CompletionRecord', 'Habit', 'TimeSlot', 'UserPreferences',
    'DailyFrequency', 'WeeklyFrequency', 'MonthlyFrequency', 'IntervalFrequency', 'Frequency',
    'expected_days_per_week', 'frequency_to_dict', 'frequency_from_dict', 'describe_frequency',
    # Outputs
    'HabitStats', 'HabitInsight', 'OptimizationSuggestion', 'HabitCorrelation', 'DataPoint',
    'ProgressAnalysis', 'PeriodicReport', 'FeedbackMessage', 'HabitRecommendation', 'HabitEvidence',
]
