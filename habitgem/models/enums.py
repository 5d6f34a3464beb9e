#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitGem Analytics v4.0 - Enumerations
Закрытые перечисления доменной модели

Версия: 4.0.1
Дата: 2025-06-12
"""

from enum import Enum

class HabitCategory(Enum):
    """Категории привычек"""
    HEALTH = "HEALTH"
    FITNESS = "FITNESS"
    MINDFULNESS = "MINDFULNESS"
    PRODUCTIVITY = "PRODUCTIVITY"
    LEARNING = "LEARNING"
    SOCIAL = "SOCIAL"
    CREATIVITY = "CREATIVITY"
    FINANCE = "FINANCE"
    OTHER = "OTHER"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

class GoalType(Enum):
    """Цели пользователя"""
    HEALTH_IMPROVEMENT = "HEALTH_IMPROVEMENT"
    SKILL_DEVELOPMENT = "SKILL_DEVELOPMENT"
    PRODUCTIVITY_BOOST = "PRODUCTIVITY_BOOST"
    STRESS_REDUCTION = "STRESS_REDUCTION"
    RELATIONSHIP_BUILDING = "RELATIONSHIP_BUILDING"
    PERSONAL_GROWTH = "PERSONAL_GROWTH"

class Mood(Enum):
    """Настроение при выполнении"""
    GREAT = "GREAT"
    GOOD = "GOOD"
    NEUTRAL = "NEUTRAL"
    BAD = "BAD"
    TERRIBLE = "TERRIBLE"

class PatternType(Enum):
    """Типы обнаруживаемых паттернов"""
    # Недельные
    WEEKDAY_PREFERENCE = "WEEKDAY_PREFERENCE"
    WEEKEND_PREFERENCE = "WEEKEND_PREFERENCE"
    SPECIFIC_DAY_PATTERN = "SPECIFIC_DAY_PATTERN"
    NO_WEEKLY_PATTERN = "NO_WEEKLY_PATTERN"
    # Время суток
    MORNING_PREFERENCE = "MORNING_PREFERENCE"
    AFTERNOON_PREFERENCE = "AFTERNOON_PREFERENCE"
    EVENING_PREFERENCE = "EVENING_PREFERENCE"
    NIGHT_PREFERENCE = "NIGHT_PREFERENCE"
    NO_TIME_PATTERN = "NO_TIME_PATTERN"
    # Тренды
    IMPROVING_TREND = "IMPROVING_TREND"
    DECLINING_TREND = "DECLINING_TREND"
    STABLE_TREND = "STABLE_TREND"
    FLUCTUATING_TREND = "FLUCTUATING_TREND"
    # Прочие
    STREAK_BASED = "STREAK_BASED"
    WEEKDAY_PATTERN = "WEEKDAY_PATTERN"
    TIME_OF_DAY = "TIME_OF_DAY"
    NOT_ENOUGH_DATA = "NOT_ENOUGH_DATA"

class Trend(Enum):
    """Направление тренда выполнения"""
    IMPROVING = "IMPROVING"
    STABLE = "STABLE"
    DECLINING = "DECLINING"
    FLUCTUATING = "FLUCTUATING"
    NOT_ENOUGH_DATA = "NOT_ENOUGH_DATA"

class CorrelationType(Enum):
    """Тип связи между привычками"""
    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    NEUTRAL = "NEUTRAL"

class SuggestionType(Enum):
    """Типы предложений по оптимизации"""
    TIME_CHANGE = "TIME_CHANGE"
    FREQUENCY_ADJUST = "FREQUENCY_ADJUST"
    DIFFICULTY_ADJUST = "DIFFICULTY_ADJUST"
    HABIT_COMBINATION = "HABIT_COMBINATION"
    HABIT_REPLACEMENT = "HABIT_REPLACEMENT"

class FeedbackType(Enum):
    """Категории обратной связи"""
    COMPLETION = "COMPLETION"
    STREAK = "STREAK"
    MILESTONE = "MILESTONE"
    MISSED = "MISSED"
    GENERAL = "GENERAL"

class AnimationType(Enum):
    """Анимации для обратной связи"""
    CONFETTI = "CONFETTI"
    FIREWORKS = "FIREWORKS"
    SPARKLE = "SPARKLE"
    THUMBS_UP = "THUMBS_UP"
    NONE = "NONE"

class ReportPeriod(Enum):
    """Периоды отчетов"""
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"

    @property
    def days(self) -> int:
        return {ReportPeriod.DAILY: 1, ReportPeriod.WEEKLY: 7, ReportPeriod.MONTHLY: 30}[self]
