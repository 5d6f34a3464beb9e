#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitGem Analytics v4.0 - Output Models
Результаты аналитики, отдаваемые слою представления

Версия: 4.0.1
Дата: 2025-06-12
"""

from datetime import date
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field

from habitgem.models.enums import (
    AnimationType, CorrelationType, FeedbackType, HabitCategory,
    ReportPeriod, SuggestionType, Trend
)
from habitgem.models.habit import Frequency, frequency_to_dict, validate_difficulty
from habitgem.utils.datetime_utils import day_name

@dataclass(frozen=True)
class HabitStats:
    """Сырые метрики привычки"""
    completion_rate: float = 0.0
    current_streak: int = 0
    longest_streak: int = 0
    total_records: int = 0

@dataclass
class HabitInsight:
    """Главный инсайт по привычке"""
    habit_id: str
    best_performing_days: List[int]  # weekday 0-6
    completion_trend: Trend
    consistency_score: float
    insight_message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'habit_id': self.habit_id,
            'best_performing_days': [day_name(d) for d in self.best_performing_days],
            'completion_trend': self.completion_trend.value,
            'consistency_score': round(self.consistency_score, 3),
            'insight_message': self.insight_message
        }

@dataclass
class OptimizationSuggestion:
    """Предложение по оптимизации привычки"""
    type: SuggestionType
    message: str
    expected_impact: str
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type.value,
            'message': self.message,
            'expected_impact': self.expected_impact,
            'confidence': self.confidence
        }

@dataclass
class HabitCorrelation:
    """Связь между двумя привычками"""
    habit_id_a: str
    habit_id_b: str
    type: CorrelationType
    strength: float
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'habit_id_a': self.habit_id_a,
            'habit_id_b': self.habit_id_b,
            'type': self.type.value,
            'strength': round(self.strength, 3),
            'description': self.description
        }

@dataclass
class DataPoint:
    """Точка для визуализации"""
    date: date
    value: float
    label: str

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.date.isoformat(), 'value': self.value, 'label': self.label}

@dataclass
class ProgressAnalysis:
    """Анализ прогресса по привычке"""
    completion_rate: float
    streak: int
    insight: str
    suggestion: str
    visual_data: List[DataPoint] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'completion_rate': self.completion_rate,
            'streak': self.streak,
            'insight': self.insight,
            'suggestion': self.suggestion,
            'visual_data': [p.to_dict() for p in self.visual_data]
        }

@dataclass
class PeriodicReport:
    """Периодический отчет по всем привычкам пользователя"""
    period: ReportPeriod
    start_date: date
    end_date: date
    completion_rate: float
    per_habit_rates: Dict[str, float]
    insights: List[str]
    recommendations: List[str]
    summary: str = ""
    visual_data: List[DataPoint] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'period': self.period.value,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'completion_rate': self.completion_rate,
            'per_habit_rates': dict(self.per_habit_rates),
            'summary': self.summary,
            'insights': list(self.insights),
            'recommendations': list(self.recommendations),
            'visual_data': [p.to_dict() for p in self.visual_data]
        }

@dataclass
class FeedbackMessage:
    """Сообщение обратной связи"""
    message: str
    type: FeedbackType
    emoji: Optional[str] = None
    animation_type: Optional[AnimationType] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'message': self.message,
            'type': self.type.value,
            'emoji': self.emoji,
            'animation_type': self.animation_type.value if self.animation_type else None
        }

@dataclass
class HabitRecommendation:
    """Рекомендованная привычка"""
    id: str
    name: str
    description: str
    category: HabitCategory
    difficulty: int
    reason: str
    scientific_basis: str
    suggested_frequency: Frequency
    estimated_minutes_per_day: int

    def __post_init__(self):
        validate_difficulty(self.difficulty)

    @property
    def dedupe_key(self):
        return (self.category, self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'category': self.category.value,
            'difficulty': self.difficulty,
            'recommendation_reason': self.reason,
            'scientific_basis': self.scientific_basis,
            'suggested_frequency': frequency_to_dict(self.suggested_frequency),
            'estimated_time_per_day': self.estimated_minutes_per_day
        }

@dataclass
class HabitEvidence:
    """Научное обоснование привычки"""
    habit_id: str
    scientific_basis: str
    summary: str
    references: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'habit_id': self.habit_id,
            'scientific_basis': self.scientific_basis,
            'summary': self.summary,
            'references': list(self.references)
        }
