#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitGem Analytics v4.0 - Habit Models
Модели привычек и записей выполнения с валидацией

Версия: 4.0.1
Дата: 2025-06-12
"""

import uuid
import logging
from datetime import datetime, date, time
from typing import Dict, List, Optional, Tuple, Union, Any
from dataclasses import dataclass, field

from habitgem.models.enums import HabitCategory, GoalType, Mood

logger = logging.getLogger(__name__)

# ===== VALIDATION HELPERS =====

class ValidationError(ValueError):
    """Ошибка валидации данных"""
    pass

def validate_difficulty(value: Optional[int], field_name: str = "difficulty") -> Optional[int]:
    """Валидация сложности 1-5"""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 5:
        raise ValidationError(f"{field_name} должен быть от 1 до 5, получено: {value!r}")
    return value

def _parse_date(value: Union[str, date]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Неверный формат даты: {value!r}")

# ===== FREQUENCY =====

@dataclass(frozen=True)
class DailyFrequency:
    """Ежедневно, N раз в день"""
    times_per_day: int = 1

    def __post_init__(self):
        if self.times_per_day < 1:
            raise ValidationError("times_per_day должен быть положительным числом")

@dataclass(frozen=True)
class WeeklyFrequency:
    """По дням недели (ISO: 1 - понедельник, 7 - воскресенье)"""
    days_of_week: Tuple[int, ...] = (1, 3, 5)

    def __post_init__(self):
        if not self.days_of_week or any(not 1 <= d <= 7 for d in self.days_of_week):
            raise ValidationError(f"days_of_week должен содержать дни 1-7: {self.days_of_week}")

@dataclass(frozen=True)
class MonthlyFrequency:
    """По дням месяца"""
    days_of_month: Tuple[int, ...] = (1,)

    def __post_init__(self):
        if not self.days_of_month or any(not 1 <= d <= 31 for d in self.days_of_month):
            raise ValidationError(f"days_of_month должен содержать дни 1-31: {self.days_of_month}")

@dataclass(frozen=True)
class IntervalFrequency:
    """Каждые N дней"""
    every_n_days: int = 2

    def __post_init__(self):
        if self.every_n_days < 1:
            raise ValidationError("every_n_days должен быть положительным числом")

Frequency = Union[DailyFrequency, WeeklyFrequency, MonthlyFrequency, IntervalFrequency]

def expected_days_per_week(frequency: Frequency) -> float:
    """Ожидаемое число дней выполнения в неделю"""
    if isinstance(frequency, DailyFrequency):
        return 7.0
    if isinstance(frequency, WeeklyFrequency):
        return float(len(set(frequency.days_of_week)))
    if isinstance(frequency, MonthlyFrequency):
        return len(set(frequency.days_of_month)) * 7 / 30
    if isinstance(frequency, IntervalFrequency):
        return 7 / frequency.every_n_days
    raise TypeError(f"Unknown frequency variant: {type(frequency).__name__}")

def frequency_to_dict(frequency: Frequency) -> Dict[str, Any]:
    """Сериализация частоты в формат API"""
    if isinstance(frequency, DailyFrequency):
        return {"type": "DAILY", "times_per_day": frequency.times_per_day}
    if isinstance(frequency, WeeklyFrequency):
        return {
            "type": "WEEKLY",
            "times_per_week": len(frequency.days_of_week),
            "days_of_week": list(frequency.days_of_week)
        }
    if isinstance(frequency, MonthlyFrequency):
        return {"type": "MONTHLY", "days_of_month": list(frequency.days_of_month)}
    if isinstance(frequency, IntervalFrequency):
        return {"type": "INTERVAL", "every_n_days": frequency.every_n_days}
    raise TypeError(f"Unknown frequency variant: {type(frequency).__name__}")

def frequency_from_dict(data: Dict[str, Any]) -> Frequency:
    """Десериализация частоты из формата API"""
    kind = str(data.get("type", "")).upper()
    if kind == "DAILY":
        return DailyFrequency(times_per_day=int(data.get("times_per_day") or 1))
    if kind == "WEEKLY":
        days = data.get("days_of_week") or []
        if not days:
            # Без конкретных дней распределяем times_per_week по неделе
            times = max(1, min(7, int(data.get("times_per_week") or 3)))
            days = [1 + (i * 7) // times for i in range(times)]
        return WeeklyFrequency(days_of_week=tuple(int(d) for d in days))
    if kind == "MONTHLY":
        return MonthlyFrequency(days_of_month=tuple(int(d) for d in data.get("days_of_month") or [1]))
    if kind == "INTERVAL":
        return IntervalFrequency(every_n_days=int(data.get("every_n_days") or 2))
    raise ValueError(f"Unknown frequency type: {data.get('type')!r}")

def describe_frequency(frequency: Frequency) -> str:
    """Человекочитаемое описание частоты"""
    if isinstance(frequency, DailyFrequency):
        if frequency.times_per_day == 1:
            return "every day"
        return f"{frequency.times_per_day} times a day"
    if isinstance(frequency, WeeklyFrequency):
        return f"{len(frequency.days_of_week)} times a week"
    if isinstance(frequency, MonthlyFrequency):
        return f"{len(frequency.days_of_month)} times a month"
    if isinstance(frequency, IntervalFrequency):
        return f"every {frequency.every_n_days} days"
    raise TypeError(f"Unknown frequency variant: {type(frequency).__name__}")

# ===== CORE MODELS =====

@dataclass(frozen=True)
class CompletionRecord:
    """Запись о выполнении привычки за календарный день"""
    habit_id: str
    date: date
    is_completed: bool
    completion_time: Optional[datetime] = None
    difficulty: Optional[int] = None  # отзыв пользователя 1-5
    note: Optional[str] = None
    mood: Optional[Mood] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    user_id: Optional[str] = None

    def __post_init__(self):
        """Валидация после создания объекта"""
        if not self.habit_id:
            raise ValidationError("habit_id не может быть пустым")
        if not isinstance(self.date, date) or isinstance(self.date, datetime):
            raise ValidationError(f"date должен быть календарной датой: {self.date!r}")
        if self.completion_time is not None and not isinstance(self.completion_time, datetime):
            raise ValidationError("completion_time должен быть datetime")
        validate_difficulty(self.difficulty)
        if self.note is not None and len(self.note) > 500:
            raise ValidationError("note должен содержать максимум 500 символов")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'habit_id': self.habit_id,
            'user_id': self.user_id,
            'date': self.date.isoformat(),
            'is_completed': self.is_completed,
            'completion_time': self.completion_time.isoformat() if self.completion_time else None,
            'difficulty': self.difficulty,
            'note': self.note,
            'mood': self.mood.value if self.mood else None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompletionRecord":
        completion_time = data.get('completion_time')
        mood = data.get('mood')
        kwargs = {}
        if data.get('id'):
            kwargs['id'] = data['id']
        return cls(
            habit_id=data['habit_id'],
            date=_parse_date(data['date']),
            is_completed=bool(data['is_completed']),
            completion_time=datetime.fromisoformat(completion_time) if completion_time else None,
            difficulty=data.get('difficulty'),
            note=data.get('note'),
            mood=Mood(mood) if mood else None,
            user_id=data.get('user_id'),
            **kwargs
        )

@dataclass
class Habit:
    """Модель привычки"""
    id: str
    name: str
    category: HabitCategory = HabitCategory.OTHER
    difficulty: int = 3  # 1-5
    created_at: datetime = field(default_factory=datetime.now)
    user_id: Optional[str] = None
    description: str = ""
    frequency: Frequency = field(default_factory=DailyFrequency)
    start_date: Optional[date] = None
    is_ai_recommended: bool = False
    estimated_minutes_per_day: Optional[int] = None

    def __post_init__(self):
        """Валидация после создания объекта"""
        if not self.id:
            raise ValidationError("id привычки не может быть пустым")
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValidationError("name не может быть пустым")
        self.name = self.name.strip()
        if not isinstance(self.category, HabitCategory):
            raise ValidationError(f"Неизвестная категория: {self.category!r}")
        validate_difficulty(self.difficulty)
        if self.start_date is None:
            self.start_date = self.created_at.date()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.name,
            'description': self.description,
            'category': self.category.value,
            'difficulty': self.difficulty,
            'frequency': frequency_to_dict(self.frequency),
            'created_at': self.created_at.isoformat(),
            'start_date': self.start_date.isoformat() if self.start_date else None,
            'is_ai_recommended': self.is_ai_recommended,
            'estimated_minutes_per_day': self.estimated_minutes_per_day
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Habit":
        start_date = data.get('start_date')
        created_at = data.get('created_at')
        return cls(
            id=data['id'],
            name=data['name'],
            category=HabitCategory(data.get('category', HabitCategory.OTHER.value)),
            difficulty=data.get('difficulty', 3),
            created_at=datetime.fromisoformat(created_at) if created_at else datetime.now(),
            user_id=data.get('user_id'),
            description=data.get('description', ""),
            frequency=frequency_from_dict(data['frequency']) if data.get('frequency') else DailyFrequency(),
            start_date=_parse_date(start_date) if start_date else None,
            is_ai_recommended=data.get('is_ai_recommended', False),
            estimated_minutes_per_day=data.get('estimated_minutes_per_day')
        )

# ===== PREFERENCES =====

@dataclass(frozen=True)
class TimeSlot:
    """Свободный интервал времени"""
    start_time: time
    end_time: time

    @property
    def minutes(self) -> int:
        start = self.start_time.hour * 60 + self.start_time.minute
        end = self.end_time.hour * 60 + self.end_time.minute
        return max(0, end - start)

    def to_dict(self) -> Dict[str, str]:
        return {
            'start_time': self.start_time.strftime('%H:%M'),
            'end_time': self.end_time.strftime('%H:%M')
        }

@dataclass
class UserPreferences:
    """Предпочтения пользователя для рекомендаций"""
    habit_categories: List[HabitCategory] = field(default_factory=list)
    goal_types: List[GoalType] = field(default_factory=list)
    difficulty_preference: int = 3
    time_availability: Dict[int, List[TimeSlot]] = field(default_factory=dict)  # weekday 0-6
    user_id: Optional[str] = None

    def __post_init__(self):
        validate_difficulty(self.difficulty_preference, "difficulty_preference")

    @property
    def average_available_minutes(self) -> Optional[float]:
        """Среднее свободное время в день, None если данных нет"""
        if not self.time_availability:
            return None
        total = sum(slot.minutes for slots in self.time_availability.values() for slot in slots)
        return total / 7

    @classmethod
    def default(cls, user_id: Optional[str] = None) -> "UserPreferences":
        """Предпочтения по умолчанию"""
        return cls(
            habit_categories=[HabitCategory.HEALTH, HabitCategory.MINDFULNESS, HabitCategory.PRODUCTIVITY],
            goal_types=[GoalType.PERSONAL_GROWTH],
            difficulty_preference=2,
            time_availability={},
            user_id=user_id
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'user_id': self.user_id,
            'habit_categories': [c.value for c in self.habit_categories],
            'goal_types': [g.value for g in self.goal_types],
            'difficulty_preference': self.difficulty_preference,
            'time_availability': {
                str(day): [slot.to_dict() for slot in slots]
                for day, slots in self.time_availability.items()
            }
        }
