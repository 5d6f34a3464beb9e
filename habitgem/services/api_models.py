from datetime import date, time
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from habitgem.models.enums import (
    AnimationType, FeedbackType, GoalType, HabitCategory, SuggestionType, Trend
)
from habitgem.models.habit import TimeSlot, UserPreferences, frequency_from_dict
from habitgem.models.insights import (
    FeedbackMessage, HabitInsight, HabitRecommendation, OptimizationSuggestion
)
from habitgem.utils.datetime_utils import DAY_NAMES

_ISO_DAYS = {name.upper(): index + 1 for index, name in enumerate(DAY_NAMES)}

def _parse_hhmm(value: str) -> time:
    hours, minutes = value.split(":")[:2]
    return time(int(hours), int(minutes))

# Базовые модели

class TimeSlotDto(BaseModel):
    start_time: str
    end_time: str

    @classmethod
    def from_domain(cls, slot: TimeSlot) -> "TimeSlotDto":
        return cls(**slot.to_dict())

    def to_domain(self) -> TimeSlot:
        return TimeSlot(start_time=_parse_hhmm(self.start_time), end_time=_parse_hhmm(self.end_time))

class TimeRangeDto(BaseModel):
    start_date: date
    end_date: date

class FrequencyDto(BaseModel):
    type: str
    times_per_week: Optional[int] = None
    days_of_week: Optional[List[int]] = None
    times_per_day: Optional[int] = None
    days_of_month: Optional[List[int]] = None
    every_n_days: Optional[int] = None

    @field_validator('days_of_week', mode='before')
    @classmethod
    def normalize_days(cls, v):
        if v is None:
            return v
        days = []
        for day in v:
            if isinstance(day, str) and not day.isdigit():
                if day.upper() not in _ISO_DAYS:
                    raise ValueError(f'Неизвестный день недели: {day}')
                days.append(_ISO_DAYS[day.upper()])
            else:
                days.append(int(day))
        return days

class UserPreferencesDto(BaseModel):
    habit_categories: List[str] = Field(default_factory=list)
    goal_types: List[str] = Field(default_factory=list)
    difficulty_preference: int = Field(3, ge=1, le=5)
    time_availability: Optional[Dict[str, List[TimeSlotDto]]] = None

    @classmethod
    def from_domain(cls, preferences: UserPreferences) -> "UserPreferencesDto":
        return cls(
            habit_categories=[c.value for c in preferences.habit_categories],
            goal_types=[g.value for g in preferences.goal_types],
            difficulty_preference=preferences.difficulty_preference,
            time_availability={
                str(day): [TimeSlotDto.from_domain(s) for s in slots]
                for day, slots in preferences.time_availability.items()
            } or None
        )

    def to_domain(self, user_id: Optional[str] = None) -> UserPreferences:
        return UserPreferences(
            habit_categories=[HabitCategory(c.upper()) for c in self.habit_categories],
            goal_types=[GoalType(g.upper()) for g in self.goal_types],
            difficulty_preference=self.difficulty_preference,
            time_availability={
                int(day): [s.to_domain() for s in slots]
                for day, slots in (self.time_availability or {}).items()
            },
            user_id=user_id
        )

# Рекомендации

class HabitRecommendationRequest(BaseModel):
    user_id: str
    preferences: Optional[UserPreferencesDto] = None
    existing_habits: Optional[List[str]] = None

class HabitRecommendationDto(BaseModel):
    id: str
    name: str
    description: str = ""
    category: str
    difficulty: int = Field(..., ge=1, le=5)
    recommendation_reason: str = ""
    scientific_basis: str = ""
    suggested_frequency: FrequencyDto
    estimated_time_per_day: int = Field(15, ge=0)

    def to_domain(self) -> HabitRecommendation:
        return HabitRecommendation(
            id=self.id,
            name=self.name,
            description=self.description,
            category=HabitCategory(self.category.upper()),
            difficulty=self.difficulty,
            reason=self.recommendation_reason,
            scientific_basis=self.scientific_basis,
            suggested_frequency=frequency_from_dict(self.suggested_frequency.model_dump()),
            estimated_minutes_per_day=self.estimated_time_per_day
        )

class HabitRecommendationResponse(BaseModel):
    recommendations: List[HabitRecommendationDto]
    request_id: str

# Анализ

class HabitAnalysisRequest(BaseModel):
    user_id: str
    habit_id: Optional[str] = None
    analysis_type: str
    time_range: Optional[TimeRangeDto] = None

class HabitInsightDto(BaseModel):
    habit_id: str
    best_performing_days: List[str] = Field(default_factory=list)
    completion_trend: str
    consistency_score: float = Field(..., ge=0.0, le=1.0)
    insight_message: str

    def to_domain(self) -> HabitInsight:
        return HabitInsight(
            habit_id=self.habit_id,
            best_performing_days=[_ISO_DAYS[d.upper()] - 1 for d in self.best_performing_days],
            completion_trend=Trend(self.completion_trend.upper()),
            consistency_score=self.consistency_score,
            insight_message=self.insight_message
        )

class OptimizationSuggestionDto(BaseModel):
    type: str
    message: str
    expected_impact: str = ""
    confidence: float = Field(..., ge=0.0, le=1.0)

    def to_domain(self) -> OptimizationSuggestion:
        return OptimizationSuggestion(
            type=SuggestionType(self.type.upper()),
            message=self.message,
            expected_impact=self.expected_impact,
            confidence=self.confidence
        )

class HabitAnalysisResponse(BaseModel):
    insights: List[HabitInsightDto]
    suggestions: Optional[List[OptimizationSuggestionDto]] = None
    request_id: str

# Обратная связь

class ProgressFeedbackRequest(BaseModel):
    user_id: str
    habit_id: Optional[str] = None
    feedback_type: str
    context_data: Optional[Dict[str, str]] = None

class FeedbackMessageDto(BaseModel):
    message: str
    type: str
    emoji: Optional[str] = None
    animation_type: Optional[str] = None

    def to_domain(self) -> FeedbackMessage:
        return FeedbackMessage(
            message=self.message,
            type=FeedbackType(self.type.upper()),
            emoji=self.emoji,
            animation_type=AnimationType(self.animation_type.upper()) if self.animation_type else None
        )

class ProgressFeedbackResponse(BaseModel):
    feedback: FeedbackMessageDto
    request_id: str
