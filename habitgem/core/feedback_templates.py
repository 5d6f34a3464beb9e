#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitGem Analytics v4.0 - Feedback Template Engine
Выбор шаблона обратной связи по контексту и подстановка переменных

Версия: 4.0.1
Дата: 2025-06-12
"""

import re
import random
import logging
from datetime import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from habitgem.models.enums import AnimationType, FeedbackType, HabitCategory
from habitgem.models.insights import FeedbackMessage
from habitgem.utils.datetime_utils import time_of_day

logger = logging.getLogger(__name__)

MILESTONES = (7, 21, 30, 60, 90, 180, 365)

MILESTONE_STREAK = 30
STREAK_THRESHOLD = 7
NEAR_MILESTONE_DAYS = 2
LOST_STREAK_THRESHOLD = 3

# ===== CONTEXT =====

@dataclass(frozen=True)
class FeedbackContext:
    """Контекст события выполнения/пропуска привычки"""
    habit_name: str = "your habit"
    streak: int = 0
    completed: bool = True
    category: HabitCategory = HabitCategory.OTHER
    completion_rate: Optional[float] = None
    timestamp: Optional[datetime] = None
    is_first_completion: bool = False
    previous_streak: int = 0

    @property
    def time_of_day(self) -> Optional[str]:
        if self.timestamp is None:
            return None
        return time_of_day(self.timestamp.hour)

    @property
    def is_weekend(self) -> bool:
        return self.timestamp is not None and self.timestamp.weekday() >= 5

    @property
    def next_milestone(self) -> Optional[int]:
        for milestone in MILESTONES:
            if milestone > self.streak:
                return milestone
        return None

    @property
    def days_to_next_milestone(self) -> Optional[int]:
        milestone = self.next_milestone
        return None if milestone is None else milestone - self.streak

    def variables(self) -> Dict[str, Any]:
        """Переменные для подстановки в шаблон"""
        return {
            'habit_name': self.habit_name,
            'streak': self.streak,
            'completion_rate': self.completion_rate,
            'next_milestone': self.next_milestone,
            'days_to_milestone': self.days_to_next_milestone,
            'previous_streak': self.previous_streak,
            'category': self.category.display_name.lower(),
            'time_of_day': self.time_of_day,
        }

# ===== TEMPLATE BUCKETS =====

@dataclass(frozen=True)
class CategoryIndexedTemplates:
    """Шаблоны с формулировками под категорию привычки"""
    by_category: Mapping[HabitCategory, Tuple[str, ...]] = field(default_factory=dict)
    default: Tuple[str, ...] = ()

TemplateBucket = Union[Tuple[str, ...], List[str], CategoryIndexedTemplates]

def resolve_bucket(bucket: TemplateBucket, category: HabitCategory) -> List[str]:
    """Список шаблонов корзины для категории"""
    if isinstance(bucket, CategoryIndexedTemplates):
        return list(bucket.by_category.get(category) or bucket.default)
    if isinstance(bucket, (list, tuple)):
        return list(bucket)
    raise TypeError(f"Unknown template bucket: {type(bucket).__name__}")

# ===== SUBSTITUTION =====

PLACEHOLDER = re.compile(r"\{(\w+)(?::([^:{}]*))?(?::([^{}]*))?\}")

def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None

def format_value(value: Any, fmt: Optional[str]) -> str:
    """Применение формата: uppercase, lowercase, signed, percent"""
    text = str(value)
    if not fmt:
        return text
    fmt = fmt.strip().lower()
    if fmt in ("upper", "uppercase"):
        return text.upper()
    if fmt in ("lower", "lowercase"):
        return text.lower()
    if fmt in ("+", "signed"):
        number = _as_number(value)
        if number is None:
            return text
        if number.is_integer():
            return f"{int(number):+d}"
        return f"{number:+.1f}"
    if fmt in ("%", "percent"):
        number = _as_number(value)
        if number is None:
            return text
        return f"{int(round(number * 100))}%"
    logger.debug("Unknown template format %r, value left as is", fmt)
    return text

def render_template(template: str, variables: Mapping[str, Any]) -> str:
    """Подстановка {name[:format[:default]]}; нет значения - default или пустая строка"""
    def substitute(match) -> str:
        name, fmt, default = match.group(1), match.group(2), match.group(3)
        value = variables.get(name)
        if value is None or value == "":
            return default or ""
        return format_value(value, fmt)

    return PLACEHOLDER.sub(substitute, template)

# ===== TEMPLATES =====

TEMPLATES: Dict[FeedbackType, Dict[str, TemplateBucket]] = {
    FeedbackType.COMPLETION: {
        "first": (
            "Your first check-in for {habit_name}! Every journey starts with a single step.",
            "Day one of {habit_name} is done. Great start!",
        ),
        "weekend": (
            "Even on the weekend you made time for {habit_name}. Impressive!",
            "Weekend win! {habit_name} is done.",
        ),
        "morning": (
            "Great morning start with {habit_name}!",
            "{habit_name} done before noon. The day is already a success.",
        ),
        "afternoon": (
            "Nice afternoon work on {habit_name}!",
            "{habit_name} done. Keep the afternoon momentum going.",
        ),
        "evening": (
            "Good job finishing {habit_name} this evening!",
            "You wrapped up the day with {habit_name}. Well done!",
        ),
        "night": (
            "Late but done! {habit_name} is checked off.",
            "A night owl win for {habit_name}.",
        ),
        "category": CategoryIndexedTemplates(
            by_category={
                HabitCategory.HEALTH: ("Your body thanks you for {habit_name}!",),
                HabitCategory.FITNESS: ("Another workout in the bank: {habit_name}!",),
                HabitCategory.MINDFULNESS: ("A calm mind is a strong mind. {habit_name} done.",),
                HabitCategory.LEARNING: ("You learned something today with {habit_name}.",),
                HabitCategory.PRODUCTIVITY: ("{habit_name} done. Your future self is grateful.",),
            },
            default=("Well done! {habit_name} is complete. Consistency is the key to success.",),
        ),
    },
    FeedbackType.STREAK: {
        "near_milestone": (
            "{streak} days of {habit_name}! Only {days_to_milestone} more to reach {next_milestone}.",
            "{streak}-day streak! {next_milestone} days is just around the corner.",
        ),
        "category": CategoryIndexedTemplates(
            by_category={
                HabitCategory.FITNESS: ("{streak} days of {habit_name} in a row. You are getting stronger!",),
                HabitCategory.MINDFULNESS: ("{streak} mindful days in a row. Keep breathing!",),
            },
            default=(
                "Congratulations on {streak} days in a row of {habit_name}! Keep the momentum.",
                "{streak}-day streak for {habit_name}. You are on fire!",
            ),
        ),
    },
    FeedbackType.MILESTONE: {
        "exact": (
            "Amazing! {streak} days of {habit_name}. This is a major milestone!",
            "{streak} days in a row! {habit_name} is becoming part of who you are.",
        ),
        "near_milestone": (
            "{streak} days and counting! Next milestone: {next_milestone} days.",
        ),
        "default": (
            "Incredible! {streak} days of {habit_name} and still going strong.",
        ),
    },
    FeedbackType.MISSED: {
        "lost_streak": (
            "Your {previous_streak}-day streak of {habit_name} ended, but the progress you made is still yours.",
            "One missed day does not erase {previous_streak} days of work. Start again tomorrow!",
        ),
        "weekend": (
            "Weekends can be tricky. {habit_name} will be waiting for you tomorrow.",
        ),
        "default": (
            "Missing a day is normal. Tomorrow is a fresh start for {habit_name}.",
            "Be kind to yourself. Pick {habit_name} up again tomorrow.",
        ),
    },
    FeedbackType.GENERAL: {
        "default": (
            "Keep going! Small steps every day add up.",
            "Your completion rate is {completion_rate:%:steady}. Keep it up!",
        ),
    },
}

EMOJI_PALETTES: Dict[FeedbackType, Tuple[str, ...]] = {
    FeedbackType.COMPLETION: ("👍", "✅", "🎉", "💪", "⭐"),
    FeedbackType.STREAK: ("🔥", "⚡", "🚀", "💫"),
    FeedbackType.MILESTONE: ("🏆", "🥇", "🎖️", "👑"),
    FeedbackType.MISSED: ("🌱", "💙", "🤗"),
    FeedbackType.GENERAL: ("✨", "😊", "🌟"),
}

ANIMATIONS: Dict[FeedbackType, AnimationType] = {
    FeedbackType.COMPLETION: AnimationType.THUMBS_UP,
    FeedbackType.STREAK: AnimationType.SPARKLE,
    FeedbackType.MILESTONE: AnimationType.FIREWORKS,
    FeedbackType.MISSED: AnimationType.NONE,
    FeedbackType.GENERAL: AnimationType.CONFETTI,
}

DEFAULT_MESSAGES: Dict[FeedbackType, Tuple[str, str]] = {
    FeedbackType.COMPLETION: ("Well done! Consistency is the key to success.", "👍"),
    FeedbackType.STREAK: ("Congratulations on {streak} days in a row! Keep the momentum.", "🔥"),
    FeedbackType.MILESTONE: ("Amazing! {streak} days in a row is a major milestone!", "🏆"),
    FeedbackType.MISSED: ("Missing a day is normal. Tomorrow is a fresh start.", "🌱"),
    FeedbackType.GENERAL: ("Keep going! Small steps every day add up.", "✨"),
}

DEFAULT_FEEDBACK = FeedbackMessage(
    message=DEFAULT_MESSAGES[FeedbackType.COMPLETION][0],
    type=FeedbackType.COMPLETION,
    emoji="👍",
    animation_type=AnimationType.THUMBS_UP,
)

def default_feedback(feedback_type: FeedbackType, streak: int = 0) -> FeedbackMessage:
    """Жестко заданное сообщение для категории"""
    template, emoji = DEFAULT_MESSAGES[feedback_type]
    return FeedbackMessage(
        message=render_template(template, {'streak': streak}),
        type=feedback_type,
        emoji=emoji,
        animation_type=ANIMATIONS[feedback_type],
    )

# ===== ENGINE =====

class FeedbackTemplateEngine:
    """
    Движок шаблонов обратной связи

    Категория выбирается по длине серии (COMPLETION -> STREAK -> MILESTONE),
    пропуск дает MISSED. Внутри категории корзина шаблонов выбирается по контексту.
    Случайность (шаблон, эмодзи) идет только через переданный rng.
    """

    def __init__(self, rng: Optional[random.Random] = None,
                 templates: Optional[Dict[FeedbackType, Dict[str, TemplateBucket]]] = None):
        self.rng = rng or random.Random()
        self.templates = templates if templates is not None else TEMPLATES

    @staticmethod
    def select_feedback_type(streak: int, completed: bool = True) -> FeedbackType:
        if not completed:
            return FeedbackType.MISSED
        if streak >= MILESTONE_STREAK:
            return FeedbackType.MILESTONE
        if streak >= STREAK_THRESHOLD:
            return FeedbackType.STREAK
        return FeedbackType.COMPLETION

    def select_bucket_key(self, feedback_type: FeedbackType, context: FeedbackContext) -> str:
        """Ключ корзины шаблонов внутри категории"""
        days_to_milestone = context.days_to_next_milestone
        near_milestone = days_to_milestone is not None and days_to_milestone <= NEAR_MILESTONE_DAYS

        if feedback_type == FeedbackType.COMPLETION:
            if context.is_first_completion:
                key = "first"
            elif context.is_weekend:
                key = "weekend"
            elif context.time_of_day is not None:
                key = context.time_of_day
            else:
                key = "category"
        elif feedback_type == FeedbackType.STREAK:
            key = "near_milestone" if near_milestone else "category"
        elif feedback_type == FeedbackType.MILESTONE:
            if context.streak in MILESTONES:
                key = "exact"
            elif near_milestone:
                key = "near_milestone"
            else:
                key = "default"
        elif feedback_type == FeedbackType.MISSED:
            if context.previous_streak >= LOST_STREAK_THRESHOLD:
                key = "lost_streak"
            elif context.is_weekend:
                key = "weekend"
            else:
                key = "default"
        elif feedback_type == FeedbackType.GENERAL:
            key = "default"
        else:
            raise TypeError(f"Unknown feedback type: {feedback_type!r}")

        buckets = self.templates.get(feedback_type, {})
        if key not in buckets:
            key = "category" if "category" in buckets else "default"
        return key

    def choose_template(self, feedback_type: FeedbackType, context: FeedbackContext) -> Optional[str]:
        buckets = self.templates.get(feedback_type, {})
        bucket = buckets.get(self.select_bucket_key(feedback_type, context))
        if bucket is None:
            return None
        candidates = resolve_bucket(bucket, context.category)
        if not candidates:
            return None
        return self.rng.choice(candidates)

    def choose_emoji(self, feedback_type: FeedbackType) -> Optional[str]:
        palette = EMOJI_PALETTES.get(feedback_type)
        if not palette:
            return None
        return self.rng.choice(palette)

    @staticmethod
    def animation_for(feedback_type: FeedbackType) -> AnimationType:
        return ANIMATIONS[feedback_type]

    def generate(self, context: FeedbackContext,
                 feedback_type: Optional[FeedbackType] = None) -> FeedbackMessage:
        """Сообщение обратной связи для события"""
        feedback_type = feedback_type or self.select_feedback_type(context.streak, context.completed)
        template = self.choose_template(feedback_type, context)
        if template is None:
            logger.warning("No feedback templates for %s, using default message", feedback_type.value)
            return default_feedback(feedback_type, context.streak)

        return FeedbackMessage(
            message=render_template(template, context.variables()),
            type=feedback_type,
            emoji=self.choose_emoji(feedback_type),
            animation_type=self.animation_for(feedback_type),
        )
