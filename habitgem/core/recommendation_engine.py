#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitGem Analytics v4.0 - Recommendation Engine
Фильтрация и ранжирование каталога привычек по предпочтениям пользователя

Версия: 4.0.1
Дата: 2025-06-12
"""

import random
import logging
from typing import Dict, List, Optional, Tuple

from habitgem.core.catalog import CATALOG, GENERIC_SCIENTIFIC_BASIS, STARTER_SET, candidates_for, find_entry
from habitgem.models.enums import GoalType, HabitCategory
from habitgem.models.habit import Habit, UserPreferences
from habitgem.models.insights import HabitEvidence, HabitRecommendation

logger = logging.getLogger(__name__)

INITIAL_LIMIT = 10
PERSONALIZED_LIMIT = 5
MAX_DIFFICULTY_GAP = 2
FAVORED_CATEGORY_COUNT = 3

GOAL_CATEGORIES: Dict[GoalType, HabitCategory] = {
    GoalType.HEALTH_IMPROVEMENT: HabitCategory.HEALTH,
    GoalType.STRESS_REDUCTION: HabitCategory.MINDFULNESS,
    GoalType.PRODUCTIVITY_BOOST: HabitCategory.PRODUCTIVITY,
}

DEFAULT_MINUTES = 15
CATEGORY_MINUTES: Dict[HabitCategory, int] = {
    HabitCategory.FITNESS: 30,
    HabitCategory.MINDFULNESS: 15,
    HabitCategory.LEARNING: 20,
    HabitCategory.PRODUCTIVITY: 25,
    HabitCategory.HEALTH: 10,
}

# ===== FILTERS =====

def filter_by_difficulty(candidates: List[HabitRecommendation], target: float) -> List[HabitRecommendation]:
    return [c for c in candidates if abs(c.difficulty - target) <= MAX_DIFFICULTY_GAP]

def filter_by_time(candidates: List[HabitRecommendation],
                   preferences: Optional[UserPreferences]) -> List[HabitRecommendation]:
    """Не больше половины среднего свободного времени в день"""
    if preferences is None:
        return candidates
    available = preferences.average_available_minutes
    if available is None:
        return candidates
    return [c for c in candidates if c.estimated_minutes_per_day <= available / 2]

def deduplicate(candidates: List[HabitRecommendation]) -> List[HabitRecommendation]:
    seen = set()
    unique = []
    for candidate in candidates:
        if candidate.dedupe_key not in seen:
            seen.add(candidate.dedupe_key)
            unique.append(candidate)
    return unique

def favored_categories(habits: List[Habit], limit: int = FAVORED_CATEGORY_COUNT) -> List[HabitCategory]:
    """Категории по числу привычек, при равенстве - по первому появлению"""
    counts: Dict[HabitCategory, int] = {}
    for habit in habits:
        counts[habit.category] = counts.get(habit.category, 0) + 1
    order = list(counts)
    return sorted(order, key=lambda c: (-counts[c], order.index(c)))[:limit]

def habit_minutes(habit: Habit) -> int:
    if habit.estimated_minutes_per_day is not None:
        return habit.estimated_minutes_per_day
    return CATEGORY_MINUTES.get(habit.category, DEFAULT_MINUTES)

def average_minutes(habits: List[Habit]) -> float:
    if not habits:
        return float(DEFAULT_MINUTES)
    return sum(habit_minutes(h) for h in habits) / len(habits)

def average_difficulty(habits: List[Habit]) -> float:
    return sum(h.difficulty for h in habits) / len(habits)

class RecommendationEngine:
    """
    Движок рекомендаций привычек

    Работает только со статическим каталогом; используется как основной путь
    при отсутствии удаленного сервиса и как постобработка его ответов.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def initial_recommendations(self, preferences: UserPreferences,
                                limit: int = INITIAL_LIMIT) -> List[HabitRecommendation]:
        """Рекомендации для нового пользователя (холодный старт)"""
        categories = list(preferences.habit_categories)
        if not categories and not preferences.goal_types:
            categories = UserPreferences.default().habit_categories

        candidates: List[HabitRecommendation] = []
        for category in categories:
            candidates.extend(candidates_for(category, preferences.difficulty_preference))

        for goal in preferences.goal_types:
            goal_category = GOAL_CATEGORIES.get(goal)
            if goal_category is not None and goal_category not in categories:
                candidates.extend(filter_by_difficulty(
                    CATALOG[goal_category], preferences.difficulty_preference
                )[:1])

        candidates = filter_by_difficulty(candidates, preferences.difficulty_preference)
        candidates = filter_by_time(candidates, preferences)
        result = deduplicate(candidates)[:limit]

        logger.debug("Initial recommendations: %d of %d candidates", len(result), len(candidates))
        return result

    def personalized_recommendations(self, existing_habits: List[Habit],
                                     preferences: Optional[UserPreferences] = None,
                                     limit: int = PERSONALIZED_LIMIT) -> List[HabitRecommendation]:
        """Рекомендации на основе уже существующих привычек"""
        if not existing_habits:
            starters = list(STARTER_SET)
            if preferences is not None:
                starters = filter_by_difficulty(starters, preferences.difficulty_preference)
                starters = filter_by_time(starters, preferences)
            return starters[:limit]

        favored = favored_categories(existing_habits)
        target_difficulty = average_difficulty(existing_habits)
        existing_names = {h.name.strip().lower() for h in existing_habits}

        def fresh(category: HabitCategory) -> List[HabitRecommendation]:
            entries = filter_by_difficulty(candidates_for(category, int(round(target_difficulty))), target_difficulty)
            return [c for c in entries if c.name.lower() not in existing_names]

        candidates: List[HabitRecommendation] = []
        for category in favored:
            candidates.extend(fresh(category))

        # Из дополнительной категории - не больше одной привычки
        complementary = [c for c in CATALOG if c not in favored]
        if complementary:
            candidates.extend(fresh(self.rng.choice(complementary))[:1])

        candidates = deduplicate(filter_by_time(candidates, preferences))

        ranked = self._rank(candidates, favored, average_minutes(existing_habits))
        return ranked[:limit]

    def personalize(self, recommendations: List[HabitRecommendation], existing_habits: List[Habit],
                    preferences: Optional[UserPreferences] = None) -> List[HabitRecommendation]:
        """Постобработка рекомендаций, полученных от удаленного сервиса"""
        if not existing_habits:
            target = preferences.difficulty_preference if preferences is not None else None
            candidates = recommendations if target is None else filter_by_difficulty(recommendations, target)
            return deduplicate(filter_by_time(candidates, preferences))[:INITIAL_LIMIT]

        candidates = filter_by_difficulty(recommendations, average_difficulty(existing_habits))
        candidates = deduplicate(filter_by_time(candidates, preferences))
        ranked = self._rank(candidates, favored_categories(existing_habits), average_minutes(existing_habits))
        return ranked[:PERSONALIZED_LIMIT]

    @staticmethod
    def _rank(candidates: List[HabitRecommendation], favored: List[HabitCategory],
              target_minutes: float) -> List[HabitRecommendation]:
        def sort_key(candidate: HabitRecommendation) -> Tuple[int, float]:
            rank = favored.index(candidate.category) if candidate.category in favored else len(favored)
            return rank, abs(candidate.estimated_minutes_per_day - target_minutes)

        return sorted(candidates, key=sort_key)

    def evidence_for(self, habit_id: str) -> HabitEvidence:
        """Научное обоснование из каталога или общее"""
        entry = find_entry(habit_id)
        if entry is None:
            return HabitEvidence(
                habit_id=habit_id,
                scientific_basis=GENERIC_SCIENTIFIC_BASIS,
                summary="Small, consistent actions are the foundation of lasting habits.",
            )
        return HabitEvidence(
            habit_id=habit_id,
            scientific_basis=entry.scientific_basis,
            summary=entry.reason,
        )
