#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitGem Analytics v4.0 - Habit Recommendation Service
Рекомендации привычек с кэшированием результатов

Версия: 4.0.1
Дата: 2025-06-12
"""

import json
import hashlib
import logging
from typing import List, Optional

from habitgem.config import CacheConfig, config
from habitgem.core.cache import TTLCache
from habitgem.core.recommendation_engine import RecommendationEngine
from habitgem.models.habit import Habit, UserPreferences
from habitgem.models.insights import HabitEvidence, HabitRecommendation
from habitgem.services.ai_client import AIServiceClient
from habitgem.services.api_models import (
    HabitRecommendationRequest, HabitRecommendationResponse, UserPreferencesDto
)
from habitgem.services.record_store import RecordStore

logger = logging.getLogger(__name__)

ANONYMOUS_USER = "anonymous"

def initial_cache_key(preferences: UserPreferences) -> str:
    """Ключ кэша рекомендаций холодного старта"""
    categories = "_".join(c.value for c in preferences.habit_categories)
    return f"{ANONYMOUS_USER}_{categories}_{preferences.difficulty_preference}"

def personalized_cache_key(user_id: str, preferences: Optional[UserPreferences]) -> str:
    """Ключ кэша персональных рекомендаций: пользователь и отпечаток предпочтений"""
    if preferences is None:
        return user_id
    payload = json.dumps(preferences.to_dict(), sort_keys=True)
    return f"{user_id}_{hashlib.sha1(payload.encode()).hexdigest()[:12]}"

def _to_domain(response: HabitRecommendationResponse) -> List[HabitRecommendation]:
    return [dto.to_domain() for dto in response.recommendations]

class HabitRecommendationService:
    """Сервис рекомендаций привычек"""

    def __init__(self, store: RecordStore, client: Optional[AIServiceClient] = None,
                 engine: Optional[RecommendationEngine] = None,
                 cache_settings: Optional[CacheConfig] = None):
        cache_settings = cache_settings or config.cache
        self.store = store
        self.client = client or AIServiceClient()
        self.engine = engine or RecommendationEngine()
        self.recommendations_cache: TTLCache[List[HabitRecommendation]] = TTLCache(
            cache_settings.recommendation_cache_size, cache_settings.ttl_seconds
        )
        self.evidence_cache: TTLCache[HabitEvidence] = TTLCache(
            cache_settings.evidence_cache_size, cache_settings.ttl_seconds
        )

    async def get_initial_recommendations(self, preferences: Optional[UserPreferences] = None) -> List[HabitRecommendation]:
        """Рекомендации для нового пользователя"""
        if preferences is None:
            logger.warning("⚠️ No preferences given, using defaults")
            preferences = UserPreferences.default()

        cache_key = initial_cache_key(preferences)
        cached = self.recommendations_cache.get(cache_key)
        if cached is not None:
            return cached

        result = await self.client.get_recommendations(
            HabitRecommendationRequest(
                user_id=ANONYMOUS_USER,
                preferences=UserPreferencesDto.from_domain(preferences)
            )
        )
        recommendations = result.map(_to_domain).or_else_compute(
            lambda: self.engine.initial_recommendations(preferences)
        )

        self.recommendations_cache.put(cache_key, recommendations)
        logger.info(f"✅ {len(recommendations)} initial recommendations prepared")
        return recommendations

    async def get_personalized_recommendations(self, user_id: str,
                                               preferences: Optional[UserPreferences] = None) -> List[HabitRecommendation]:
        """Рекомендации с учетом существующих привычек пользователя"""
        cache_key = personalized_cache_key(user_id, preferences)
        cached = self.recommendations_cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            existing_habits: List[Habit] = await self.store.list_habits(user_id)
        except Exception as e:
            logger.error(f"❌ Failed to load habits of user {user_id}: {e}")
            existing_habits = []

        result = await self.client.get_recommendations(
            HabitRecommendationRequest(user_id=user_id, existing_habits=[h.id for h in existing_habits])
        )
        recommendations = result.map(
            lambda response: self.engine.personalize(_to_domain(response), existing_habits, preferences)
        ).or_else_compute(
            lambda: self.engine.personalized_recommendations(existing_habits, preferences)
        )

        self.recommendations_cache.put(cache_key, recommendations)
        logger.info(f"✅ {len(recommendations)} personalized recommendations for user {user_id}")
        return recommendations

    async def get_habit_evidence(self, habit_id: str) -> HabitEvidence:
        """Научное обоснование привычки"""
        cached = self.evidence_cache.get(habit_id)
        if cached is not None:
            return cached

        evidence = self.engine.evidence_for(habit_id)
        self.evidence_cache.put(habit_id, evidence)
        return evidence

    def clear_cache(self):
        self.recommendations_cache.clear()
        self.evidence_cache.clear()

    def get_cache_stats(self) -> dict:
        return {
            'recommendations': self.recommendations_cache.get_stats(),
            'evidence': self.evidence_cache.get_stats()
        }
