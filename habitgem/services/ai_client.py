#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitGem Analytics v4.0 - AI Service Client
HTTP клиент удаленного AI сервиса (JSON поверх POST)

Каждый вызов возвращает RemoteResult: ошибки транспорта, таймауты,
неуспешные статусы и невалидные ответы не выбрасываются, а описываются
значением RemoteError.

Версия: 4.0.1
Дата: 2025-06-12
"""

import asyncio
import logging
from typing import Optional, Type, TypeVar

import aiohttp
from pydantic import BaseModel, ValidationError as PydanticValidationError

from habitgem.config import AIServiceConfig, config
from habitgem.services.api_models import (
    HabitAnalysisRequest, HabitAnalysisResponse,
    HabitRecommendationRequest, HabitRecommendationResponse,
    ProgressFeedbackRequest, ProgressFeedbackResponse
)
from habitgem.services.result import RemoteErrorKind, RemoteResult

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

RECOMMENDATIONS_PATH = "ai/recommendations"
FEEDBACK_PATH = "ai/feedback"
ANALYSIS_PATH = "ai/analysis"

class AIServiceClient:
    """Клиент удаленного AI сервиса"""

    def __init__(self, settings: Optional[AIServiceConfig] = None,
                 session: Optional[aiohttp.ClientSession] = None):
        self.settings = settings or config.ai
        self._session = session
        self._owns_session = session is None

    @property
    def enabled(self) -> bool:
        return self.settings.is_configured

    def _url(self, path: str) -> str:
        return f"{self.settings.base_url.rstrip('/')}/{path}"

    def _headers(self) -> dict:
        headers = {'Content-Type': 'application/json', 'Accept': 'application/json'}
        if self.settings.api_key:
            headers['Authorization'] = f"Bearer {self.settings.api_key}"
        return headers

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.settings.request_timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    async def _post(self, path: str, payload: BaseModel,
                    response_model: Type[ResponseT]) -> RemoteResult[ResponseT]:
        """POST запрос с разбором ответа в pydantic модель"""
        if not self.enabled:
            return RemoteResult.fail(RemoteErrorKind.DISABLED, "AI service is not configured")

        url = self._url(path)
        try:
            session = await self._get_session()
            timeout = aiohttp.ClientTimeout(total=self.settings.request_timeout)
            async with session.post(url, json=payload.model_dump(mode='json', exclude_none=True),
                                    headers=self._headers(), timeout=timeout) as response:
                if response.status < 200 or response.status >= 300:
                    body = await response.text()
                    return RemoteResult.fail(
                        RemoteErrorKind.STATUS, body[:200] or response.reason or "", status=response.status
                    )
                data = await response.json(content_type=None)

            return RemoteResult.ok(response_model.model_validate(data))

        except asyncio.TimeoutError:
            return RemoteResult.fail(RemoteErrorKind.TIMEOUT, f"{path} timed out after {self.settings.request_timeout}s")
        except aiohttp.ClientError as e:
            return RemoteResult.fail(RemoteErrorKind.NETWORK, f"{path}: {e}")
        except (PydanticValidationError, ValueError) as e:
            return RemoteResult.fail(RemoteErrorKind.PARSE, f"{path}: {e}")

    async def get_recommendations(self, request: HabitRecommendationRequest) -> RemoteResult[HabitRecommendationResponse]:
        """Рекомендации привычек от AI сервиса"""
        return await self._post(RECOMMENDATIONS_PATH, request, HabitRecommendationResponse)

    async def get_feedback(self, request: ProgressFeedbackRequest) -> RemoteResult[ProgressFeedbackResponse]:
        """Сообщение обратной связи от AI сервиса"""
        return await self._post(FEEDBACK_PATH, request, ProgressFeedbackResponse)

    async def get_analysis(self, request: HabitAnalysisRequest) -> RemoteResult[HabitAnalysisResponse]:
        """Анализ привычек от AI сервиса"""
        return await self._post(ANALYSIS_PATH, request, HabitAnalysisResponse)

    async def close(self):
        """Закрыть HTTP сессию, если клиент ее создал"""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            logger.debug("AI client session closed")
        self._session = None
