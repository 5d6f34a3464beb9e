# habitgem/services/__init__.py

"""
Модуль сервисов HabitGem Analytics v4.0

Фасады над аналитическим ядром: сначала удаленный AI сервис,
при любой ошибке - локальное вычисление.
"""

import logging
from typing import Optional

from .ai_client import AIServiceClient
from .analysis_service import HabitAnalysisService
from .feedback_service import ProgressFeedbackService
from .record_store import InMemoryRecordStore, RecordStore
from .recommendation_service import HabitRecommendationService
from .result import RemoteError, RemoteErrorKind, RemoteResult

logger = logging.getLogger(__name__)

class ServiceManager:
    """
    Менеджер для управления всеми сервисами аналитики

    Обеспечивает:
    - Общий HTTP клиент AI сервиса для всех фасадов
    - Инициализацию фасадов поверх одного хранилища записей
    - Корректное закрытие HTTP сессии
    """

    def __init__(self):
        self.store: Optional[RecordStore] = None
        self.client: Optional[AIServiceClient] = None
        self.analysis_service: Optional[HabitAnalysisService] = None
        self.recommendation_service: Optional[HabitRecommendationService] = None
        self.feedback_service: Optional[ProgressFeedbackService] = None
        self.initialized = False

    def initialize_services(self, store: RecordStore, client: Optional[AIServiceClient] = None) -> bool:
        """Инициализация всех сервисов"""
        try:
            logger.info("🔧 Initializing HabitGem services...")

            self.store = store
            self.client = client or AIServiceClient()
            if not self.client.enabled:
                logger.warning("⚠️ AI service is not configured, all results will be computed locally")

            self.analysis_service = HabitAnalysisService(store, self.client)
            self.recommendation_service = HabitRecommendationService(store, self.client)
            self.feedback_service = ProgressFeedbackService(store, self.client)

            self.initialized = True
            logger.info("✅ All services initialized")
            return True

        except Exception as e:
            logger.error(f"❌ Service initialization failed: {e}")
            self.analysis_service = None
            self.recommendation_service = None
            self.feedback_service = None
            self.initialized = False
            return False

    def health_check(self) -> dict:
        """Проверка состояния всех сервисов"""
        health = {
            "status": "healthy" if self.initialized else "error",
            "services": {
                "ai_client": {"status": "healthy" if self.client and self.client.enabled else "warning"},
            }
        }

        if self.recommendation_service:
            health["services"]["recommendation_service"] = {
                "status": "healthy",
                "cache": self.recommendation_service.get_cache_stats()
            }

        service_statuses = [s.get("status", "unknown") for s in health["services"].values()]
        if health["status"] == "healthy" and "warning" in service_statuses:
            health["status"] = "warning"

        return health

    async def close_services(self):
        """Закрытие всех сервисов"""
        try:
            logger.info("🛑 Closing services...")
            if self.client:
                await self.client.close()
        except Exception as e:
            logger.error(f"❌ Failed to close services: {e}")
        finally:
            self.client = None
            self.analysis_service = None
            self.recommendation_service = None
            self.feedback_service = None
            self.initialized = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close_services()

# Глобальный экземпляр менеджера сервисов
_service_manager = None

def get_service_manager() -> ServiceManager:
    """Получить глобальный менеджер сервисов"""
    global _service_manager
    if _service_manager is None:
        _service_manager = ServiceManager()
    return _service_manager

def initialize_all_services(store: Optional[RecordStore] = None,
                            client: Optional[AIServiceClient] = None) -> bool:
    """Инициализация всех сервисов"""
    manager = get_service_manager()
    return manager.initialize_services(store if store is not None else InMemoryRecordStore(), client)

async def close_all_services():
    """Закрытие всех сервисов"""
    global _service_manager
    if _service_manager:
        await _service_manager.close_services()
        _service_manager = None

__all__ = [
    'AIServiceClient',
    'HabitAnalysisService',
    'HabitRecommendationService',
    'ProgressFeedbackService',
    'RecordStore',
    'InMemoryRecordStore',
    'RemoteError',
    'RemoteErrorKind',
    'RemoteResult',
    'ServiceManager',
    'get_service_manager',
    'initialize_all_services',
    'close_all_services',
]
