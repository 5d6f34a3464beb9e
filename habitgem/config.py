#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitGem Analytics v4.0 - Configuration
Централизованная конфигурация аналитического ядра с валидацией

Версия: 4.0.1
Дата: 2025-06-12
"""

import os
import sys
import logging
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass
from enum import Enum

class Environment(Enum):
    """Среды выполнения"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"

class LogLevel(Enum):
    """Уровни логирования"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

@dataclass
class AnalyticsConfig:
    """Пороговые значения аналитики"""
    min_records_for_patterns: int = 7
    min_records_for_trend: int = 14
    pattern_confidence_threshold: float = 0.6
    anomaly_sensitivity: float = 2.0
    cluster_count: int = 3
    cluster_max_iterations: int = 100
    correlation_min_common_days: int = 5
    correlation_threshold: float = 0.3

@dataclass
class AIServiceConfig:
    """Конфигурация удаленного AI сервиса"""
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    request_timeout: int = 10
    enabled: bool = True

    @property
    def is_configured(self) -> bool:
        return self.enabled and bool(self.base_url)

@dataclass
class CacheConfig:
    """Конфигурация кэшей сервисов"""
    recommendation_cache_size: int = 10
    evidence_cache_size: int = 20
    ttl_seconds: int = 3600

def _env_bool(key: str, default: str) -> bool:
    return os.getenv(key, default).lower() == 'true'

class HabitGemConfig:
    """Главный класс конфигурации"""

    def __init__(self):
        self.environment = Environment(os.getenv('ENVIRONMENT', 'development'))
        self._load_config()
        self._validate_config()

    def _load_config(self):
        """Загрузка конфигурации из переменных окружения"""

        # Аналитика
        self.analytics = AnalyticsConfig(
            min_records_for_patterns=int(os.getenv('MIN_RECORDS', 7)),
            min_records_for_trend=int(os.getenv('TREND_MIN_RECORDS', 14)),
            pattern_confidence_threshold=float(os.getenv('PATTERN_CONFIDENCE_THRESHOLD', 0.6)),
            anomaly_sensitivity=float(os.getenv('ANOMALY_SENSITIVITY', 2.0)),
            cluster_count=int(os.getenv('CLUSTER_COUNT', 3)),
            cluster_max_iterations=int(os.getenv('CLUSTER_MAX_ITERATIONS', 100)),
            correlation_min_common_days=int(os.getenv('CORRELATION_MIN_COMMON_DAYS', 5)),
            correlation_threshold=float(os.getenv('CORRELATION_THRESHOLD', 0.3))
        )

        # Удаленный AI сервис
        self.ai = AIServiceConfig(
            base_url=os.getenv('AI_SERVICE_URL'),
            api_key=os.getenv('AI_SERVICE_API_KEY'),
            request_timeout=int(os.getenv('AI_TIMEOUT', 10)),
            enabled=_env_bool('AI_SERVICE_ENABLED', 'true')
        )

        # Кэши
        self.cache = CacheConfig(
            recommendation_cache_size=int(os.getenv('RECOMMENDATION_CACHE_SIZE', 10)),
            evidence_cache_size=int(os.getenv('EVIDENCE_CACHE_SIZE', 20)),
            ttl_seconds=int(os.getenv('CACHE_TTL', 3600))
        )

        self.timezone = os.getenv('TIMEZONE', 'UTC')

        # Логирование
        self.log_dir = Path(os.getenv('LOG_DIR', 'logs'))
        self.log_level = LogLevel(os.getenv('LOG_LEVEL', 'INFO'))
        self.log_to_file = _env_bool('LOG_TO_FILE', 'false')
        self.log_format = os.getenv(
            'LOG_FORMAT',
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        )

    def _validate_config(self):
        """Валидация конфигурации"""
        errors = []
        analytics = self.analytics

        if analytics.min_records_for_patterns < 1:
            errors.append("MIN_RECORDS должен быть положительным числом")

        if analytics.min_records_for_trend < analytics.min_records_for_patterns:
            errors.append("TREND_MIN_RECORDS не может быть меньше MIN_RECORDS")

        if not 0.0 <= analytics.pattern_confidence_threshold <= 1.0:
            errors.append("PATTERN_CONFIDENCE_THRESHOLD должен быть в диапазоне 0-1")

        if analytics.anomaly_sensitivity <= 0:
            errors.append("ANOMALY_SENSITIVITY должен быть больше 0")

        if analytics.cluster_count < 1 or analytics.cluster_max_iterations < 1:
            errors.append("CLUSTER_COUNT и CLUSTER_MAX_ITERATIONS должны быть положительными")

        if not 0.0 <= analytics.correlation_threshold <= 1.0:
            errors.append("CORRELATION_THRESHOLD должен быть в диапазоне 0-1")

        if self.cache.recommendation_cache_size < 1 or self.cache.evidence_cache_size < 1:
            errors.append("Размер кэша должен быть положительным числом")

        if self.ai.request_timeout <= 0:
            errors.append("AI_TIMEOUT должен быть больше 0")

        if self.ai.enabled and self.ai.base_url and not self.ai.base_url.startswith(('http://', 'https://')):
            errors.append(f"AI_SERVICE_URL имеет неверный формат: {self.ai.base_url}")

        if errors:
            raise ValueError("Ошибки конфигурации:\n" + "\n".join(f"• {error}" for error in errors))

        if self.ai.enabled and not self.ai.base_url:
            logging.getLogger(__name__).debug("AI_SERVICE_URL not set, remote calls will use local fallback")

    def get_logging_config(self) -> Dict[str, Any]:
        """Получение конфигурации логирования"""
        handlers = ['console']
        if self.log_to_file:
            handlers.append('file')

        logging_config = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.log_format,
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'level': self.log_level.value,
                    'formatter': 'default',
                    'stream': sys.stdout
                }
            },
            'loggers': {
                '': {
                    'level': self.log_level.value,
                    'handlers': handlers,
                    'propagate': False
                },
                'aiohttp': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                }
            }
        }

        if self.log_to_file:
            logging_config['handlers']['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'filename': str(self.log_dir / f"habitgem_{self.environment.value}.log"),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }

        return logging_config

    def is_development(self) -> bool:
        """Проверка режима разработки"""
        return self.environment == Environment.DEVELOPMENT

    def is_production(self) -> bool:
        """Проверка продакшн режима"""
        return self.environment == Environment.PRODUCTION

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация конфигурации в словарь"""
        return {
            'environment': self.environment.value,
            'analytics': {
                'min_records_for_patterns': self.analytics.min_records_for_patterns,
                'min_records_for_trend': self.analytics.min_records_for_trend,
                'pattern_confidence_threshold': self.analytics.pattern_confidence_threshold,
                'anomaly_sensitivity': self.analytics.anomaly_sensitivity,
                'cluster_count': self.analytics.cluster_count,
                'correlation_threshold': self.analytics.correlation_threshold
            },
            'ai': {
                'base_url': self.ai.base_url,
                'api_key': (self.ai.api_key[:6] + "...") if self.ai.api_key else None,  # Скрываем ключ
                'request_timeout': self.ai.request_timeout,
                'enabled': self.ai.is_configured
            },
            'cache': {
                'recommendation_cache_size': self.cache.recommendation_cache_size,
                'evidence_cache_size': self.cache.evidence_cache_size,
                'ttl_seconds': self.cache.ttl_seconds
            },
            'timezone': self.timezone,
            'log_level': self.log_level.value
        }

# Глобальный экземпляр конфигурации
config = HabitGemConfig()
