"""
Результат удаленного вызова: значение или описание ошибки транспорта
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

class RemoteErrorKind(Enum):
    """Виды ошибок удаленного сервиса"""
    DISABLED = "disabled"
    NETWORK = "network"
    TIMEOUT = "timeout"
    STATUS = "status"
    PARSE = "parse"

@dataclass(frozen=True)
class RemoteError:
    """Ошибка удаленного вызова"""
    kind: RemoteErrorKind
    message: str
    status: Optional[int] = None

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.kind.value} ({self.status}): {self.message}"
        return f"{self.kind.value}: {self.message}"

@dataclass(frozen=True)
class RemoteResult(Generic[T]):
    """Результат удаленного вызова"""
    value: Optional[T] = None
    error: Optional[RemoteError] = None

    @classmethod
    def ok(cls, value: T) -> "RemoteResult[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, kind: RemoteErrorKind, message: str, status: Optional[int] = None) -> "RemoteResult[T]":
        return cls(error=RemoteError(kind=kind, message=message, status=status))

    @property
    def success(self) -> bool:
        return self.error is None

    def map(self, convert: Callable[[T], U]) -> "RemoteResult[U]":
        """Преобразование значения; ошибка преобразования становится PARSE"""
        if self.error is not None:
            return RemoteResult(error=self.error)
        try:
            return RemoteResult.ok(convert(self.value))
        except (KeyError, TypeError, ValueError) as e:
            return RemoteResult.fail(RemoteErrorKind.PARSE, f"conversion failed: {e}")

    def or_else_compute(self, fallback: Callable[[], T]) -> T:
        """Значение при успехе, иначе результат локального вычисления"""
        if self.error is None:
            return self.value
        logger.warning("Remote call failed (%s), using local fallback", self.error)
        return fallback()
