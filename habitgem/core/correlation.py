"""
Попарная корреляция привычек через коэффициент фи (таблица сопряженности 2x2)
"""

import logging
from itertools import combinations
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from habitgem.config import AnalyticsConfig, config
from habitgem.models.enums import CorrelationType
from habitgem.models.habit import CompletionRecord, Habit
from habitgem.models.insights import HabitCorrelation

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class ContingencyTable:
    """Таблица сопряженности по общим датам"""
    both: int = 0       # n11
    only_a: int = 0     # n10
    only_b: int = 0     # n01
    neither: int = 0    # n00

    @property
    def total(self) -> int:
        return self.both + self.only_a + self.only_b + self.neither

    def as_array(self) -> np.ndarray:
        """Матрица 2x2: строки - A выполнена/нет, столбцы - B выполнена/нет"""
        return np.array([[self.both, self.only_a], [self.only_b, self.neither]], dtype=float)

def build_contingency_table(records_a: List[CompletionRecord],
                            records_b: List[CompletionRecord]) -> ContingencyTable:
    """Таблица по датам, присутствующим в обоих списках"""
    status_a = {r.date: r.is_completed for r in records_a}
    status_b = {r.date: r.is_completed for r in records_b}

    common = sorted(status_a.keys() & status_b.keys())
    a = np.array([status_a[day] for day in common], dtype=bool)
    b = np.array([status_b[day] for day in common], dtype=bool)

    return ContingencyTable(
        both=int(np.sum(a & b)),
        only_a=int(np.sum(a & ~b)),
        only_b=int(np.sum(~a & b)),
        neither=int(np.sum(~a & ~b)),
    )

def phi_coefficient(table: ContingencyTable) -> float:
    """Коэффициент фи в диапазоне [-1, 1], 0 при нулевом знаменателе"""
    observed = table.as_array()
    denominator = np.prod(observed.sum(axis=1)) * np.prod(observed.sum(axis=0))
    if denominator == 0:
        return 0.0
    (n11, n10), (n01, n00) = observed
    phi = (n11 * n00 - n10 * n01) / np.sqrt(denominator)
    return float(np.clip(phi, -1.0, 1.0))

def classify_strength(strength: float, threshold: float = 0.3) -> CorrelationType:
    if strength > threshold:
        return CorrelationType.POSITIVE
    if strength < -threshold:
        return CorrelationType.NEGATIVE
    return CorrelationType.NEUTRAL

def describe_correlation(kind: CorrelationType, name_a: str, name_b: str) -> str:
    if kind == CorrelationType.POSITIVE:
        return f"On days you complete \"{name_a}\" you are more likely to complete \"{name_b}\" too."
    if kind == CorrelationType.NEGATIVE:
        return f"On days you complete \"{name_a}\" you tend to skip \"{name_b}\"."
    return "There is no clear connection between these two habits."

class CorrelationEngine:
    """Поиск связей между привычками одного пользователя"""

    def __init__(self, settings: Optional[AnalyticsConfig] = None):
        self.settings = settings or config.analytics

    def correlate(self, habit_a: Habit, records_a: List[CompletionRecord],
                  habit_b: Habit, records_b: List[CompletionRecord]) -> HabitCorrelation:
        table = build_contingency_table(records_a, records_b)

        if table.total < self.settings.correlation_min_common_days:
            strength = 0.0
        else:
            strength = phi_coefficient(table)

        kind = classify_strength(strength, self.settings.correlation_threshold)
        return HabitCorrelation(
            habit_id_a=habit_a.id,
            habit_id_b=habit_b.id,
            type=kind,
            strength=strength,
            description=describe_correlation(kind, habit_a.name, habit_b.name),
        )

    def find_correlations(self, habits: List[Habit],
                          records_by_habit: Dict[str, List[CompletionRecord]],
                          min_strength: Optional[float] = None) -> List[HabitCorrelation]:
        """Значимые связи по всем парам привычек, по убыванию силы"""
        if len(habits) < 2:
            return []

        bound = self.settings.correlation_threshold if min_strength is None else min_strength
        correlations = []
        for habit_a, habit_b in combinations(habits, 2):
            correlation = self.correlate(
                habit_a, records_by_habit.get(habit_a.id, []),
                habit_b, records_by_habit.get(habit_b.id, []),
            )
            if abs(correlation.strength) > bound:
                correlations.append(correlation)

        correlations.sort(key=lambda c: abs(c.strength), reverse=True)
        logger.debug("Found %d correlations among %d habits", len(correlations), len(habits))
        return correlations
