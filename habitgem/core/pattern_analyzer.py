#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitGem Analytics v4.0 - Pattern Analyzer
Распознавание паттернов во временных рядах выполнения привычек

Версия: 4.0.1
Дата: 2025-06-12
"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

import numpy as np

from habitgem.config import AnalyticsConfig, config
from habitgem.core.clustering import cluster_records
from habitgem.models.enums import PatternType
from habitgem.models.habit import CompletionRecord
from habitgem.utils.datetime_utils import time_of_day, MORNING, AFTERNOON, EVENING, NIGHT

logger = logging.getLogger(__name__)

PatternSignal = Dict[PatternType, float]

TREND_CONFIDENCE = 0.7
MOVING_AVERAGE_WINDOW = 7
RECENT_WINDOW = 14

WEEKDAYS = (0, 1, 2, 3, 4)
WEEKEND = (5, 6)

_TIME_PATTERNS = (
    (MORNING, PatternType.MORNING_PREFERENCE),
    (AFTERNOON, PatternType.AFTERNOON_PREFERENCE),
    (EVENING, PatternType.EVENING_PREFERENCE),
    (NIGHT, PatternType.NIGHT_PREFERENCE),
)

# ===== BASIC STATISTICS =====

def sort_records(records: List[CompletionRecord]) -> List[CompletionRecord]:
    return sorted(records, key=lambda r: r.date)

def completion_rate(records: List[CompletionRecord]) -> float:
    """Доля выполненных записей, 0 для пустого списка"""
    if not records:
        return 0.0
    return float(np.mean([r.is_completed for r in records]))

def day_of_week_rates(records: List[CompletionRecord]) -> Dict[int, float]:
    """Доля выполнения по дням недели (0 - понедельник)"""
    days = np.array([r.date.weekday() for r in records], dtype=int)
    done = np.array([r.is_completed for r in records], dtype=float)
    totals = np.bincount(days, minlength=7)
    completed = np.bincount(days, weights=done, minlength=7)
    return {int(day): float(completed[day] / totals[day]) for day in np.flatnonzero(totals)}

def current_streak(records: List[CompletionRecord]) -> int:
    """
    Текущая серия: длина последней серии одинаковых статусов.
    Положительная для выполненных дней, отрицательная для пропусков.
    """
    if not records:
        return 0

    ordered = sorted(records, key=lambda r: r.date, reverse=True)
    status = ordered[0].is_completed
    streak = 0
    for record in ordered:
        if record.is_completed != status:
            break
        streak += 1
    return streak if status else -streak

def longest_streak(records: List[CompletionRecord]) -> int:
    """Самая длинная серия выполнения в последовательные календарные дни"""
    completed_dates = sorted({r.date for r in records if r.is_completed})
    if not completed_dates:
        return 0

    max_streak = 1
    streak = 1
    for i in range(1, len(completed_dates)):
        if completed_dates[i] == completed_dates[i - 1] + timedelta(days=1):
            streak += 1
            max_streak = max(max_streak, streak)
        else:
            streak = 1
    return max_streak

def status_runs(records: List[CompletionRecord]) -> List[int]:
    """Длины максимальных серий одинакового статуса в хронологическом порядке"""
    runs: List[int] = []
    previous: Optional[bool] = None
    for record in sort_records(records):
        if record.is_completed == previous:
            runs[-1] += 1
        else:
            runs.append(1)
            previous = record.is_completed
    return runs

# ===== ANALYZER =====

class PatternAnalyzer:
    """
    Анализатор паттернов выполнения привычек

    Все методы - чистые функции над списком записей одной привычки:
    - Недельные паттерны (будни/выходные/конкретный день)
    - Серии, время суток, тренд
    - Аномалии, кластеры, прогноз вероятности выполнения
    """

    def __init__(self, settings: Optional[AnalyticsConfig] = None):
        self.settings = settings or config.analytics

    def identify_patterns(self, records: List[CompletionRecord]) -> PatternSignal:
        """Карта паттерн -> уверенность для списка записей"""
        if len(records) < self.settings.min_records_for_patterns:
            return {PatternType.NOT_ENOUGH_DATA: 1.0}

        ordered = sort_records(records)
        threshold = self.settings.pattern_confidence_threshold
        patterns: PatternSignal = {}

        weekly_kind, weekly_confidence = self.detect_weekday_pattern(ordered)
        if weekly_confidence > threshold:
            patterns[PatternType.WEEKDAY_PATTERN] = weekly_confidence
            patterns[weekly_kind] = weekly_confidence

        streak_confidence = self.detect_streak_pattern(ordered)
        if streak_confidence > threshold:
            patterns[PatternType.STREAK_BASED] = streak_confidence

        time_kind, time_confidence = self.detect_time_of_day_pattern(ordered)
        if time_confidence > threshold:
            patterns[PatternType.TIME_OF_DAY] = time_confidence
            patterns[time_kind] = time_confidence

        trend_kind = self.detect_trend_pattern(ordered)
        if trend_kind != PatternType.NOT_ENOUGH_DATA:
            patterns[trend_kind] = TREND_CONFIDENCE

        logger.debug("Identified %d patterns over %d records", len(patterns), len(records))
        return patterns

    # ===== DETECTORS =====

    def detect_weekday_pattern(self, records: List[CompletionRecord]) -> Tuple[PatternType, float]:
        """Будни против выходных, затем отклонение отдельного дня"""
        day_rates = day_of_week_rates(records)
        if not day_rates:
            return PatternType.NO_WEEKLY_PATTERN, 0.0

        weekday_values = [day_rates[d] for d in WEEKDAYS if d in day_rates]
        weekend_values = [day_rates[d] for d in WEEKEND if d in day_rates]

        if weekday_values and weekend_values:
            weekday_rate = float(np.mean(weekday_values))
            weekend_rate = float(np.mean(weekend_values))
            difference = abs(weekday_rate - weekend_rate)
            if difference > 0.3:
                kind = (PatternType.WEEKDAY_PREFERENCE if weekday_rate > weekend_rate
                        else PatternType.WEEKEND_PREFERENCE)
                return kind, min(1.0, difference * 2)

        rates = np.array(list(day_rates.values()))
        max_deviation = float(np.max(np.abs(rates - rates.mean())))
        if max_deviation > 0.3:
            return PatternType.SPECIFIC_DAY_PATTERN, min(1.0, max_deviation * 2)

        return PatternType.NO_WEEKLY_PATTERN, 0.0

    def detect_streak_pattern(self, records: List[CompletionRecord]) -> float:
        """Уверенность по средней длине серий"""
        if len(records) < self.settings.min_records_for_trend:
            return 0.0

        runs = status_runs(records)
        average_run = float(np.mean(runs))
        if average_run > 5:
            return 0.9
        if average_run > 3:
            return 0.7
        if average_run > 2:
            return 0.5
        return 0.3

    def detect_time_of_day_pattern(self, records: List[CompletionRecord]) -> Tuple[PatternType, float]:
        """Доминирующее время суток среди выполненных записей со временем"""
        hours = [r.completion_time.hour for r in records
                 if r.is_completed and r.completion_time is not None]
        if len(hours) < self.settings.min_records_for_patterns:
            return PatternType.NO_TIME_PATTERN, 0.0

        counts = {bucket: 0 for bucket, _ in _TIME_PATTERNS}
        for hour in hours:
            counts[time_of_day(hour)] += 1

        total = len(hours)
        shares = {bucket: count / total for bucket, count in counts.items()}
        max_share = max(shares.values())
        if max_share <= 0.4:
            return PatternType.NO_TIME_PATTERN, 0.0

        dominance = max_share - (sum(shares.values()) - max_share) / 3
        for bucket, kind in _TIME_PATTERNS:
            if shares[bucket] == max_share:
                return kind, dominance
        return PatternType.NO_TIME_PATTERN, 0.0

    def detect_trend_pattern(self, records: List[CompletionRecord]) -> PatternType:
        """Сравнение первой и второй половины истории"""
        if len(records) < self.settings.min_records_for_trend:
            return PatternType.NOT_ENOUGH_DATA

        ordered = sort_records(records)
        midpoint = len(ordered) // 2
        first_rate = completion_rate(ordered[:midpoint])
        second_rate = completion_rate(ordered[-midpoint:])

        if second_rate > first_rate * 1.2:
            return PatternType.IMPROVING_TREND
        if second_rate < first_rate * 0.8:
            return PatternType.DECLINING_TREND
        if abs(second_rate - first_rate) < 0.1:
            return PatternType.STABLE_TREND
        return PatternType.FLUCTUATING_TREND

    # ===== ANOMALIES & PREDICTION =====

    def detect_anomalies(self, records: List[CompletionRecord],
                         sensitivity_threshold: Optional[float] = None) -> List[Tuple[CompletionRecord, float]]:
        """Записи, заметно отклоняющиеся от ожидаемого поведения"""
        if len(records) < self.settings.min_records_for_trend:
            return []

        threshold = (self.settings.anomaly_sensitivity
                     if sensitivity_threshold is None else sensitivity_threshold)
        ordered = sort_records(records)
        overall = completion_rate(ordered)
        day_rates = day_of_week_rates(ordered)

        anomalies = []
        for index, record in enumerate(ordered):
            day_baseline = day_rates.get(record.date.weekday(), overall)
            if index >= MOVING_AVERAGE_WINDOW - 1:
                window = ordered[index - MOVING_AVERAGE_WINDOW + 1:index + 1]
                moving_average = completion_rate(window)
            else:
                moving_average = overall

            expected = (day_baseline + moving_average) / 2
            actual = 1.0 if record.is_completed else 0.0
            score = abs(actual - expected) / (expected * (1 - expected) + 0.1)
            if score > threshold:
                anomalies.append((record, score))

        return anomalies

    def anomaly_rate(self, records: List[CompletionRecord]) -> float:
        if not records:
            return 0.0
        return len(self.detect_anomalies(records)) / len(records)

    def predict_completion_probability(self, records: List[CompletionRecord], target_date: date) -> float:
        """Вероятность выполнения в указанный день, в диапазоне [0.01, 0.99]"""
        if not records:
            return 0.5

        ordered = sort_records(records)
        overall = completion_rate(ordered)

        same_day = [r for r in ordered if r.date.weekday() == target_date.weekday()]
        day_rate = completion_rate(same_day) if same_day else overall
        recent_rate = completion_rate(ordered[-RECENT_WINDOW:])

        streak = current_streak(ordered)
        if streak >= 7:
            streak_factor = 0.2
        elif streak >= 3:
            streak_factor = 0.1
        elif streak <= -7:
            streak_factor = -0.2
        elif streak <= -3:
            streak_factor = -0.1
        else:
            streak_factor = 0.0

        probability = day_rate * 0.4 + recent_rate * 0.4 + overall * 0.2 + streak_factor
        return min(0.99, max(0.01, probability))

    def cluster_records(self, records: List[CompletionRecord], cluster_count: Optional[int] = None,
                        seed: Optional[int] = None) -> Dict[int, List[CompletionRecord]]:
        """Кластеризация записей по поведенческим признакам"""
        k = self.settings.cluster_count if cluster_count is None else cluster_count
        return cluster_records(records, k, self.settings.cluster_max_iterations, seed)
