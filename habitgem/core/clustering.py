"""
Кластеризация записей выполнения методом k-средних

Признаки записи нормализованы в [0, 1]: день недели, факт выполнения,
время выполнения в секундах от полуночи, оценка сложности.
"""

import random
import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from habitgem.models.habit import CompletionRecord

logger = logging.getLogger(__name__)

FEATURE_COUNT = 4
SECONDS_PER_DAY = 86400

def extract_features(record: CompletionRecord) -> np.ndarray:
    """Вектор признаков одной записи"""
    if record.completion_time is not None:
        t = record.completion_time
        time_feature = (t.hour * 3600 + t.minute * 60 + t.second) / SECONDS_PER_DAY
    else:
        time_feature = 0.5

    difficulty_feature = record.difficulty / 5 if record.difficulty is not None else 0.5

    return np.array([
        record.date.isoweekday() / 7,
        1.0 if record.is_completed else 0.0,
        time_feature,
        difficulty_feature,
    ])

def feature_matrix(records: List[CompletionRecord]) -> np.ndarray:
    """Матрица признаков: строка на запись"""
    if not records:
        return np.empty((0, FEATURE_COUNT))
    return np.vstack([extract_features(r) for r in records])

def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    return float(np.linalg.norm(np.asarray(a, dtype=float) - np.asarray(b, dtype=float)))

def kmeans(points, k: int, max_iterations: int = 100,
           seed: Optional[int] = None) -> List[int]:
    """
    k-средних над векторами признаков.

    Без seed начальные центроиды - первые k точек; с seed выбираются k различных
    точек через random.Random(seed). Возвращает индекс кластера для каждой точки.
    """
    points = np.asarray(points, dtype=float)
    if k < 1:
        raise ValueError("k must be positive")
    if len(points) < k:
        raise ValueError(f"need at least {k} points, got {len(points)}")

    if seed is None:
        seed_indices = list(range(k))
    else:
        seed_indices = sorted(random.Random(seed).sample(range(len(points)), k))
    centroids = points[seed_indices].copy()

    assignments = np.full(len(points), -1)
    for iteration in range(max_iterations):
        # argmin берет первый центроид при равных расстояниях
        distances = np.linalg.norm(points[:, np.newaxis, :] - centroids[np.newaxis, :, :], axis=2)
        nearest = distances.argmin(axis=1)

        if np.array_equal(nearest, assignments):
            logger.debug("k-means converged after %d iterations", iteration)
            break
        assignments = nearest

        for cluster in range(k):
            members = points[assignments == cluster]
            # Пустой кластер сохраняет прежний центроид
            if len(members):
                centroids[cluster] = members.mean(axis=0)

    return assignments.tolist()

def cluster_records(records: List[CompletionRecord], cluster_count: int = 3,
                    max_iterations: int = 100,
                    seed: Optional[int] = None) -> Dict[int, List[CompletionRecord]]:
    """Группировка записей в не более чем cluster_count кластеров"""
    if cluster_count < 1:
        raise ValueError("cluster_count must be positive")
    if len(records) < 2 * cluster_count:
        return {0: list(records)}

    assignments = kmeans(feature_matrix(records), cluster_count, max_iterations, seed)

    clusters: Dict[int, List[CompletionRecord]] = {}
    for record, cluster in zip(records, assignments):
        clusters.setdefault(cluster, []).append(record)
    return clusters
