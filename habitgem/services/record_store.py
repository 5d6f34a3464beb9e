"""
Хранилище записей о выполнении привычек

RecordStore - внешний контракт источника данных для сервисов аналитики.
InMemoryRecordStore - реализация в памяти для тестов и демонстраций.
"""

import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional, Tuple

from habitgem.core.pattern_analyzer import completion_rate, current_streak, longest_streak, sort_records
from habitgem.models.habit import CompletionRecord, Habit

logger = logging.getLogger(__name__)

DateRange = Tuple[date, date]

class RecordStore(ABC):
    """Источник привычек и записей о выполнении"""

    @abstractmethod
    async def list_records(self, habit_id: str) -> List[CompletionRecord]:
        """Все записи привычки"""

    @abstractmethod
    async def list_records_by_date_range(self, owner_id: str, start: date, end: date) -> List[CompletionRecord]:
        """Записи пользователя за период (включительно)"""

    @abstractmethod
    async def list_habits(self, user_id: str) -> List[Habit]:
        """Привычки пользователя"""

    @abstractmethod
    async def get_habit(self, habit_id: str) -> Optional[Habit]:
        """Привычка по id"""

    async def current_streak(self, habit_id: str) -> int:
        return current_streak(await self.list_records(habit_id))

    async def longest_streak(self, habit_id: str) -> int:
        return longest_streak(await self.list_records(habit_id))

    async def completion_rate(self, habit_id: str, date_range: Optional[DateRange] = None) -> float:
        records = await self.list_records(habit_id)
        if date_range is not None:
            start, end = date_range
            records = [r for r in records if start <= r.date <= end]
        return completion_rate(records)

class InMemoryRecordStore(RecordStore):
    """Хранилище в памяти"""

    def __init__(self):
        self._habits: Dict[str, Habit] = {}
        self._records: Dict[str, List[CompletionRecord]] = defaultdict(list)

    def add_habit(self, habit: Habit) -> Habit:
        self._habits[habit.id] = habit
        return habit

    def add_record(self, record: CompletionRecord) -> CompletionRecord:
        self._records[record.habit_id].append(record)
        return record

    def add_records(self, records: List[CompletionRecord]):
        for record in records:
            self.add_record(record)

    async def list_records(self, habit_id: str) -> List[CompletionRecord]:
        return sort_records(self._records.get(habit_id, []))

    async def list_records_by_date_range(self, owner_id: str, start: date, end: date) -> List[CompletionRecord]:
        habit_ids = {h.id for h in self._habits.values() if h.user_id == owner_id}
        result = [
            record
            for habit_id in habit_ids
            for record in self._records.get(habit_id, [])
            if start <= record.date <= end
        ]
        return sort_records(result)

    async def list_habits(self, user_id: str) -> List[Habit]:
        return [h for h in self._habits.values() if h.user_id == user_id]

    async def get_habit(self, habit_id: str) -> Optional[Habit]:
        return self._habits.get(habit_id)
