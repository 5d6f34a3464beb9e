from datetime import datetime, date, timedelta
from typing import List, Optional

import pytz

from habitgem.config import config

MORNING = "morning"
AFTERNOON = "afternoon"
EVENING = "evening"
NIGHT = "night"

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

def get_timezone(name: Optional[str] = None):
    return pytz.timezone(name or config.timezone)

def now_local(tz_name: Optional[str] = None) -> datetime:
    return datetime.now(get_timezone(tz_name))

def today_local(tz_name: Optional[str] = None) -> date:
    return now_local(tz_name).date()

def time_of_day(hour: int) -> str:
    """Бакет времени суток: утро 5-11, день 12-17, вечер 18-22, ночь 23-4"""
    if 5 <= hour <= 11:
        return MORNING
    if 12 <= hour <= 17:
        return AFTERNOON
    if 18 <= hour <= 22:
        return EVENING
    return NIGHT

def day_name(weekday: int) -> str:
    return DAY_NAMES[weekday]

def short_day_name(weekday: int) -> str:
    return DAY_NAMES[weekday][:3]

def date_range(start: date, end: date) -> List[date]:
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]
