"""
Статический каталог привычек-кандидатов по категориям
"""

from typing import Dict, List, Optional

from habitgem.models.enums import HabitCategory
from habitgem.models.habit import DailyFrequency, WeeklyFrequency
from habitgem.models.insights import HabitRecommendation

GENERIC_SCIENTIFIC_BASIS = "This habit is based on established principles of behavioural science."

def _entry(id, name, description, category, difficulty, reason, basis, minutes, frequency=None):
    return HabitRecommendation(
        id=id,
        name=name,
        description=description,
        category=category,
        difficulty=difficulty,
        reason=reason,
        scientific_basis=basis,
        suggested_frequency=frequency or DailyFrequency(),
        estimated_minutes_per_day=minutes,
    )

CATALOG: Dict[HabitCategory, List[HabitRecommendation]] = {
    HabitCategory.HEALTH: [
        _entry("health_water", "Daily water", "Drink 8 glasses of water a day to stay hydrated",
               HabitCategory.HEALTH, 1,
               "Staying hydrated is essential for your body",
               "Research shows adequate water intake improves cognitive function and metabolism", 5),
        _entry("health_sleep", "Regular sleep", "Go to bed and wake up at the same time every day",
               HabitCategory.HEALTH, 2,
               "A regular sleep schedule improves sleep quality and daytime energy",
               "Research shows consistent sleep times regulate the body clock and improve overall health", 0),
        _entry("health_posture", "Good posture", "Check and correct your sitting posture every hour",
               HabitCategory.HEALTH, 3,
               "Good posture reduces back and neck pain",
               "Research shows good posture relieves spinal stress and prevents chronic pain", 2),
    ],
    HabitCategory.FITNESS: [
        _entry("fitness_stretch", "Morning stretch", "Do a 10-minute full-body stretch every morning",
               HabitCategory.FITNESS, 2,
               "Morning stretching wakes the body up and improves flexibility",
               "Regular stretching improves muscle flexibility, lowers injury risk and boosts circulation", 10),
        _entry("fitness_walk", "Daily walk", "Walk for 30 minutes every day",
               HabitCategory.FITNESS, 1,
               "Walking is the simplest effective form of aerobic exercise",
               "Research shows 30 minutes of walking a day lowers heart disease risk and improves mood", 30),
        _entry("fitness_strength", "Strength training", "Do strength training three times a week",
               HabitCategory.FITNESS, 4,
               "Strength training builds muscle and raises metabolism",
               "Research shows regular strength training increases muscle mass and bone density", 45,
               WeeklyFrequency(days_of_week=(1, 3, 5))),
    ],
    HabitCategory.MINDFULNESS: [
        _entry("mindfulness_meditation", "Meditation", "Practise 10 minutes of focused-breathing meditation",
               HabitCategory.MINDFULNESS, 3,
               "Meditation reduces stress and improves focus",
               "Research shows regular meditation reduces anxiety and improves attention", 10),
        _entry("mindfulness_gratitude", "Gratitude journal", "Write down three things you are grateful for each evening",
               HabitCategory.MINDFULNESS, 1,
               "Gratitude raises happiness and life satisfaction",
               "Research shows gratitude journaling improves wellbeing, sleep quality and resilience", 5),
        _entry("mindfulness_breathing", "Deep breathing", "Do three 2-minute deep-breathing sessions a day",
               HabitCategory.MINDFULNESS, 1,
               "Deep breathing quickly relieves stress and anxiety",
               "Research shows deep breathing activates the parasympathetic nervous system", 6),
    ],
    HabitCategory.PRODUCTIVITY: [
        _entry("productivity_pomodoro", "Pomodoro technique", "Work in 25-minute focus blocks with 5-minute breaks",
               HabitCategory.PRODUCTIVITY, 2,
               "The Pomodoro technique improves efficiency and focus",
               "Research shows alternating work and rest sustains concentration and reduces fatigue", 30),
        _entry("productivity_planning", "Daily planning", "Spend 10 minutes each morning planning the day",
               HabitCategory.PRODUCTIVITY, 2,
               "Planning ahead reduces decision fatigue",
               "Research shows explicit task plans reduce procrastination and raise completion rates", 10),
        _entry("productivity_reflection", "Work reflection", "Spend 5 minutes after work reviewing wins and improvements",
               HabitCategory.PRODUCTIVITY, 2,
               "Reflection helps you spot bottlenecks and opportunities",
               "Research shows regular reflection drives continuous improvement and self-awareness", 5),
    ],
    HabitCategory.LEARNING: [
        _entry("learning_reading", "Daily reading", "Read for 20 minutes every day",
               HabitCategory.LEARNING, 2,
               "Reading is an effective way to gain knowledge",
               "Research shows regular reading expands vocabulary, memory and critical thinking", 20),
        _entry("learning_skill", "Skill practice", "Spend 15 minutes a day learning a new skill",
               HabitCategory.LEARNING, 3,
               "Learning new skills keeps your brain active and your career competitive",
               "Research shows skill learning promotes neuroplasticity and slows cognitive decline", 15),
        _entry("learning_podcast", "Educational podcast", "Listen to three educational podcast episodes a week",
               HabitCategory.LEARNING, 1,
               "Podcasts let you learn in spare moments",
               "Research shows auditory learning complements visual learning and improves retention", 30,
               WeeklyFrequency(days_of_week=(1, 3, 5))),
    ],
    HabitCategory.SOCIAL: [
        _entry("social_connection", "Social connection", "Have a meaningful conversation with a friend or relative every day",
               HabitCategory.SOCIAL, 2,
               "Social connection is vital for mental health",
               "Research shows strong social networks reduce stress and extend life expectancy", 15),
        _entry("social_networking", "Professional networking", "Talk with a colleague or mentor once a week",
               HabitCategory.SOCIAL, 3,
               "Networking broadens your contacts and industry insight",
               "Research shows professional networking increases career opportunities", 30,
               WeeklyFrequency(days_of_week=(3,))),
        _entry("social_kindness", "Daily kindness", "Do one kind thing for someone every day",
               HabitCategory.SOCIAL, 2,
               "Acts of kindness build self-worth and social ties",
               "Research shows helping others activates reward centres in the brain", 10),
    ],
}

STARTER_SET: List[HabitRecommendation] = [
    _entry("reading_daily", "Daily reading", "Read for 20 minutes every day",
           HabitCategory.LEARNING, 2,
           "Reading is an effective way to gain knowledge",
           "Research shows regular reading expands vocabulary, memory and critical thinking", 20),
    _entry("gratitude_journal", "Gratitude journal", "Write down three things you are grateful for each evening",
           HabitCategory.MINDFULNESS, 1,
           "Gratitude raises happiness and life satisfaction",
           "Research shows gratitude journaling improves wellbeing, sleep quality and resilience", 5),
    _entry("walking_daily", "Daily walk", "Walk for 30 minutes every day",
           HabitCategory.FITNESS, 1,
           "Walking is the simplest effective form of aerobic exercise",
           "Research shows 30 minutes of walking a day lowers heart disease risk and improves mood", 30),
]

def generic_recommendation(category: HabitCategory, difficulty: int) -> HabitRecommendation:
    """Универсальная рекомендация для категорий без каталога"""
    return _entry(
        f"generic_{category.value.lower()}", "Daily reflection",
        "Spend 5 minutes reflecting on what you learned today",
        category, difficulty,
        "Reflection helps you understand your behaviour and motivation",
        "Research shows regular reflection raises self-awareness and supports better decisions", 5,
    )

def candidates_for(category: HabitCategory, difficulty: int) -> List[HabitRecommendation]:
    entries = CATALOG.get(category)
    if entries:
        return list(entries)
    return [generic_recommendation(category, difficulty)]

def find_entry(habit_id: str) -> Optional[HabitRecommendation]:
    for entries in CATALOG.values():
        for entry in entries:
            if entry.id == habit_id:
                return entry
    for entry in STARTER_SET:
        if entry.id == habit_id:
            return entry
    return None
