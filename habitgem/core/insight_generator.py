#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
HabitGem Analytics v4.0 - Insight Generator
Текстовые инсайты, предложения и периодические отчеты на основе паттернов

Версия: 4.0.1
Дата: 2025-06-12
"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional

from habitgem.core.pattern_analyzer import (
    PatternAnalyzer, PatternSignal, completion_rate, current_streak,
    day_of_week_rates, longest_streak, sort_records
)
from habitgem.models.enums import (
    HabitCategory, PatternType, ReportPeriod, SuggestionType, Trend
)
from habitgem.models.habit import CompletionRecord, Habit
from habitgem.models.insights import (
    DataPoint, HabitInsight, HabitStats, OptimizationSuggestion,
    PeriodicReport, ProgressAnalysis
)
from habitgem.utils.datetime_utils import date_range, day_name, short_day_name

logger = logging.getLogger(__name__)

# ===== CONSTANTS =====

KEEP_LOGGING_MESSAGE = "Keep logging this habit and we will give you a more detailed analysis."

_TREND_BY_PATTERN = {
    PatternType.IMPROVING_TREND: Trend.IMPROVING,
    PatternType.DECLINING_TREND: Trend.DECLINING,
    PatternType.STABLE_TREND: Trend.STABLE,
    PatternType.FLUCTUATING_TREND: Trend.FLUCTUATING,
}

_SLOT_BY_PATTERN = {
    PatternType.MORNING_PREFERENCE: "morning",
    PatternType.AFTERNOON_PREFERENCE: "afternoon",
    PatternType.EVENING_PREFERENCE: "evening",
    PatternType.NIGHT_PREFERENCE: "night",
}

_PATTERN_PHRASES = {
    PatternType.WEEKDAY_PREFERENCE:
        "you complete \"{name}\" {strength} more reliably on weekdays than at weekends. "
        "The weekday routine seems to help you.",
    PatternType.WEEKEND_PREFERENCE:
        "you complete \"{name}\" {strength} more reliably at weekends than on weekdays. "
        "The extra free time seems to help you.",
    PatternType.SPECIFIC_DAY_PATTERN:
        "some days of the week work {strength} better for \"{name}\" than others. "
        "Knowing them helps you plan.",
    PatternType.MORNING_PREFERENCE:
        "you are {strength} more successful with \"{name}\" in the morning.",
    PatternType.AFTERNOON_PREFERENCE:
        "you are {strength} more successful with \"{name}\" in the afternoon.",
    PatternType.EVENING_PREFERENCE:
        "you are {strength} more successful with \"{name}\" in the evening.",
    PatternType.NIGHT_PREFERENCE:
        "you are {strength} more successful with \"{name}\" late at night.",
    PatternType.IMPROVING_TREND:
        "your completion rate for \"{name}\" shows a {strength} upward trend.",
    PatternType.DECLINING_TREND:
        "your completion rate for \"{name}\" shows a {strength} downward trend. "
        "It may be a good time to adjust it.",
    PatternType.STABLE_TREND:
        "your completion rate for \"{name}\" is {strength} stable. Stability is a good sign.",
    PatternType.FLUCTUATING_TREND:
        "your progress with \"{name}\" fluctuates {strength}. "
        "Try to find what affects your consistency.",
    PatternType.STREAK_BASED:
        "\"{name}\" shows a {strength} streak pattern. Keeping the chain going motivates you.",
}

_CATEGORY_PHRASES = {
    HabitCategory.HEALTH: (
        "Sticking with a health habit like \"{name}\" pays off. The benefits of health habits compound over time.",
        "Health habits like \"{name}\" take time to show results, but every completion is an investment.",
    ),
    HabitCategory.FITNESS: (
        "Your commitment to \"{name}\" is impressive. Regular exercise helps both body and mind.",
        "Fitness habits like \"{name}\" may need extra motivation. Set small goals or find a partner.",
    ),
    HabitCategory.MINDFULNESS: (
        "You practise \"{name}\" consistently. Mindfulness reduces stress and improves focus.",
        "Mindfulness habits like \"{name}\" need patience. Even short sessions help.",
    ),
    HabitCategory.PRODUCTIVITY: (
        "Your consistency with \"{name}\" adds up to better efficiency and a sense of achievement.",
        "Try to fit \"{name}\" into your existing work routine.",
    ),
    HabitCategory.LEARNING: (
        "Your dedication to \"{name}\" is impressive. Continuous learning drives personal growth.",
        "Learning habits like \"{name}\" reward steady effort. A few minutes a day is enough.",
    ),
    HabitCategory.SOCIAL: (
        "You keep up \"{name}\" well. Positive social contact matters for wellbeing.",
        "Social habits like \"{name}\" need some planning. Set a concrete goal for the week.",
    ),
    HabitCategory.CREATIVITY: (
        "Your creative practice \"{name}\" is going great. It builds problem-solving skills.",
        "Creative habits like \"{name}\" need inspiration. Try a new place or a new source of ideas.",
    ),
    HabitCategory.FINANCE: (
        "You stick with \"{name}\" well. Good money habits are the base of financial security.",
        "Finance habits like \"{name}\" need discipline. Set a reminder or pair it with a daily routine.",
    ),
    HabitCategory.OTHER: (
        "Your commitment to \"{name}\" is excellent. Consistent effort is the key to any habit.",
        "\"{name}\" may need a different approach. Adjust the time, difficulty or goal.",
    ),
}

def _percent(rate: float) -> int:
    return int(round(rate * 100))

def _strength_word(confidence: float) -> str:
    if confidence > 0.9:
        return "very clearly"
    if confidence > 0.7:
        return "clearly"
    return "somewhat"

def _join_days(days: List[int], last_separator: str = " and ") -> str:
    names = [day_name(d) for d in days]
    if len(names) <= 1:
        return "".join(names)
    return ", ".join(names[:-1]) + last_separator + names[-1]

class InsightGenerator:
    """
    Генератор инсайтов

    Композиция выходов PatternAnalyzer и сырых метрик в тексты:
    главный инсайт, предложения по оптимизации, отчеты за период.
    """

    def __init__(self, analyzer: Optional[PatternAnalyzer] = None):
        self.analyzer = analyzer or PatternAnalyzer()

    # ===== STATS =====

    def compute_stats(self, records: List[CompletionRecord]) -> HabitStats:
        return HabitStats(
            completion_rate=completion_rate(records),
            current_streak=current_streak(records),
            longest_streak=longest_streak(records),
            total_records=len(records),
        )

    def resolve_trend(self, records: List[CompletionRecord], patterns: PatternSignal) -> Trend:
        """Тренд из карты паттернов; для коротких историй - быстрое сравнение половин"""
        if len(records) < self.analyzer.settings.min_records_for_patterns:
            return Trend.NOT_ENOUGH_DATA

        for kind, trend in _TREND_BY_PATTERN.items():
            if kind in patterns:
                return trend

        ordered = sort_records(records)
        midpoint = len(ordered) // 2
        earlier = completion_rate(ordered[:midpoint])
        recent = completion_rate(ordered[midpoint:])
        if recent > earlier * 1.1:
            return Trend.IMPROVING
        if recent < earlier * 0.9:
            return Trend.DECLINING
        return Trend.STABLE

    def best_performing_days(self, records: List[CompletionRecord]) -> List[int]:
        """Дни недели с максимальным числом выполнений"""
        counts: Dict[int, int] = {}
        for record in records:
            if record.is_completed:
                day = record.date.weekday()
                counts[day] = counts.get(day, 0) + 1
        if not counts:
            return []
        best = max(counts.values())
        return sorted(day for day, count in counts.items() if count == best)

    def consistency_score(self, records: List[CompletionRecord], rate: Optional[float] = None) -> float:
        """Доля выполнения с поправкой на аномалии и серийность, в [0, 1]"""
        if not records:
            return 0.0
        rate = completion_rate(records) if rate is None else rate
        anomaly_rate = self.analyzer.anomaly_rate(records)
        streak_confidence = self.analyzer.detect_streak_pattern(records)
        score = rate * (1 - anomaly_rate) + 0.1 * streak_confidence
        return max(0.0, min(1.0, score))

    # ===== INSIGHT =====

    def generate_insight(self, habit_id: str, records: List[CompletionRecord],
                         patterns: Optional[PatternSignal] = None,
                         stats: Optional[HabitStats] = None) -> HabitInsight:
        """Самый информативный инсайт по приоритету"""
        if patterns is None:
            patterns = self.analyzer.identify_patterns(records)
        rate = stats.completion_rate if stats is not None else completion_rate(records)

        best_days = self.best_performing_days(records)
        trend = self.resolve_trend(records, patterns)
        consistency = self.consistency_score(records, rate)

        if trend == Trend.NOT_ENOUGH_DATA:
            message = KEEP_LOGGING_MESSAGE
        elif trend == Trend.IMPROVING and consistency > 0.7:
            message = "Your consistency is improving and staying high. Fantastic work!"
        elif trend == Trend.IMPROVING:
            message = "Your consistency is improving. Keep up the momentum!"
        elif trend == Trend.DECLINING and consistency < 0.3:
            message = "Your consistency has dropped. Consider lowering the difficulty or setting a reminder."
        elif trend == Trend.DECLINING:
            message = "Your consistency has slipped recently. Try to find the cause and adjust."
        elif best_days:
            message = (f"You perform best on {_join_days(best_days, ', ')}. "
                       f"Consider scheduling more habits on these days.")
        else:
            message = "Your consistency is stable. Keep it up!"

        return HabitInsight(
            habit_id=habit_id,
            best_performing_days=best_days,
            completion_trend=trend,
            consistency_score=consistency,
            insight_message=message,
        )

    # ===== SUGGESTIONS =====

    def generate_suggestions(self, habit: Habit, records: List[CompletionRecord],
                             patterns: Optional[PatternSignal] = None) -> List[OptimizationSuggestion]:
        """Упорядоченный список предложений по оптимизации"""
        if not records:
            return [OptimizationSuggestion(
                type=SuggestionType.TIME_CHANGE,
                message="Try doing this habit in the morning. Research shows it improves success rates.",
                expected_impact="May raise the completion rate by 15-20%",
                confidence=0.7,
            )]

        if patterns is None:
            patterns = self.analyzer.identify_patterns(records)
        suggestions = []
        rate = completion_rate(records)

        if rate < 0.5:
            suggestions.append(OptimizationSuggestion(
                type=SuggestionType.DIFFICULTY_ADJUST,
                message=f"\"{habit.name}\" has a low completion rate. Consider lowering the difficulty or frequency.",
                expected_impact="May raise the completion rate by 20-30%",
                confidence=0.8,
            ))

        if PatternType.DECLINING_TREND in patterns:
            suggestions.append(OptimizationSuggestion(
                type=SuggestionType.FREQUENCY_ADJUST,
                message="Your completion rate is declining. Try a lighter schedule for the next two weeks.",
                expected_impact="May stop the decline and rebuild momentum",
                confidence=0.7,
            ))

        for kind in _SLOT_BY_PATTERN:
            if kind in patterns:
                slot = _SLOT_BY_PATTERN[kind]
                suggestions.append(OptimizationSuggestion(
                    type=SuggestionType.TIME_CHANGE,
                    message=f"You succeed most often in the {slot}. Schedule \"{habit.name}\" in the {slot}.",
                    expected_impact="May raise the completion rate by 10-15%",
                    confidence=round(patterns[kind], 2),
                ))
                break

        missed_counts: Dict[int, int] = {}
        for record in records:
            if not record.is_completed:
                day = record.date.weekday()
                missed_counts[day] = missed_counts.get(day, 0) + 1
        if missed_counts:
            most_missed = sorted(missed_counts, key=lambda d: (-missed_counts[d], d))[:2]
            suggestions.append(OptimizationSuggestion(
                type=SuggestionType.TIME_CHANGE,
                message=(f"You often miss this habit on {_join_days(most_missed)}. "
                         f"Consider rescheduling it on these days."),
                expected_impact="May raise the completion rate on these days by 15-25%",
                confidence=0.75,
            ))

        suggestions.append(OptimizationSuggestion(
            type=SuggestionType.HABIT_COMBINATION,
            message="Try linking this habit to one you already have, for example right after brushing your teeth.",
            expected_impact="May make the habit more automatic",
            confidence=0.65,
        ))
        return suggestions

    def select_suggestion(self, habit: Habit, records: List[CompletionRecord],
                          patterns: Optional[PatternSignal] = None) -> OptimizationSuggestion:
        return self.generate_suggestions(habit, records, patterns)[0]

    # ===== TEXT INSIGHTS =====

    def generate_short_insight(self, records: List[CompletionRecord]) -> str:
        """Короткий инсайт для карточки привычки"""
        if not records:
            return "Start logging this habit to get personal insights."
        if len(records) < 5:
            return "Keep logging this habit, more insights are coming soon."

        rate = completion_rate(records)
        streak = current_streak(records)

        if abs(streak) >= 5:
            if streak > 0:
                return f"You have completed this habit {streak} days in a row! Keep going!"
            return f"You have missed this habit {abs(streak)} days in a row. Today is a great day to restart!"
        if rate > 0.8:
            return f"Outstanding! Your completion rate is {_percent(rate)}%."
        if rate < 0.3:
            return "This habit seems challenging. Consider adjusting the difficulty or setting a reminder."

        recent_rate = completion_rate(sort_records(records)[-7:])
        if recent_rate > rate * 1.2:
            return "Your last week was better than usual. Keep the momentum!"
        if recent_rate < rate * 0.8:
            return "Your completion rate dipped last week. Let's get back on track!"
        return f"Your completion rate is {_percent(rate)}% and holding steady."

    def generate_comprehensive_insight(self, habit: Habit, records: List[CompletionRecord],
                                       today: Optional[date] = None) -> str:
        """Развернутый инсайт из нескольких абзацев"""
        if not records:
            return ("You have not logged this habit yet. Start logging and we will give you "
                    "a detailed analysis.")
        if len(records) < self.analyzer.settings.min_records_for_patterns:
            return "Keep logging this habit. With more data we can give you a detailed analysis."

        today = today or date.today()
        patterns = self.analyzer.identify_patterns(records)
        rate = completion_rate(records)
        percent = _percent(rate)

        paragraphs = [self._completion_rate_paragraph(percent, habit.name)]

        streak = current_streak(records)
        if abs(streak) >= 3:
            paragraphs.append(self._streak_paragraph(streak, habit.name))

        notable = sorted(
            ((kind, confidence) for kind, confidence in patterns.items()
             if confidence > self.analyzer.settings.pattern_confidence_threshold and kind in _PATTERN_PHRASES),
            key=lambda item: item[1], reverse=True,
        )[:2]
        for kind, confidence in notable:
            phrase = _PATTERN_PHRASES[kind].format(name=habit.name, strength=_strength_word(confidence))
            paragraphs.append("The data shows that " + phrase)

        positive, negative = _CATEGORY_PHRASES[habit.category]
        paragraphs.append((positive if rate > 0.7 else negative).format(name=habit.name))

        start = habit.start_date or habit.created_at.date()
        days_tracked = (today - start).days + 1
        if days_tracked > 30:
            paragraphs.append(self._long_term_paragraph(days_tracked, percent, habit.name))

        return "\n\n".join(paragraphs)

    @staticmethod
    def _completion_rate_paragraph(percent: int, name: str) -> str:
        if percent > 90:
            return f"Your completion rate for \"{name}\" is {percent}%. It is now part of your life!"
        if percent > 75:
            return f"Your completion rate for \"{name}\" is {percent}%. You have built a stable pattern."
        if percent > 50:
            return f"Your completion rate for \"{name}\" is {percent}%, more than half of the time. Consistency is key."
        if percent > 30:
            return (f"Your completion rate for \"{name}\" is {percent}%. This habit may be challenging, "
                    f"consider adjusting the difficulty or setting a reminder.")
        return (f"Your completion rate for \"{name}\" is {percent}%. It looks like a struggle, "
                f"consider re-evaluating the difficulty or relevance of this habit.")

    @staticmethod
    def _streak_paragraph(streak: int, name: str) -> str:
        if streak > 30:
            return f"Impressive! You have completed \"{name}\" {streak} days in a row."
        if streak > 21:
            return f"You have completed \"{name}\" {streak} days in a row and passed the 21-day mark!"
        if streak > 14:
            return f"Great consistency! {streak} days in a row of \"{name}\"."
        if streak > 7:
            return f"Good start! {streak} days in a row of \"{name}\". The first week is the hardest."
        if streak >= 3:
            return f"You have completed \"{name}\" {streak} days in a row. Every day helps it take root."
        missed = abs(streak)
        if streak < -14:
            return f"You have missed \"{name}\" {missed} days in a row. Is it still aligned with your goals?"
        if streak < -7:
            return f"You have missed \"{name}\" {missed} days in a row. Consider adjusting its difficulty or timing."
        return f"You have missed \"{name}\" {missed} days in a row. Today is a great day to restart!"

    @staticmethod
    def _long_term_paragraph(days_tracked: int, percent: int, name: str) -> str:
        months = days_tracked // 30
        high = percent > 70
        if months >= 6:
            if high:
                return f"You have kept up \"{name}\" for over {months} months at {percent}%. Remarkable discipline."
            return f"You have tracked \"{name}\" for over {months} months at {percent}%. Long-term effort deserves credit."
        if months >= 3:
            if high:
                return f"You have kept up \"{name}\" for over {months} months at {percent}%. Three months is a key milestone."
            return f"You have tracked \"{name}\" for over {months} months at {percent}%. That shows long-term commitment."
        if high:
            return f"You have kept up \"{name}\" for over {months} month(s) at {percent}%. The first month is the hardest."
        return f"You have tracked \"{name}\" for over {months} month(s) at {percent}%. Habits take time, keep going."

    # ===== PROGRESS =====

    def build_progress_analysis(self, habit: Habit, records: List[CompletionRecord],
                                today: Optional[date] = None) -> ProgressAnalysis:
        """Анализ прогресса с данными за последние 7 дней"""
        today = today or date.today()
        status_by_date = {r.date: r.is_completed for r in records}
        visual_data = [
            DataPoint(date=day, value=1.0 if status_by_date.get(day) else 0.0,
                      label=short_day_name(day.weekday()))
            for day in date_range(today - timedelta(days=6), today)
        ]
        return ProgressAnalysis(
            completion_rate=completion_rate(records),
            streak=current_streak(records),
            insight=self.generate_short_insight(records),
            suggestion=self.select_suggestion(habit, records).message,
            visual_data=visual_data,
        )

    # ===== PERIODIC REPORTS =====

    def build_periodic_report(self, period: ReportPeriod, end_date: date, habits: List[Habit],
                              records_by_habit: Dict[str, List[CompletionRecord]]) -> PeriodicReport:
        """Отчет за день/неделю/месяц, заканчивающийся end_date"""
        start_date = end_date - timedelta(days=period.days - 1)

        if not habits:
            return PeriodicReport(
                period=period,
                start_date=start_date,
                end_date=end_date,
                completion_rate=0.0,
                per_habit_rates={},
                summary="You have not added any habits yet. Add one and we will analyse your progress.",
                insights=[],
                recommendations=["Try adding a simple daily habit, such as meditating for 5 minutes "
                                 "or drinking 8 glasses of water."],
            )

        window: Dict[str, List[CompletionRecord]] = {}
        for habit in habits:
            in_window = [r for r in records_by_habit.get(habit.id, [])
                         if start_date <= r.date <= end_date]
            if in_window:
                window[habit.id] = in_window

        per_habit_rates = {habit_id: completion_rate(recs) for habit_id, recs in window.items()}
        overall = sum(per_habit_rates.values()) / len(per_habit_rates) if per_habit_rates else 0.0
        period_records = [r for recs in window.values() for r in recs]
        habits_by_id = {h.id: h for h in habits}

        return PeriodicReport(
            period=period,
            start_date=start_date,
            end_date=end_date,
            completion_rate=overall,
            per_habit_rates=per_habit_rates,
            summary=self._report_summary(start_date, end_date, overall, bool(period_records)),
            insights=self._report_insights(per_habit_rates, habits_by_id, period_records, start_date, end_date),
            recommendations=self._report_recommendations(window, habits_by_id, period_records, overall),
            visual_data=self._report_visual_data(period_records, start_date, end_date),
        )

    @staticmethod
    def _report_summary(start_date: date, end_date: date, overall: float, has_records: bool) -> str:
        period = f"{start_date.strftime('%b %d')} - {end_date.strftime('%b %d')}"
        if not has_records:
            return f"You have no habit records for {period}."
        if overall > 0.8:
            return f"Your completion rate for {period} reached {_percent(overall)}%. Outstanding!"
        if overall > 0.5:
            return f"Your completion rate for {period} was {_percent(overall)}%. Good job."
        return f"Your completion rate for {period} was {_percent(overall)}%. There is room to improve."

    @staticmethod
    def _report_insights(per_habit_rates: Dict[str, float], habits_by_id: Dict[str, Habit],
                         period_records: List[CompletionRecord],
                         start_date: date, end_date: date) -> List[str]:
        if not per_habit_rates:
            return ["Not enough data for insights yet. Keep logging your habits."]

        insights = []
        ranked = sorted(per_habit_rates.items(), key=lambda item: item[1], reverse=True)

        top_id, top_rate = ranked[0]
        insights.append(f"\"{habits_by_id[top_id].name}\" was your best habit "
                        f"with a {_percent(top_rate)}% completion rate.")

        if len(ranked) > 1:
            bottom_id, bottom_rate = ranked[-1]
            if bottom_rate < 0.5:
                insights.append(f"\"{habits_by_id[bottom_id].name}\" was challenging at {_percent(bottom_rate)}%. "
                                f"Consider adjusting its difficulty or frequency.")

        midpoint = start_date + timedelta(days=(end_date - start_date).days // 2)
        first_half = [r for r in period_records if r.date < midpoint]
        second_half = [r for r in period_records if r.date >= midpoint]
        if first_half and second_half:
            first_rate = completion_rate(first_half)
            second_rate = completion_rate(second_half)
            if second_rate > first_rate * 1.2:
                insights.append("You improved noticeably in the second half of the period. Keep the trend going!")
            elif second_rate < first_rate * 0.8:
                insights.append("Your completion rate dropped in the second half of the period. "
                                "Time to find your motivation again.")

        return insights

    @staticmethod
    def _report_recommendations(window: Dict[str, List[CompletionRecord]], habits_by_id: Dict[str, Habit],
                                period_records: List[CompletionRecord], overall: float) -> List[str]:
        recommendations = []

        day_rates = day_of_week_rates(period_records)
        if day_rates:
            best_day = max(day_rates, key=lambda d: (day_rates[d], -d))
            worst_day = min(day_rates, key=lambda d: (day_rates[d], d))
            if best_day != worst_day and day_rates[best_day] != day_rates[worst_day]:
                recommendations.append(
                    f"You do best on {day_name(best_day)} and worst on {day_name(worst_day)}. "
                    f"Consider rescheduling or adding a reminder on {day_name(worst_day)}."
                )

        category_records: Dict[HabitCategory, List[CompletionRecord]] = {}
        for habit_id, records in window.items():
            category_records.setdefault(habits_by_id[habit_id].category, []).extend(records)
        if len(category_records) > 1:
            category_rates = {c: completion_rate(recs) for c, recs in category_records.items()}
            best = max(category_rates, key=category_rates.get)
            worst = min(category_rates, key=category_rates.get)
            if category_rates[best] != category_rates[worst]:
                recommendations.append(
                    f"Your {best.display_name} habits do best while {worst.display_name} habits struggle. "
                    f"Try applying what works for {best.display_name} to {worst.display_name}."
                )

        if not recommendations:
            if overall < 0.5:
                recommendations.append("Consider tracking fewer habits and focusing on the most important ones, "
                                       "or lowering their difficulty.")
            else:
                recommendations.append("Your habits are progressing well. Consider setting yourself a new challenge.")

        return recommendations

    @staticmethod
    def _report_visual_data(period_records: List[CompletionRecord],
                            start_date: date, end_date: date) -> List[DataPoint]:
        """Дневные точки для окон до 7 дней, недельные для остальных"""
        days = date_range(start_date, end_date)
        by_date: Dict[date, List[CompletionRecord]] = {}
        for record in period_records:
            by_date.setdefault(record.date, []).append(record)

        if len(days) <= 7:
            return [
                DataPoint(date=day, value=completion_rate(by_date.get(day, [])),
                          label=short_day_name(day.weekday()))
                for day in days
            ]

        points = []
        for week, offset in enumerate(range(0, len(days), 7), start=1):
            week_days = days[offset:offset + 7]
            week_records = [r for day in week_days for r in by_date.get(day, [])]
            points.append(DataPoint(date=week_days[0], value=completion_rate(week_records),
                                    label=f"Week {week}"))
        return points
