# goalquest/utils/stats.py
"""
Aggregate statistics over a user's goals and tasks.

Like the progress engine these helpers take snapshots and return plain
dicts; persisting the results is up to the caller.
"""
import calendar
from collections import Counter
from datetime import datetime, date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

from goalquest.utils.progress import (
    GOAL_TYPES,
    ONE_DAY,
    calculate_goal_progress,
    calculate_recurring_ratio,
    calculate_streak,
    enum_value,
    get_time_left,
    hour_bucket,
    is_active_goal,
    is_recurring_task,
    resolve_streaks,
    round_half_up,
    to_utc,
    to_utc_day,
    utcnow,
)

NOT_ENOUGH_DATA = "Not enough data"
WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
PRODUCTIVE_TIMES = ("Morning", "Afternoon", "Evening")


# ────────────────────────────────────────────────────────────────────────────────
# HELPERS
# ────────────────────────────────────────────────────────────────────────────────
def _completed(tasks: Iterable[Any]) -> List[Any]:
    return [t for t in tasks if t.is_completed and t.completed_at is not None]


def _rate(part: int, whole: int) -> int:
    return round_half_up(100 * part / whole) if whole else 0


def _weekday_name(day: date) -> str:
    # date.weekday() is Monday=0; the table starts on Sunday
    return WEEKDAY_NAMES[(day.weekday() + 1) % 7]


def completed_on_schedule(task: Any) -> bool:
    """Completed on or before the scheduled calendar day."""
    return to_utc_day(task.completed_at) <= to_utc_day(task.scheduled_date)


def completion_bucket(task: Any) -> str:
    time_of_day = enum_value(getattr(task, "time_of_day", None))
    if time_of_day in (None, "not_set"):
        return hour_bucket(task.completed_at)
    return time_of_day


def _most_frequent(counts: Dict[str, int], order: Sequence[str]) -> str:
    best, best_count = NOT_ENOUGH_DATA, 0
    for key in order:
        if counts.get(key, 0) > best_count:
            best, best_count = key, counts[key]
    return best


# ────────────────────────────────────────────────────────────────────────────────
# USER STATS
# ────────────────────────────────────────────────────────────────────────────────
def most_productive_day(tasks: Iterable[Any]) -> str:
    counts = Counter(_weekday_name(to_utc_day(t.completed_at)) for t in _completed(tasks))
    return _most_frequent(counts, WEEKDAY_NAMES)


def most_productive_time(tasks: Iterable[Any]) -> str:
    counts = Counter(completion_bucket(t).capitalize() for t in _completed(tasks))
    return _most_frequent(counts, PRODUCTIVE_TIMES)


def busiest_day(tasks: Iterable[Any]) -> Dict[str, Any]:
    """Most completions on a single calendar day (earliest day wins a tie)."""
    per_day = Counter(to_utc_day(t.completed_at) for t in _completed(tasks))
    best_day, best_count = None, 0
    for day in sorted(per_day):
        if per_day[day] > best_count:
            best_day, best_count = day, per_day[day]
    return {"count": best_count, "date": best_day}


def completion_rate_by_goal_type(goals: Iterable[Any], tasks: Iterable[Any]) -> Dict[str, int]:
    goal_types = {g.id: enum_value(g.type) for g in goals}
    totals, done = Counter(), Counter()
    for task in tasks:
        goal_type = goal_types.get(task.goal_id)
        if goal_type is None:
            continue
        totals[goal_type] += 1
        if task.is_completed:
            done[goal_type] += 1
    return {goal_type: _rate(done[goal_type], totals[goal_type]) for goal_type in GOAL_TYPES}


def longest_goal_age(goals: Iterable[Any], now: datetime) -> int:
    active = [g for g in goals if is_active_goal(g)]
    if not active:
        return 0
    oldest = min(to_utc(g.created_at) for g in active)
    return int((to_utc(now) - oldest) / ONE_DAY)


def longest_break(tasks: Iterable[Any]) -> int:
    """Longest gap, in whole days, between two consecutive completions."""
    moments = sorted(to_utc(t.completed_at) for t in _completed(tasks))
    gaps = [int((later - earlier) / ONE_DAY) for earlier, later in zip(moments, moments[1:])]
    return max(gaps, default=0)


def average_tasks_per_day(tasks: Sequence[Any]) -> int:
    completed = _completed(tasks)
    active_days = {to_utc_day(t.completed_at) for t in completed}
    if not active_days:
        return 0
    return round_half_up(len(completed) / len(active_days))


def summarize_user_stats(
    goals: Sequence[Any],
    tasks: Sequence[Any],
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Full recomputation of the per-user statistics. Counters that only grow
    through user actions (goals shared, the historical longest streak) are
    not derived here; the caller merges them with the stored values.
    """
    now = now or utcnow()
    completed = _completed(tasks)
    recurring_completed = [t for t in completed if is_recurring_task(t)]
    rates = completion_rate_by_goal_type(goals, tasks)
    best = busiest_day(tasks)

    return {
        "current_streak": calculate_streak(tasks),
        "goals_completed": sum(1 for g in goals if g.is_completed),
        "tasks_completed": sum(1 for t in tasks if t.is_completed),
        "most_productive_day": most_productive_day(tasks),
        "most_productive_time": most_productive_time(tasks),
        "most_tasks_completed_in_day": best["count"],
        "most_tasks_completed_date": (
            datetime.combine(best["date"], datetime.min.time()) if best["date"] else None
        ),
        "on_time_completion_rate": _rate(
            sum(1 for t in completed if completed_on_schedule(t)), len(completed)
        ),
        "recurring_task_adherence": _rate(
            sum(1 for t in recurring_completed if completed_on_schedule(t)), len(recurring_completed)
        ),
        "short_term_completion_rate": rates["short"],
        "medium_term_completion_rate": rates["medium"],
        "long_term_completion_rate": rates["long"],
        "longest_goal_age": longest_goal_age(goals, now),
        "longest_break_between_completions": longest_break(tasks),
        "avg_tasks_per_day": average_tasks_per_day(tasks),
        "recurring_ratio": calculate_recurring_ratio(tasks),
    }


# ────────────────────────────────────────────────────────────────────────────────
# GOAL STATS
# ────────────────────────────────────────────────────────────────────────────────
def summarize_goal(goal: Any, tasks: Sequence[Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    completed = _completed(tasks)
    by_bucket = Counter(enum_value(t.time_of_day) or "not_set" for t in completed)
    on_time = sum(1 for t in completed if t.completed_on_time)
    recurring = sum(1 for t in completed if is_recurring_task(t))
    streaks = resolve_streaks(tasks, goal.longest_streak)

    return {
        "goal_id": goal.id,
        "progress": calculate_goal_progress(tasks),
        "time_left": get_time_left(goal.deadline, now),
        "current_streak": streaks["current_streak"],
        "longest_streak": streaks["longest_streak"],
        "total_tasks": len(tasks),
        "tasks_completed": len(completed),
        "tasks_completed_morning": by_bucket["morning"],
        "tasks_completed_afternoon": by_bucket["afternoon"],
        "tasks_completed_evening": by_bucket["evening"],
        "tasks_completed_not_set": by_bucket["not_set"],
        "tasks_completed_on_time": on_time,
        "tasks_completed_late": len(completed) - on_time,
        "recurring_tasks_completed": recurring,
        "non_recurring_tasks_completed": len(completed) - recurring,
    }


# ────────────────────────────────────────────────────────────────────────────────
# HEATMAP
# ────────────────────────────────────────────────────────────────────────────────
def heatmap_level(count: int) -> int:
    """Colour intensity 0-8 for a day's completion count."""
    if count <= 5:
        return count
    if count <= 7:
        return 6
    if count <= 9:
        return 7
    return 8


def build_heatmap(tasks: Iterable[Any], year: int) -> List[Dict[str, Any]]:
    """One entry per day of ``year``, zero-filled, oldest first."""
    per_day = Counter(
        day for day in (to_utc_day(t.completed_at) for t in _completed(tasks))
        if day.year == year
    )
    days_in_year = 366 if calendar.isleap(year) else 365
    start = date(year, 1, 1)

    cells = []
    for offset in range(days_in_year):
        day = start + timedelta(days=offset)
        count = per_day.get(day, 0)
        cells.append({"date": day, "count": count, "level": heatmap_level(count)})
    return cells
