# goalquest/utils/progress.py
"""
Progress engine: pure computations over a user's goals and tasks.

Every function works on snapshots (ORM rows, or any object exposing the same
attribute names) and never mutates its inputs or touches the database. Day
boundaries are UTC calendar days: aware datetimes are converted to UTC, naive
datetimes are taken to already be UTC. ``now`` is always injectable and only
falls back to the wall clock when omitted.
"""
import enum
import math
from collections import Counter, OrderedDict
from datetime import datetime, date, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Sequence


# ────────────────────────────────────────────────────────────────────────────────
# CONSTANTS
# ────────────────────────────────────────────────────────────────────────────────
ONE_DAY = timedelta(days=1)

GOAL_TYPES = ("short", "medium", "long")
GOAL_TYPE_WEIGHTS = {"short": 1.0, "medium": 1.5, "long": 2.0}

# Workload tiers: score == 0 -> "none", < low_below -> "low",
# < medium_below -> "medium", anything else -> "high".
GOAL_CREATION_POLICY = {"name": "goal_creation", "low_below": 3, "medium_below": 6}
BLUEPRINT_POLICY = {"name": "blueprint", "low_below": 5, "medium_below": 10}

TIME_OF_DAY_BUCKETS = ("morning", "afternoon", "evening", "not_set")

# (too soon below, too far above); None means no upper bound is flagged
DEADLINE_WINDOWS = {
    "short": (7, 30),
    "medium": (30, 90),
    "long": (90, None),
}
LONG_TERM_MILESTONE_DAYS = 365

_GOAL_WORKLOAD_MESSAGES = {
    "none": "You have no other active goals in this timeframe. This is a great time to take on a new goal!",
    "low": "You have a light workload with {count} active goal(s) in this timeframe. Adding this goal seems manageable.",
    "medium": "You have {count} active goal(s) in this timeframe. Be mindful of your capacity when adding this goal.",
    "high": "You already have {count} active goal(s) in this timeframe. Consider completing some current goals first or extending this deadline.",
}

_BLUEPRINT_WORKLOAD_MESSAGES = {
    "none": "Adding this blueprint's {count} goals seems very manageable with your current workload.",
    "low": "Adding this blueprint's {count} goals seems very manageable with your current workload.",
    "medium": "Adding this blueprint will give you a moderate workload. Consider your available time and energy.",
    "high": "This blueprint will create a high workload when combined with your existing goals. Consider completing some current goals first.",
}

_DEADLINE_MESSAGES = {
    ("short", "too_soon"): "Consider setting a slightly longer timeframe for your short-term goal to ensure it's achievable.",
    ("short", "too_far"): "This deadline is longer than typical for a short-term goal. Consider either adjusting the deadline or changing to a medium-term goal.",
    ("short", "ok"): "This is a good timeframe for a short-term goal! It provides urgency while allowing time to make progress.",
    ("medium", "too_soon"): "This deadline may be too soon for a medium-term goal. Consider either extending the deadline or changing to a short-term goal.",
    ("medium", "too_far"): "This deadline is on the longer side for a medium-term goal. Ensure you have intermediate milestones to track progress.",
    ("medium", "ok"): "Great timeframe for a medium-term goal! It allows sufficient time for meaningful progress while maintaining momentum.",
    ("long", "too_soon"): "This deadline may be too soon for a long-term goal. Consider either extending the deadline or changing to a medium-term goal.",
    ("long", "ok"): "Good long-term goal timeframe. Remember to create shorter-term milestones to help you stay on track!",
}
_LONG_TERM_MILESTONE_MESSAGE = (
    "For goals with deadlines over a year away, be sure to break them down into shorter milestones to track progress."
)


# ────────────────────────────────────────────────────────────────────────────────
# HELPERS – COMMON
# ────────────────────────────────────────────────────────────────────────────────
def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def to_utc_day(value: datetime) -> date:
    return to_utc(value).date()


def round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def enum_value(value: Any) -> Any:
    """Plain value of an enum member; anything else is returned unchanged."""
    if isinstance(value, enum.Enum):
        return value.value
    return value


def days_until(deadline: datetime, now: datetime) -> int:
    """Whole days from ``now`` to ``deadline``, rounded up."""
    return math.ceil((to_utc(deadline) - to_utc(now)) / ONE_DAY)


def is_active_goal(goal: Any) -> bool:
    return not goal.is_completed and not getattr(goal, "is_archived", False)


def is_recurring_task(task: Any) -> bool:
    if getattr(task, "is_repeating", False):
        return True
    if getattr(task, "parent_task_id", None) is not None:
        return True
    return enum_value(getattr(task, "repeat_type", None)) not in (None, "none")


def hour_bucket(value: datetime) -> str:
    """Cosmetic time-of-day bucket derived from the clock hour."""
    hour = to_utc(value).hour
    if hour < 12:
        return "morning"
    if hour < 17:
        return "afternoon"
    return "evening"


def _completed(tasks: Iterable[Any]) -> List[Any]:
    return [t for t in tasks if t.is_completed and t.completed_at is not None]


# ────────────────────────────────────────────────────────────────────────────────
# PROGRESS & TIME LEFT
# ────────────────────────────────────────────────────────────────────────────────
def calculate_goal_progress(tasks: Sequence[Any]) -> int:
    """Percentage (0-100) of a goal's tasks that are completed."""
    if not tasks:
        return 0
    completed = sum(1 for t in tasks if t.is_completed)
    return round_half_up(100 * completed / len(tasks))


def get_time_left(deadline: datetime, now: Optional[datetime] = None) -> str:
    """Human label for the distance between ``now`` and ``deadline``."""
    diff_days = days_until(deadline, now or utcnow())

    if diff_days < 0:
        return "Overdue"
    if diff_days == 0:
        return "Today"
    if diff_days == 1:
        return "1 day left"
    if diff_days < 31:
        return f"{diff_days} days left"
    if diff_days < 60:
        return "1 month left"
    return f"{diff_days // 30} months left"


# ────────────────────────────────────────────────────────────────────────────────
# STREAKS
# ────────────────────────────────────────────────────────────────────────────────
def calculate_streak(tasks: Iterable[Any]) -> int:
    """
    Consecutive calendar days with at least one completion, anchored on the
    most recent completion day. Several completions on one day count once.
    """
    completed = sorted(_completed(tasks), key=lambda t: to_utc(t.completed_at), reverse=True)
    if not completed:
        return 0

    current_day = to_utc_day(completed[0].completed_at)
    streak = 1
    for task in completed[1:]:
        task_day = to_utc_day(task.completed_at)
        days_between = (current_day - task_day).days
        if days_between == 0:
            continue
        if days_between == 1:
            streak += 1
            current_day = task_day
            continue
        break
    return streak


def resolve_streaks(tasks: Iterable[Any], cached_longest: Optional[int] = None) -> Dict[str, int]:
    """
    Current streak recomputed from the task log, next to the longest streak.
    The longest streak is the cached historical maximum, raised to the
    current streak whenever the cache lags behind it.
    """
    current = calculate_streak(tasks)
    longest = max(cached_longest or 0, current)
    return {"current_streak": current, "longest_streak": longest}


# ────────────────────────────────────────────────────────────────────────────────
# WORKLOAD
# ────────────────────────────────────────────────────────────────────────────────
def _count_by_type(goal_types: Iterable[Any]) -> Dict[str, int]:
    counts = Counter(enum_value(t) for t in goal_types)
    return {goal_type: counts.get(goal_type, 0) for goal_type in GOAL_TYPES}


def workload_score(counts: Dict[str, int]) -> float:
    return sum(GOAL_TYPE_WEIGHTS[goal_type] * count for goal_type, count in counts.items())


def classify_workload(score: float, policy: Dict[str, Any]) -> str:
    if score == 0:
        return "none"
    if score < policy["low_below"]:
        return "low"
    if score < policy["medium_below"]:
        return "medium"
    return "high"


def find_overlapping_goals(
    candidate_deadline: datetime,
    goals: Iterable[Any],
    now: Optional[datetime] = None,
) -> List[Any]:
    """Active goals whose window [now, deadline) crosses the candidate's."""
    now = to_utc(now or utcnow())
    candidate = to_utc(candidate_deadline)

    overlapping = []
    for goal in goals:
        if not is_active_goal(goal):
            continue
        deadline = to_utc(goal.deadline)
        if now < candidate < deadline or now < deadline < candidate:
            overlapping.append(goal)
    return overlapping


def analyze_workload(
    candidate_deadline: datetime,
    goals: Iterable[Any],
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Workload around a prospective goal deadline (goal-creation policy)."""
    overlapping = find_overlapping_goals(candidate_deadline, goals, now)
    counts = _count_by_type(g.type for g in overlapping)
    score = workload_score(counts)
    level = classify_workload(score, GOAL_CREATION_POLICY)

    return {
        "policy": GOAL_CREATION_POLICY["name"],
        "score": score,
        "level": level,
        "counts": counts,
        "overlapping_goals": len(overlapping),
        "message": _GOAL_WORKLOAD_MESSAGES[level].format(count=len(overlapping)),
    }


def analyze_blueprint_workload(
    blueprint_goal_types: Sequence[Any],
    goals: Iterable[Any],
) -> Dict[str, Any]:
    """
    Workload after adding a batch of goals on top of every active goal
    (blueprint policy). No deadline overlap filter applies here.
    """
    active = [g for g in goals if is_active_goal(g)]
    current_counts = _count_by_type(g.type for g in active)
    blueprint_counts = _count_by_type(blueprint_goal_types)

    current_score = workload_score(current_counts)
    future_score = current_score + workload_score(blueprint_counts)
    level = classify_workload(future_score, BLUEPRINT_POLICY)

    return {
        "policy": BLUEPRINT_POLICY["name"],
        "current": dict(current_counts, total=len(active)),
        "blueprint": dict(blueprint_counts, total=len(blueprint_goal_types)),
        "current_score": current_score,
        "future_score": future_score,
        "level": level,
        "message": _BLUEPRINT_WORKLOAD_MESSAGES[level].format(count=len(blueprint_goal_types)),
    }


# ────────────────────────────────────────────────────────────────────────────────
# DEADLINE GUIDANCE
# ────────────────────────────────────────────────────────────────────────────────
def get_deadline_guidance(
    goal_type: Any,
    deadline: datetime,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    goal_type = enum_value(goal_type)
    days_from_now = days_until(deadline, now or utcnow())
    too_soon_below, too_far_above = DEADLINE_WINDOWS[goal_type]

    if days_from_now < too_soon_below:
        state = "too_soon"
    elif too_far_above is not None and days_from_now > too_far_above:
        state = "too_far"
    else:
        state = "ok"

    message = _DEADLINE_MESSAGES[(goal_type, state)]
    if goal_type == "long" and days_from_now > LONG_TERM_MILESTONE_DAYS:
        message = _LONG_TERM_MILESTONE_MESSAGE

    return {
        "goal_type": goal_type,
        "state": state,
        "color": "green" if state == "ok" else "amber",
        "days_from_now": days_from_now,
        "message": message,
    }


# ────────────────────────────────────────────────────────────────────────────────
# RECURRING RATIO
# ────────────────────────────────────────────────────────────────────────────────
def calculate_recurring_ratio(tasks: Sequence[Any]) -> Dict[str, Any]:
    total = len(tasks)
    recurring = sum(1 for t in tasks if is_recurring_task(t))
    one_time = total - recurring

    if recurring and one_time:
        divisor = math.gcd(recurring, one_time)
        ratio = f"{recurring // divisor}:{one_time // divisor}"
    else:
        ratio = f"{recurring}:{one_time}"

    return {
        "recurring": recurring,
        "one_time": one_time,
        "ratio": ratio,
        "percentage": round_half_up(100 * recurring / total) if total else 0,
    }


# ────────────────────────────────────────────────────────────────────────────────
# GROUPING
# ────────────────────────────────────────────────────────────────────────────────
def task_bucket(task: Any) -> str:
    """Explicit time of day wins; the hour fallback only covers a missing value."""
    time_of_day = enum_value(getattr(task, "time_of_day", None))
    if time_of_day is None:
        return hour_bucket(task.scheduled_date)
    return time_of_day


def group_tasks_by_time_of_day(tasks: Iterable[Any]) -> "OrderedDict[str, List[Any]]":
    groups = OrderedDict((bucket, []) for bucket in TIME_OF_DAY_BUCKETS)
    for task in tasks:
        groups[task_bucket(task)].append(task)
    for bucket in groups:
        groups[bucket].sort(key=lambda t: to_utc(t.scheduled_date))
    return groups
