from datetime import datetime

import pytest

from factories import make_goal, make_task
from goalquest.utils.stats import (
    NOT_ENOUGH_DATA,
    average_tasks_per_day,
    build_heatmap,
    busiest_day,
    completion_rate_by_goal_type,
    heatmap_level,
    longest_break,
    longest_goal_age,
    most_productive_day,
    most_productive_time,
    summarize_goal,
    summarize_user_stats,
)


def at(day, hour=10, month=1):
    return datetime(2024, month, day, hour, 0)


# 2024-01-01 is a Monday
def test_most_productive_day():
    tasks = [make_task(completed_at=at(1)), make_task(completed_at=at(8)), make_task(completed_at=at(2))]
    assert most_productive_day(tasks) == "Monday"


def test_most_productive_day_tie_goes_to_earlier_weekday():
    tasks = [make_task(completed_at=at(1)), make_task(completed_at=at(7))]
    assert most_productive_day(tasks) == "Sunday"


def test_productive_day_and_time_without_data():
    assert most_productive_day([]) == NOT_ENOUGH_DATA
    assert most_productive_time([make_task()]) == NOT_ENOUGH_DATA


def test_most_productive_time_falls_back_to_completion_hour():
    tasks = [
        make_task(completed_at=at(1, 9), time_of_day="not_set"),
        make_task(completed_at=at(1, 14), time_of_day="not_set"),
        make_task(completed_at=at(2, 14), time_of_day=None),
        make_task(completed_at=at(3, 8), time_of_day="evening"),
    ]
    assert most_productive_time(tasks) == "Afternoon"


def test_busiest_day_prefers_earliest_on_tie():
    tasks = [
        make_task(completed_at=at(3, 9)),
        make_task(completed_at=at(3, 18)),
        make_task(completed_at=at(2, 9)),
        make_task(completed_at=at(2, 11)),
        make_task(completed_at=at(1)),
    ]
    assert busiest_day(tasks) == {"count": 2, "date": datetime(2024, 1, 2).date()}
    assert busiest_day([]) == {"count": 0, "date": None}


def test_completion_rate_by_goal_type():
    goals = [make_goal("short", goal_id=1), make_goal("long", goal_id=2)]
    tasks = [
        make_task(goal_id=1, completed_at=at(1)),
        make_task(goal_id=1),
        make_task(goal_id=2),
        make_task(goal_id=99, completed_at=at(1)),
    ]
    assert completion_rate_by_goal_type(goals, tasks) == {"short": 50, "medium": 0, "long": 0}


def test_longest_goal_age_ignores_finished_goals():
    goals = [
        make_goal(created_at=datetime(2024, 1, 1), goal_id=1),
        make_goal(created_at=datetime(2024, 1, 10), goal_id=2),
        make_goal(created_at=datetime(2023, 12, 1), is_completed=True, goal_id=3),
    ]
    assert longest_goal_age(goals, datetime(2024, 1, 31, 12, 0)) == 30
    assert longest_goal_age([], datetime(2024, 1, 31)) == 0


def test_longest_break_floors_whole_days():
    tasks = [
        make_task(completed_at=at(10, 9)),
        make_task(completed_at=at(1, 10)),
        make_task(completed_at=at(3, 10)),
    ]
    assert longest_break(tasks) == 6
    assert longest_break(tasks[:1]) == 0


def test_average_tasks_per_active_day():
    tasks = [make_task(completed_at=at(1, h)) for h in (8, 9, 10)] + [make_task(completed_at=at(2))]
    assert average_tasks_per_day(tasks) == 2

    tasks = [make_task(completed_at=at(1, h)) for h in (8, 9, 10)] + [
        make_task(completed_at=at(5, h)) for h in (8, 9)
    ]
    assert average_tasks_per_day(tasks) == 3
    assert average_tasks_per_day([]) == 0


def test_summarize_user_stats():
    goals = [
        make_goal("short", goal_id=1, created_at=datetime(2024, 1, 1)),
        make_goal("medium", goal_id=2, is_completed=True, created_at=datetime(2024, 1, 1)),
    ]
    tasks = [
        # same calendar day as scheduled, so on time
        make_task(goal_id=1, scheduled_date=at(1, 9), completed_at=at(1, 20)),
        make_task(goal_id=1, scheduled_date=at(1, 9), completed_at=at(2, 9)),
        make_task(goal_id=2, scheduled_date=at(3, 9), completed_at=at(3, 9), is_repeating=True, repeat_type="daily"),
        make_task(goal_id=2, scheduled_date=at(4, 9), parent_task_id=3),
    ]

    summary = summarize_user_stats(goals, tasks, now=datetime(2024, 1, 11))

    assert summary["current_streak"] == 3
    assert summary["goals_completed"] == 1
    assert summary["tasks_completed"] == 3
    assert summary["on_time_completion_rate"] == 67
    assert summary["recurring_task_adherence"] == 100
    assert summary["short_term_completion_rate"] == 100
    assert summary["medium_term_completion_rate"] == 50
    assert summary["long_term_completion_rate"] == 0
    assert summary["longest_goal_age"] == 10
    assert summary["most_tasks_completed_in_day"] == 1
    assert summary["most_tasks_completed_date"] == datetime(2024, 1, 1)
    assert summary["recurring_ratio"]["ratio"] == "1:1"
    assert "longest_streak" not in summary
    assert "goals_shared" not in summary


def test_summarize_user_stats_on_empty_account():
    summary = summarize_user_stats([], [], now=datetime(2024, 1, 1))
    assert summary["current_streak"] == 0
    assert summary["most_productive_day"] == NOT_ENOUGH_DATA
    assert summary["most_tasks_completed_date"] is None
    assert summary["avg_tasks_per_day"] == 0


def test_summarize_goal():
    goal = make_goal(deadline=datetime(2024, 1, 20), longest_streak=5, goal_id=7)
    tasks = [
        make_task(completed_at=at(2, 8), time_of_day="morning", completed_on_time=True),
        make_task(completed_at=at(3, 19), time_of_day="evening", completed_on_time=False),
        make_task(completed_at=at(3, 12), time_of_day=None, completed_on_time=True, parent_task_id=1),
        make_task(),
    ]

    stats = summarize_goal(goal, tasks, now=datetime(2024, 1, 10))

    assert stats["goal_id"] == 7
    assert stats["progress"] == 75
    assert stats["time_left"] == "10 days left"
    assert stats["current_streak"] == 2
    assert stats["longest_streak"] == 5
    assert stats["total_tasks"] == 4
    assert stats["tasks_completed"] == 3
    assert stats["tasks_completed_morning"] == 1
    assert stats["tasks_completed_evening"] == 1
    assert stats["tasks_completed_not_set"] == 1
    assert stats["tasks_completed_on_time"] == 2
    assert stats["tasks_completed_late"] == 1
    assert stats["recurring_tasks_completed"] == 1
    assert stats["non_recurring_tasks_completed"] == 2


@pytest.mark.parametrize(
    "count, level",
    [(0, 0), (1, 1), (5, 5), (6, 6), (7, 6), (8, 7), (9, 7), (10, 8), (42, 8)],
)
def test_heatmap_level(count, level):
    assert heatmap_level(count) == level


def test_heatmap_covers_whole_year():
    tasks = [
        make_task(completed_at=at(15, h, month=3)) for h in range(8, 15)
    ] + [make_task(completed_at=datetime(2023, 12, 31, 10, 0)), make_task()]

    cells = build_heatmap(tasks, 2024)

    assert len(cells) == 366
    assert cells[0]["date"] == datetime(2024, 1, 1).date()
    assert cells[-1]["date"] == datetime(2024, 12, 31).date()
    busy = [c for c in cells if c["count"]]
    assert busy == [{"date": datetime(2024, 3, 15).date(), "count": 7, "level": 6}]
    assert len(build_heatmap([], 2023)) == 365
