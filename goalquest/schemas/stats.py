# goalquest/schemas/stats.py
from typing import Optional, List
from pydantic import BaseModel
from datetime import datetime, date

class RecurringRatio(BaseModel):
    recurring: int
    one_time: int
    ratio: str
    percentage: int

class UserStats(BaseModel):
    longest_streak: int = 0
    current_streak: int = 0
    goals_completed: int = 0
    goals_shared: int = 0
    tasks_completed: int = 0
    most_productive_day: Optional[str] = None
    most_productive_time: Optional[str] = None
    most_tasks_completed_in_day: int = 0
    most_tasks_completed_date: Optional[datetime] = None
    on_time_completion_rate: float = 0.0
    recurring_task_adherence: float = 0.0
    short_term_completion_rate: float = 0.0
    medium_term_completion_rate: float = 0.0
    long_term_completion_rate: float = 0.0
    longest_goal_age: int = 0
    longest_break_between_completions: int = 0
    avg_tasks_per_day: float = 0.0
    last_updated: Optional[datetime] = None

    class Config:
        from_attributes = True

class UserStatsSummary(UserStats):
    recurring_ratio: RecurringRatio

class GoalStats(BaseModel):
    goal_id: int
    progress: int
    time_left: str
    current_streak: int
    longest_streak: int
    total_tasks: int
    tasks_completed: int
    tasks_completed_morning: int
    tasks_completed_afternoon: int
    tasks_completed_evening: int
    tasks_completed_not_set: int
    tasks_completed_on_time: int
    tasks_completed_late: int
    recurring_tasks_completed: int
    non_recurring_tasks_completed: int

class HeatmapCell(BaseModel):
    date: date
    count: int
    level: int

class Heatmap(BaseModel):
    year: int
    total_completed: int
    days: List[HeatmapCell]
