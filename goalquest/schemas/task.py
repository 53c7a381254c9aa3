# goalquest/schemas/task.py
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime

from goalquest.models.task import RepeatType, TimeOfDay
from goalquest.utils.progress import to_utc

class TaskBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    scheduled_date: datetime
    time_of_day: TimeOfDay = TimeOfDay.not_set

    @field_validator("scheduled_date")
    @classmethod
    def normalize_scheduled_date(cls, value: datetime) -> datetime:
        return to_utc(value)

class TaskCreate(TaskBase):
    goal_id: int
    is_repeating: bool = False
    repeat_type: RepeatType = RepeatType.none
    repeat_until: Optional[datetime] = None

    @field_validator("repeat_until")
    @classmethod
    def normalize_repeat_until(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc(value) if value is not None else None

    @model_validator(mode="after")
    def check_recurrence(self):
        if self.is_repeating and self.repeat_type == RepeatType.none:
            raise ValueError("repeat_type is required for a repeating task")
        if self.repeat_until is not None and self.repeat_until < self.scheduled_date:
            raise ValueError("repeat_until must not be before scheduled_date")
        return self

class TaskUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    scheduled_date: Optional[datetime] = None
    time_of_day: Optional[TimeOfDay] = None

    @field_validator("scheduled_date")
    @classmethod
    def normalize_scheduled_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc(value) if value is not None else None

class TaskComplete(BaseModel):
    time_of_day: Optional[TimeOfDay] = None

class Task(TaskBase):
    id: int
    goal_id: int
    is_completed: bool
    completed_at: Optional[datetime] = None
    completed_on_time: Optional[bool] = None
    is_repeating: bool
    repeat_type: RepeatType
    repeat_until: Optional[datetime] = None
    parent_task_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True

class TasksByTimeOfDay(BaseModel):
    morning: List[Task] = []
    afternoon: List[Task] = []
    evening: List[Task] = []
    not_set: List[Task] = []
