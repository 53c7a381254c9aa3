# goalquest/schemas/goal.py
from typing import Optional, Dict, Literal
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
import uuid

from goalquest.models.goal import GoalType
from goalquest.utils.progress import to_utc

class GoalBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    type: GoalType
    deadline: datetime
    is_public: bool = False
    parent_goal_id: Optional[int] = None

    @field_validator("deadline")
    @classmethod
    def normalize_deadline(cls, value: datetime) -> datetime:
        return to_utc(value)

class GoalCreate(GoalBase):
    pass

class GoalUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    deadline: Optional[datetime] = None

    @field_validator("deadline")
    @classmethod
    def normalize_deadline(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc(value) if value is not None else None

class GoalComplete(BaseModel):
    reflection: Optional[str] = None

class Goal(GoalBase):
    id: int
    user_id: uuid.UUID
    is_completed: bool
    is_archived: bool
    reflection: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None
    longest_streak: int = 0
    current_streak: int = 0

    class Config:
        from_attributes = True

class GoalWithProgress(Goal):
    """Goal plus the values derived from its tasks at request time"""
    progress: int = 0
    time_left: str
    total_tasks: int = 0
    completed_tasks: int = 0

# ─── Planning helpers ──────────────────────────────────────────────────────────

class WorkloadRequest(BaseModel):
    deadline: datetime

    @field_validator("deadline")
    @classmethod
    def normalize_deadline(cls, value: datetime) -> datetime:
        return to_utc(value)

class WorkloadResponse(BaseModel):
    policy: str
    score: float
    level: Literal["none", "low", "medium", "high"]
    counts: Dict[str, int]
    overlapping_goals: int
    message: str

class DeadlineGuidanceRequest(WorkloadRequest):
    type: GoalType

class DeadlineGuidanceResponse(BaseModel):
    goal_type: GoalType
    state: Literal["too_soon", "too_far", "ok"]
    color: Literal["amber", "green"]
    days_from_now: int
    message: str
