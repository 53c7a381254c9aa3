# goalquest/schemas/blueprint.py
from typing import Optional, List, Dict
from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime

from goalquest.models.goal import GoalType
from goalquest.utils.progress import to_utc

class BlueprintGoal(BaseModel):
    type: GoalType
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    deadline: Optional[datetime] = None  # defaults by type when applied

    @field_validator("deadline")
    @classmethod
    def normalize_deadline(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc(value) if value is not None else None

class Blueprint(BaseModel):
    id: str
    title: str
    description: str
    goals: List[BlueprintGoal]

class BlueprintSelection(BaseModel):
    """A preset picked by id, or a custom list of goals"""
    blueprint_id: Optional[str] = None
    goals: Optional[List[BlueprintGoal]] = None
    is_public: bool = False

    @model_validator(mode="after")
    def check_source(self):
        if (self.blueprint_id is None) == (self.goals is None):
            raise ValueError("Provide either blueprint_id or goals")
        if self.goals is not None and not self.goals:
            raise ValueError("A custom blueprint needs at least one goal")
        return self

class BlueprintWorkloadResponse(BaseModel):
    policy: str
    current: Dict[str, int]
    blueprint: Dict[str, int]
    current_score: float
    future_score: float
    level: str
    message: str
