# goalquest/models/task.py
import enum
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Boolean, Integer, Enum
from sqlalchemy.orm import relationship
from goalquest.core.database import Base

class RepeatType(str, enum.Enum):
    none = "none"
    daily = "daily"
    every_other_day = "every_other_day"
    weekly = "weekly"
    monthly = "monthly"

class TimeOfDay(str, enum.Enum):
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"
    not_set = "not_set"

class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    goal_id = Column(Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(length=255), nullable=False)
    description = Column(Text, nullable=True)
    scheduled_date = Column(DateTime, nullable=False)
    time_of_day = Column(Enum(TimeOfDay, name="time_of_day"), default=TimeOfDay.not_set, nullable=False)

    is_completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    # Set at completion: completed no later than the scheduled date
    completed_on_time = Column(Boolean, nullable=True)

    is_repeating = Column(Boolean, default=False, nullable=False)
    repeat_type = Column(Enum(RepeatType, name="repeat_type"), default=RepeatType.none, nullable=False)
    repeat_until = Column(DateTime, nullable=True)
    parent_task_id = Column(Integer, ForeignKey("tasks.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    goal = relationship("Goal", back_populates="tasks", lazy="joined")

    def __repr__(self):
        return f"<Task title={self.title} scheduled={self.scheduled_date} goal_id={self.goal_id}>"
