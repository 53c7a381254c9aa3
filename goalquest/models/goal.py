# goalquest/models/goal.py
import enum
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Boolean, Integer, Enum, Uuid
from sqlalchemy.orm import relationship
from goalquest.core.database import Base

class GoalType(str, enum.Enum):
    short = "short"
    medium = "medium"
    long = "long"

class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(length=255), nullable=False)
    description = Column(Text, nullable=True)
    type = Column(Enum(GoalType, name="goal_type"), nullable=False)
    # Display grouping only; children survive their parent
    parent_goal_id = Column(Integer, ForeignKey("goals.id", ondelete="SET NULL"), nullable=True)
    deadline = Column(DateTime, nullable=False)

    is_completed = Column(Boolean, default=False, nullable=False)
    is_public = Column(Boolean, default=False, nullable=False)
    is_archived = Column(Boolean, default=False, nullable=False)
    reflection = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    archived_at = Column(DateTime, nullable=True)

    # Cached streak values, refreshed whenever one of the goal's tasks changes state
    longest_streak = Column(Integer, default=0, nullable=False)
    current_streak = Column(Integer, default=0, nullable=False)
    last_updated = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="goals")
    tasks = relationship(
        "Task",
        back_populates="goal",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Task.scheduled_date",
    )

    @property
    def is_active(self) -> bool:
        return not self.is_completed and not self.is_archived

    def __repr__(self):
        return f"<Goal title={self.title} type={self.type} deadline={self.deadline} user_id={self.user_id}>"
