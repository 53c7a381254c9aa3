# goalquest/models/user_stats.py
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, Float, Uuid
from sqlalchemy.orm import relationship
from goalquest.core.database import Base

class UserStats(Base):
    __tablename__ = "user_stats"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    longest_streak = Column(Integer, default=0, nullable=False)
    current_streak = Column(Integer, default=0, nullable=False)
    goals_completed = Column(Integer, default=0, nullable=False)
    goals_shared = Column(Integer, default=0, nullable=False)
    tasks_completed = Column(Integer, default=0, nullable=False)

    most_productive_day = Column(String(length=20), nullable=True)
    most_productive_time = Column(String(length=20), nullable=True)
    most_tasks_completed_in_day = Column(Integer, default=0, nullable=False)
    most_tasks_completed_date = Column(DateTime, nullable=True)

    # Percentages 0-100
    on_time_completion_rate = Column(Float, default=0.0, nullable=False)
    recurring_task_adherence = Column(Float, default=0.0, nullable=False)
    short_term_completion_rate = Column(Float, default=0.0, nullable=False)
    medium_term_completion_rate = Column(Float, default=0.0, nullable=False)
    long_term_completion_rate = Column(Float, default=0.0, nullable=False)

    longest_goal_age = Column(Integer, default=0, nullable=False)
    longest_break_between_completions = Column(Integer, default=0, nullable=False)
    avg_tasks_per_day = Column(Float, default=0.0, nullable=False)

    last_updated = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="stats")

    def __repr__(self):
        return f"<UserStats user_id={self.user_id} streak={self.current_streak}/{self.longest_streak}>"
