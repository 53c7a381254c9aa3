# goalquest/crud/goal.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from goalquest.core.db_utils import with_db_retry
from goalquest.models.goal import Goal, GoalType
from goalquest.models.task import Task
from goalquest.utils.progress import calculate_streak, utcnow
from typing import List, Optional
from datetime import datetime
import uuid
from goalquest.schemas.goal import GoalCreate, GoalUpdate

@with_db_retry()
async def get_goals_for_user(user_id: uuid.UUID, db: AsyncSession, archived: bool = False) -> List[Goal]:
    query = select(Goal).where(Goal.user_id == user_id, Goal.is_archived == archived)
    if archived:
        query = query.order_by(Goal.archived_at.desc(), Goal.id.desc())
    else:
        query = query.order_by(Goal.created_at.desc(), Goal.id.desc())
    result = await db.execute(query)
    return result.scalars().all()

@with_db_retry()
async def get_all_goals_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Goal]:
    result = await db.execute(select(Goal).where(Goal.user_id == user_id))
    return result.scalars().all()

@with_db_retry()
async def get_goal_by_id(goal_id: int, user_id: uuid.UUID, db: AsyncSession) -> Optional[Goal]:
    result = await db.execute(
        select(Goal).where(Goal.id == goal_id, Goal.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def count_active_goals_of_type(user_id: uuid.UUID, goal_type: GoalType, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(Goal.id)).where(
            Goal.user_id == user_id,
            Goal.type == goal_type,
            Goal.is_completed.is_(False),
            Goal.is_archived.is_(False),
        )
    )
    return result.scalar_one()

async def create_goal_for_user(user_id: uuid.UUID, goal_in: GoalCreate, db: AsyncSession, commit: bool = True) -> Goal:
    new_goal = Goal(**goal_in.model_dump(), user_id=user_id, created_at=utcnow())
    db.add(new_goal)
    if commit:
        await db.commit()
        await db.refresh(new_goal)
    return new_goal

async def update_goal(goal: Goal, goal_in: GoalUpdate, db: AsyncSession) -> Goal:
    for field, value in goal_in.model_dump(exclude_unset=True).items():
        # Only the description may be cleared with an explicit null
        if value is None and field != "description":
            continue
        setattr(goal, field, value)
    db.add(goal)
    await db.commit()
    await db.refresh(goal)
    return goal

async def complete_goal(goal: Goal, reflection: Optional[str], db: AsyncSession, now: Optional[datetime] = None) -> Goal:
    goal.is_completed = True
    goal.completed_at = max(now or utcnow(), goal.created_at)
    goal.reflection = reflection
    db.add(goal)
    await db.commit()
    await db.refresh(goal)
    return goal

async def set_archived(goal: Goal, archived: bool, db: AsyncSession) -> Goal:
    goal.is_archived = archived
    goal.archived_at = utcnow() if archived else None
    db.add(goal)
    await db.commit()
    await db.refresh(goal)
    return goal

async def toggle_public(goal: Goal, db: AsyncSession) -> Goal:
    goal.is_public = not goal.is_public
    db.add(goal)
    await db.commit()
    await db.refresh(goal)
    return goal

async def refresh_goal_streak(goal: Goal, db: AsyncSession, keep_longest: bool = False) -> Goal:
    """
    Recompute the goal's current streak from its tasks. The longest streak is
    a historical best: it only moves up, and stays put when ``keep_longest``.
    """
    result = await db.execute(select(Task).where(Task.goal_id == goal.id))
    goal.current_streak = calculate_streak(result.scalars().all())
    if not keep_longest:
        goal.longest_streak = max(goal.longest_streak or 0, goal.current_streak)
    db.add(goal)
    await db.commit()
    return goal

async def delete_goal(goal: Goal, db: AsyncSession) -> None:
    await db.delete(goal)
    await db.commit()
