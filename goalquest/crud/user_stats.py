# goalquest/crud/user_stats.py
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from goalquest.core.db_utils import with_db_retry
from goalquest.crud.goal import get_all_goals_for_user
from goalquest.crud.task import get_tasks_for_user
from goalquest.models.user_stats import UserStats
from goalquest.utils.progress import utcnow
from goalquest.utils.stats import summarize_user_stats
from typing import Any, Dict, Optional
from datetime import datetime
import uuid

logger = logging.getLogger(__name__)

@with_db_retry()
async def get_stats_for_user(user_id: uuid.UUID, db: AsyncSession) -> Optional[UserStats]:
    result = await db.execute(select(UserStats).where(UserStats.user_id == user_id))
    return result.scalar_one_or_none()

async def get_or_create_stats(user_id: uuid.UUID, db: AsyncSession) -> UserStats:
    stats = await get_stats_for_user(user_id, db)
    if stats is None:
        stats = UserStats(user_id=user_id, last_updated=utcnow())
        db.add(stats)
        await db.commit()
        await db.refresh(stats)
        logger.info(f"Created stats record for user {user_id}")
    return stats

async def increment_goals_shared(user_id: uuid.UUID, db: AsyncSession) -> UserStats:
    stats = await get_or_create_stats(user_id, db)
    stats.goals_shared += 1
    db.add(stats)
    await db.commit()
    await db.refresh(stats)
    return stats

async def recalculate_user_stats(
    user_id: uuid.UUID,
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Recompute every derived statistic from the user's goals and tasks and
    persist it. Returns the full summary, recurring ratio included.
    """
    goals = await get_all_goals_for_user(user_id, db)
    tasks = await get_tasks_for_user(user_id, db, include_archived=True)
    summary = summarize_user_stats(goals, tasks, now)

    stats = await get_or_create_stats(user_id, db)
    for field, value in summary.items():
        if field != "recurring_ratio":
            setattr(stats, field, value)
    stats.longest_streak = max(stats.longest_streak or 0, summary["current_streak"])
    stats.last_updated = utcnow()
    db.add(stats)
    await db.commit()
    await db.refresh(stats)

    logger.info(
        f"📊 Recalculated stats for user {user_id}: "
        f"streak={stats.current_streak}/{stats.longest_streak}, tasks_completed={stats.tasks_completed}"
    )
    return dict(summary, longest_streak=stats.longest_streak, goals_shared=stats.goals_shared,
                last_updated=stats.last_updated)
