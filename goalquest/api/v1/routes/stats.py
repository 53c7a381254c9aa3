# goalquest/api/v1/routes/stats.py
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from goalquest.schemas.stats import UserStats, UserStatsSummary, Heatmap
from goalquest.crud.task import get_tasks_for_user
from goalquest.crud.user_stats import get_or_create_stats, recalculate_user_stats
from goalquest.utils.progress import utcnow
from goalquest.utils.stats import build_heatmap
from goalquest.core.database import get_async_session
from goalquest.core.auth import User
from goalquest.api.deps import get_current_user

router = APIRouter(prefix="/user", tags=["stats"])

@router.get("/stats", response_model=UserStats)
async def read_user_stats(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Stored statistics, as of the last recalculation"""
    return await get_or_create_stats(user.id, db)

@router.post("/stats/recalculate", response_model=UserStatsSummary)
async def recalculate_stats(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await recalculate_user_stats(user.id, db)

@router.get("/heatmap", response_model=Heatmap)
async def read_heatmap(
    year: Optional[int] = Query(None, ge=1970, le=9999),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """
    Completed tasks per day across a calendar year, with an intensity level
    from 0 (nothing done) to 8 (ten or more completions).
    """
    year = year or utcnow().year
    tasks = await get_tasks_for_user(user.id, db, include_archived=True)
    days = build_heatmap(tasks, year)
    return {"year": year, "total_completed": sum(d["count"] for d in days), "days": days}
