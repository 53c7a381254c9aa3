# goalquest/api/v1/routes/goals.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, List

from goalquest.schemas.goal import (
    Goal as GoalSchema,
    GoalCreate,
    GoalUpdate,
    GoalComplete,
    GoalWithProgress,
    WorkloadRequest,
    WorkloadResponse,
    DeadlineGuidanceRequest,
    DeadlineGuidanceResponse,
)
from goalquest.schemas.stats import GoalStats
from goalquest.schemas.task import Task as TaskSchema
from goalquest.crud.goal import (
    get_goals_for_user,
    get_all_goals_for_user,
    get_goal_by_id,
    count_active_goals_of_type,
    create_goal_for_user,
    update_goal,
    complete_goal,
    set_archived,
    toggle_public,
    delete_goal,
)
from goalquest.crud.task import get_tasks_for_goal
from goalquest.crud.user_stats import increment_goals_shared, recalculate_user_stats
from goalquest.models.goal import Goal
from goalquest.utils.progress import (
    analyze_workload,
    calculate_goal_progress,
    get_deadline_guidance,
    get_time_left,
    resolve_streaks,
    utcnow,
)
from goalquest.utils.stats import summarize_goal
from goalquest.core.config import settings
from goalquest.core.database import get_async_session
from goalquest.core.auth import User
from goalquest.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/goals", tags=["goals"])

def with_progress(goal: Goal) -> Dict[str, Any]:
    """Serialize a goal together with the values derived from its tasks"""
    tasks = list(goal.tasks)
    streaks = resolve_streaks(tasks, goal.longest_streak)
    data = GoalSchema.model_validate(goal).model_dump()
    data.update(
        progress=calculate_goal_progress(tasks),
        time_left=get_time_left(goal.deadline, utcnow()),
        total_tasks=len(tasks),
        completed_tasks=sum(1 for t in tasks if t.is_completed),
        current_streak=streaks["current_streak"],
        longest_streak=streaks["longest_streak"],
    )
    return data

async def get_owned_goal(goal_id: int, user: User, db: AsyncSession) -> Goal:
    goal = await get_goal_by_id(goal_id, user.id, db)
    if not goal:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return goal

# ─── Collections ───────────────────────────────────────────────────────────────

@router.get("", response_model=List[GoalWithProgress])
async def read_goals(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Active and completed goals (archived ones excluded), newest first"""
    goals = await get_goals_for_user(user.id, db)
    return [with_progress(g) for g in goals]

@router.get("/archived", response_model=List[GoalWithProgress])
async def read_archived_goals(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goals = await get_goals_for_user(user.id, db, archived=True)
    return [with_progress(g) for g in goals]

@router.post("", response_model=GoalWithProgress, status_code=status.HTTP_201_CREATED)
async def create_goal(
    goal_in: GoalCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    limit = settings.MAX_ACTIVE_GOALS_PER_TYPE
    if await count_active_goals_of_type(user.id, goal_in.type, db) >= limit:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            detail=f"You can only have a maximum of {limit} active {goal_in.type.value}-term goals",
        )
    if goal_in.parent_goal_id is not None:
        await get_owned_goal(goal_in.parent_goal_id, user, db)

    goal = await create_goal_for_user(user.id, goal_in, db)
    logger.info(f"Goal {goal.id} ({goal.type.value}) created for user {user.id}")
    return with_progress(goal)

# ─── Planning helpers ──────────────────────────────────────────────────────────

@router.post("/workload", response_model=WorkloadResponse)
async def goal_workload(
    workload_in: WorkloadRequest,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """
    Weighted count of the active goals whose window overlaps a prospective
    deadline (short = 1, medium = 1.5, long = 2).
    """
    goals = await get_all_goals_for_user(user.id, db)
    return analyze_workload(workload_in.deadline, goals, utcnow())

@router.post("/deadline-guidance", response_model=DeadlineGuidanceResponse)
async def deadline_guidance(
    guidance_in: DeadlineGuidanceRequest,
    user: User = Depends(get_current_user),
):
    return get_deadline_guidance(guidance_in.type, guidance_in.deadline, utcnow())

# ─── Single goal ───────────────────────────────────────────────────────────────

@router.get("/{goal_id}", response_model=GoalWithProgress)
async def read_goal(
    goal_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await get_owned_goal(goal_id, user, db)
    return with_progress(goal)

@router.get("/{goal_id}/tasks", response_model=List[TaskSchema])
async def read_goal_tasks(
    goal_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await get_owned_goal(goal_id, user, db)
    return await get_tasks_for_goal(goal.id, db)

@router.get("/{goal_id}/stats", response_model=GoalStats)
async def read_goal_stats(
    goal_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await get_owned_goal(goal_id, user, db)
    tasks = await get_tasks_for_goal(goal.id, db)
    return summarize_goal(goal, tasks, utcnow())

@router.patch("/{goal_id}", response_model=GoalWithProgress)
async def update_goal_endpoint(
    goal_id: int,
    goal_in: GoalUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await get_owned_goal(goal_id, user, db)
    if goal.is_completed:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Completed goals cannot be edited")
    if goal.is_archived:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Archived goals cannot be edited")
    goal = await update_goal(goal, goal_in, db)
    return with_progress(goal)

@router.patch("/{goal_id}/complete", response_model=GoalWithProgress)
async def complete_goal_endpoint(
    goal_id: int,
    complete_in: GoalComplete,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await get_owned_goal(goal_id, user, db)
    if goal.is_completed:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Goal is already completed")

    goal = await complete_goal(goal, complete_in.reflection, db)
    await recalculate_user_stats(user.id, db)
    logger.info(f"🎯 Goal {goal.id} completed by user {user.id}")
    return with_progress(goal)

@router.patch("/{goal_id}/archive", response_model=GoalWithProgress)
async def archive_goal(
    goal_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await get_owned_goal(goal_id, user, db)
    if not goal.is_archived:
        goal = await set_archived(goal, True, db)
    return with_progress(goal)

@router.patch("/{goal_id}/unarchive", response_model=GoalWithProgress)
async def unarchive_goal(
    goal_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await get_owned_goal(goal_id, user, db)
    if not goal.is_archived:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Archived goal not found")
    goal = await set_archived(goal, False, db)
    return with_progress(goal)

@router.patch("/{goal_id}/toggle-public", response_model=GoalWithProgress)
async def toggle_goal_public(
    goal_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await get_owned_goal(goal_id, user, db)
    goal = await toggle_public(goal, db)
    # Sharing a finished goal counts towards the user's shared total
    if goal.is_public and goal.is_completed:
        await increment_goals_shared(user.id, db)
    return with_progress(goal)

@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal_endpoint(
    goal_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Delete a goal together with all of its tasks"""
    goal = await get_owned_goal(goal_id, user, db)
    await delete_goal(goal, db)
    return None
