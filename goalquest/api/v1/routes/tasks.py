# goalquest/api/v1/routes/tasks.py
import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from goalquest.schemas.task import Task as TaskSchema, TaskCreate, TaskUpdate, TaskComplete, TasksByTimeOfDay
from goalquest.crud.goal import get_goal_by_id, refresh_goal_streak
from goalquest.crud.task import (
    get_tasks_for_user,
    get_tasks_for_day,
    get_task_by_id,
    count_tasks_on_day,
    create_task,
    update_task,
    complete_task,
    uncomplete_task,
    delete_task,
)
from goalquest.crud.user_stats import recalculate_user_stats
from goalquest.models.task import Task
from goalquest.utils.progress import group_tasks_by_time_of_day, utcnow
from goalquest.core.config import settings
from goalquest.core.database import get_async_session
from goalquest.core.auth import User
from goalquest.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])

async def get_task_for_update(task_id: int, user: User, db: AsyncSession, allow_archived: bool = False) -> Task:
    """
    Load a task and make sure its goal belongs to the user. Tasks of
    archived goals are read-only unless ``allow_archived``.
    """
    task = await get_task_by_id(task_id, db)
    if not task:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Task not found")
    goal = task.goal
    if goal.user_id != user.id or (goal.is_archived and not allow_archived):
        raise HTTPException(
            status.HTTP_403_FORBIDDEN,
            detail="You don't have permission to update this task or the goal is archived",
        )
    return task

@router.get("", response_model=List[TaskSchema])
async def read_tasks(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Tasks of all non-archived goals, latest scheduled first"""
    return await get_tasks_for_user(user.id, db)

@router.get("/by-time-of-day", response_model=TasksByTimeOfDay)
async def read_tasks_by_time_of_day(
    day: Optional[date] = Query(None, description="Calendar day (UTC), defaults to today"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """
    One day's tasks grouped into morning, afternoon, evening and not_set.
    Each group is ordered by scheduled time.
    """
    tasks = await get_tasks_for_day(user.id, day or utcnow().date(), db)
    return group_tasks_by_time_of_day(tasks)

@router.post("", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
async def create_task_endpoint(
    task_in: TaskCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    goal = await get_goal_by_id(task_in.goal_id, user.id, db)
    if not goal or goal.is_archived:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Goal not found or is archived")

    limit = settings.MAX_TASKS_PER_DAY_PER_GOAL
    if await count_tasks_on_day(goal.id, task_in.scheduled_date.date(), db) >= limit:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            detail=f"You can only schedule a maximum of {limit} tasks per day for each goal",
        )

    return await create_task(task_in, db, max_per_day=limit)

@router.patch("/{task_id}/complete", response_model=TaskSchema)
async def complete_task_endpoint(
    task_id: int,
    complete_in: Optional[TaskComplete] = None,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    task = await get_task_for_update(task_id, user, db)
    time_of_day = complete_in.time_of_day if complete_in else None

    task = await complete_task(task, time_of_day, db)
    await refresh_goal_streak(task.goal, db)
    await recalculate_user_stats(user.id, db)
    logger.info(f"✅ Task {task.id} completed by user {user.id} (on time: {task.completed_on_time})")
    return task

@router.patch("/{task_id}/uncomplete", response_model=TaskSchema)
async def uncomplete_task_endpoint(
    task_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    task = await get_task_for_update(task_id, user, db)
    if not task.is_completed:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Task is not completed")

    task = await uncomplete_task(task, db)
    # The goal's longest streak is a historical best and is left as is
    await refresh_goal_streak(task.goal, db, keep_longest=True)
    await recalculate_user_stats(user.id, db)
    return task

@router.patch("/{task_id}", response_model=TaskSchema)
async def update_task_endpoint(
    task_id: int,
    task_in: TaskUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    task = await get_task_for_update(task_id, user, db)
    if task.parent_task_id is not None:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            detail="Cannot reschedule a task from a recurring series",
        )

    new_date = task_in.scheduled_date
    if new_date is not None and new_date.date() != task.scheduled_date.date():
        limit = settings.MAX_TASKS_PER_DAY_PER_GOAL
        if await count_tasks_on_day(task.goal_id, new_date.date(), db, exclude_task_id=task.id) >= limit:
            raise HTTPException(
                status.HTTP_400_BAD_REQUEST,
                detail=f"You can only schedule a maximum of {limit} tasks per day for each goal",
            )

    return await update_task(task, task_in, db)

@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task_endpoint(
    task_id: int,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    task = await get_task_for_update(task_id, user, db, allow_archived=True)
    if task.is_repeating:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="Cannot delete a parent recurring task")

    was_completed = task.is_completed
    await delete_task(task, db)
    if was_completed:
        await recalculate_user_stats(user.id, db)
    return None
