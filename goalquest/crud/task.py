# goalquest/crud/task.py
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func
from goalquest.core.db_utils import with_db_retry
from goalquest.models.goal import Goal
from goalquest.models.task import Task, RepeatType, TimeOfDay
from goalquest.utils.progress import ONE_DAY, utcnow
from goalquest.utils.recurrence import occurrence_dates
from typing import List, Optional
from datetime import datetime, date
import uuid
from goalquest.schemas.task import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

@with_db_retry()
async def get_tasks_for_user(user_id: uuid.UUID, db: AsyncSession, include_archived: bool = False) -> List[Task]:
    query = select(Task).join(Goal, Task.goal_id == Goal.id).where(Goal.user_id == user_id)
    if not include_archived:
        query = query.where(Goal.is_archived.is_(False))
    result = await db.execute(query.order_by(Task.scheduled_date.desc(), Task.id.desc()))
    return result.scalars().all()

@with_db_retry()
async def get_tasks_for_goal(goal_id: int, db: AsyncSession) -> List[Task]:
    result = await db.execute(
        select(Task).where(Task.goal_id == goal_id).order_by(Task.scheduled_date.desc(), Task.id.desc())
    )
    return result.scalars().all()

@with_db_retry()
async def get_tasks_for_day(user_id: uuid.UUID, day: date, db: AsyncSession) -> List[Task]:
    start = datetime.combine(day, datetime.min.time())
    result = await db.execute(
        select(Task)
        .join(Goal, Task.goal_id == Goal.id)
        .where(
            Goal.user_id == user_id,
            Goal.is_archived.is_(False),
            Task.scheduled_date >= start,
            Task.scheduled_date < start + ONE_DAY,
        )
    )
    return result.scalars().all()

@with_db_retry()
async def get_task_by_id(task_id: int, db: AsyncSession) -> Optional[Task]:
    """Task with its goal loaded; ownership is checked by the caller."""
    result = await db.execute(select(Task).where(Task.id == task_id))
    return result.scalar_one_or_none()

async def count_tasks_on_day(goal_id: int, day: date, db: AsyncSession, exclude_task_id: Optional[int] = None) -> int:
    start = datetime.combine(day, datetime.min.time())
    query = select(func.count(Task.id)).where(
        Task.goal_id == goal_id,
        Task.scheduled_date >= start,
        Task.scheduled_date < start + ONE_DAY,
    )
    if exclude_task_id is not None:
        query = query.where(Task.id != exclude_task_id)
    result = await db.execute(query)
    return result.scalar_one()

async def create_task(task_in: TaskCreate, db: AsyncSession, max_per_day: Optional[int] = None) -> Task:
    """
    Create a task. A repeating task with an end date also gets one
    standalone instance per occurrence after its own scheduled date.
    Occurrences falling on a day that already holds ``max_per_day`` tasks
    of the goal are skipped.
    """
    new_task = Task(**task_in.model_dump(), created_at=utcnow())
    db.add(new_task)
    await db.flush()

    instances = []
    skipped = []
    if task_in.is_repeating and task_in.repeat_until is not None:
        for scheduled in occurrence_dates(task_in.scheduled_date, task_in.repeat_type, task_in.repeat_until):
            if max_per_day is not None and await count_tasks_on_day(new_task.goal_id, scheduled.date(), db) >= max_per_day:
                skipped.append(scheduled.date().isoformat())
                continue
            instances.append(
                Task(
                    goal_id=new_task.goal_id,
                    title=new_task.title,
                    description=new_task.description,
                    scheduled_date=scheduled,
                    time_of_day=new_task.time_of_day,
                    is_repeating=False,
                    repeat_type=RepeatType.none,
                    parent_task_id=new_task.id,
                    created_at=new_task.created_at,
                )
            )
        db.add_all(instances)

    await db.commit()
    await db.refresh(new_task)
    if instances:
        logger.info(f"Created {len(instances)} recurring instances for task {new_task.id}")
    if skipped:
        logger.warning(f"Skipped {len(skipped)} recurring instances of task {new_task.id} on full days: {skipped}")
    return new_task

async def update_task(task: Task, task_in: TaskUpdate, db: AsyncSession) -> Task:
    for field, value in task_in.model_dump(exclude_unset=True).items():
        if value is None and field != "description":
            continue
        setattr(task, field, value)
    db.add(task)
    await db.commit()
    await db.refresh(task)
    return task

async def complete_task(
    task: Task,
    time_of_day: Optional[TimeOfDay],
    db: AsyncSession,
    now: Optional[datetime] = None,
) -> Task:
    now = now or utcnow()
    task.is_completed = True
    task.completed_at = now
    task.time_of_day = time_of_day or task.time_of_day or TimeOfDay.not_set
    task.completed_on_time = now <= task.scheduled_date
    db.add(task)
    await db.commit()
    await db.refresh(task)
    return task

async def uncomplete_task(task: Task, db: AsyncSession) -> Task:
    task.is_completed = False
    task.completed_at = None
    task.completed_on_time = None
    task.time_of_day = TimeOfDay.not_set
    db.add(task)
    await db.commit()
    await db.refresh(task)
    return task

async def delete_task(task: Task, db: AsyncSession) -> None:
    await db.delete(task)
    await db.commit()