# goalquest/api/v1/routes/blueprints.py
import logging
from collections import Counter
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from goalquest.schemas.blueprint import Blueprint, BlueprintGoal, BlueprintSelection, BlueprintWorkloadResponse
from goalquest.schemas.goal import GoalCreate, GoalWithProgress
from goalquest.crud.goal import get_all_goals_for_user, count_active_goals_of_type, create_goal_for_user
from goalquest.api.v1.routes.goals import with_progress
from goalquest.utils.blueprints import DEFAULT_BLUEPRINTS, default_deadline, get_blueprint
from goalquest.utils.progress import analyze_blueprint_workload, utcnow
from goalquest.core.config import settings
from goalquest.core.database import get_async_session
from goalquest.core.auth import User
from goalquest.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blueprints", tags=["blueprints"])

def resolve_goals(selection: BlueprintSelection) -> List[BlueprintGoal]:
    if selection.goals is not None:
        return selection.goals
    blueprint = get_blueprint(selection.blueprint_id)
    if not blueprint:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Blueprint not found")
    return [BlueprintGoal(**g) for g in blueprint["goals"]]

@router.get("", response_model=List[Blueprint])
async def read_blueprints(user: User = Depends(get_current_user)):
    return DEFAULT_BLUEPRINTS

@router.post("/workload", response_model=BlueprintWorkloadResponse)
async def blueprint_workload(
    selection: BlueprintSelection,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Workload once every goal of the blueprint is added to the active ones"""
    blueprint_goals = resolve_goals(selection)
    goals = await get_all_goals_for_user(user.id, db)
    return analyze_blueprint_workload([g.type for g in blueprint_goals], goals)

@router.post("/apply", response_model=List[GoalWithProgress], status_code=status.HTTP_201_CREATED)
async def apply_blueprint(
    selection: BlueprintSelection,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """
    Create one goal per blueprint goal. Missing deadlines default by type.
    Nothing is created when any goal type would exceed the active limit.
    """
    blueprint_goals = resolve_goals(selection)

    limit = settings.MAX_ACTIVE_GOALS_PER_TYPE
    for goal_type, added in Counter(g.type for g in blueprint_goals).items():
        if await count_active_goals_of_type(user.id, goal_type, db) + added > limit:
            raise HTTPException(
                status.HTTP_400_BAD_REQUEST,
                detail=f"You can only have a maximum of {limit} active {goal_type.value}-term goals",
            )

    now = utcnow()
    created = []
    for blueprint_goal in blueprint_goals:
        goal_in = GoalCreate(
            title=blueprint_goal.title,
            description=blueprint_goal.description,
            type=blueprint_goal.type,
            deadline=blueprint_goal.deadline or default_deadline(blueprint_goal.type, now),
            is_public=selection.is_public,
        )
        created.append(await create_goal_for_user(user.id, goal_in, db, commit=False))

    await db.commit()
    for goal in created:
        await db.refresh(goal)
    logger.info(f"Applied blueprint with {len(created)} goals for user {user.id}")
    return [with_progress(g) for g in created]
