# goalquest/api/v1/routes/users.py
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from goalquest.core.auth import User, UserRead, UserUpdate
from goalquest.core.database import get_async_session
from goalquest.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/me", response_model=UserRead)
async def read_own_profile(user: User = Depends(get_current_user)):
    """Get current user's profile"""
    return user

@router.patch("/me", response_model=UserRead)
async def update_own_profile(
    user_update: UserUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    update_dict = user_update.model_dump(exclude_unset=True)
    if not update_dict:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields provided for update"
        )

    user = await db.merge(user)
    for field, value in update_dict.items():
        setattr(user, field, value)
    await db.commit()
    await db.refresh(user)
    logger.info(f"Profile updated for user {user.id}")
    return user
