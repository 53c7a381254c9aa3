# goalquest/core/auth.py

import uuid
import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Request
from fastapi_users import FastAPIUsers, BaseUserManager, UUIDIDMixin
from fastapi_users.authentication import (
    AuthenticationBackend,
    BearerTransport,
    JWTStrategy,
)
from fastapi_users.db import SQLAlchemyUserDatabase
from fastapi_users import schemas
from pydantic import BaseModel, Field

from sqlalchemy import Column, String, Boolean, DateTime, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.ext.asyncio import AsyncSession

import jwt

from .database import Base, get_async_session
from .config import settings
from goalquest.models.user_stats import UserStats
from goalquest.utils.progress import utcnow

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

TOKEN_AUDIENCE = ["fastapi-users:auth"]

# 1. User DB model
class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_superuser = Column(Boolean, default=False, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)

    # Additional fields
    display_name = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    goals = relationship(
        "Goal",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    stats = relationship(
        "UserStats",
        back_populates="user",
        cascade="all, delete-orphan",
        uselist=False,
    )

# Helper function to create JWT tokens
def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token for the given subject (user ID), compatible
    with the tokens issued by the JWT login route.
    """
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = {
        "sub": subject,
        "aud": TOKEN_AUDIENCE,
        "exp": expire,
        "iat": datetime.utcnow(),
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
# 2. Pydantic schemas
class UserRead(schemas.BaseUser[uuid.UUID]):
    display_name: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class UserCreate(schemas.BaseUserCreate):
    display_name: Optional[str] = Field(None, max_length=100)

class UserUpdate(BaseModel):
    """Profile fields a user may change on their own account"""
    display_name: Optional[str] = Field(None, max_length=100)

# 3. User Manager
class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = settings.SECRET_KEY
    verification_token_secret = settings.SECRET_KEY

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        # Every account starts with an empty stats row
        session = self.user_db.session
        session.add(UserStats(user_id=user.id, last_updated=utcnow()))
        await session.commit()
        logger.info(f"User {user.email} has registered 🎉")

# 4. User Database
async def get_user_db(session: AsyncSession = Depends(get_async_session)):
    yield SQLAlchemyUserDatabase(session, User)

# 5. User Manager dependency
async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db)

# 6. Authentication
bearer_transport = BearerTransport(tokenUrl=f"{settings.API_PREFIX}/auth/jwt/login")

def get_jwt_strategy() -> JWTStrategy:
    return JWTStrategy(
        secret=settings.SECRET_KEY,
        lifetime_seconds=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        token_audience=TOKEN_AUDIENCE,
        algorithm=settings.ALGORITHM,
    )

auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

# 7. FastAPI Users instance (login and registration routers)
fastapi_users = FastAPIUsers[User, uuid.UUID](get_user_manager, [auth_backend])
