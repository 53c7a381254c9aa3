# goalquest/api/v1/api.py
from fastapi import APIRouter

from goalquest.api.v1.routes import goals, tasks, stats, blueprints, users

api_router = APIRouter()

api_router.include_router(goals.router)
api_router.include_router(tasks.router)
api_router.include_router(stats.router)
api_router.include_router(blueprints.router)
api_router.include_router(users.router)
