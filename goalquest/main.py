# goalquest/main.py
import uvicorn
import os
import logging
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from goalquest.core.config import settings
from goalquest.core.database import create_db_and_tables
from goalquest.core.auth import (
    fastapi_users,
    auth_backend,
    UserRead,
    UserCreate,
)
# Register every mapped class before the first query configures the mappers
from goalquest.models import goal, task, user_stats  # noqa: F401
from goalquest.api.v1.api import api_router

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    openapi_tags=[
        {"name": "Authentication", "description": "Registration and JWT login"},
        {"name": "goals", "description": "Goals with derived progress, streaks and planning helpers"},
        {"name": "tasks", "description": "Scheduled tasks, completion and recurring series"},
        {"name": "stats", "description": "User statistics and activity heatmap"},
        {"name": "blueprints", "description": "Goal templates applied in one batch"},
        {"name": "users", "description": "Profile of the signed-in user"},
    ],
)

# CORS Configuration
origins = [
    settings.FRONTEND_URL,
    "http://localhost:3000",
    "http://localhost:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for better error responses"""
    if isinstance(exc, HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail}
        )

    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")

    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )

# ------------------------------------------------------------
# AUTHENTICATION ROUTES
# ------------------------------------------------------------
app.include_router(
    fastapi_users.get_auth_router(auth_backend),
    prefix=f"{settings.API_PREFIX}/auth/jwt",
    tags=["Authentication"],
)

app.include_router(
    fastapi_users.get_register_router(UserRead, UserCreate),
    prefix=f"{settings.API_PREFIX}/auth",
    tags=["Authentication"],
)

# ------------------------------------------------------------
# ROOT / HEALTH
# ------------------------------------------------------------
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information"""
    return {
        "message": f"{settings.APP_NAME} is running!",
        "version": settings.VERSION,
    }

@app.get("/health", tags=["Health"])
async def health_check():
    return {
        "status": "healthy",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
    }

# ------------------------------------------------------------
# BUSINESS LOGIC ROUTES
# ------------------------------------------------------------
app.include_router(api_router, prefix=settings.API_PREFIX)

# ------------------------------------------------------------
# STARTUP EVENT
# ------------------------------------------------------------
@app.on_event("startup")
async def on_startup():
    """Create missing tables (schema changes go through Alembic)"""
    await create_db_and_tables()
    logger.info("✅ Database tables ready")
    logger.info(f"✅ Frontend URL: {settings.FRONTEND_URL}")

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("goalquest.main:app", host="0.0.0.0", port=port, reload=False)
