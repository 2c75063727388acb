"""
Router aggregator.
Includes all route modules.
"""
from fastapi import APIRouter
from app.api import health, storage, team

api_router = APIRouter()

# Include route modules
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(storage.router, prefix="/storage", tags=["storage"])
api_router.include_router(team.router, prefix="/team", tags=["team"])
