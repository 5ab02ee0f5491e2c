from fastapi import APIRouter

from src.api.routes import competitors, health

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(competitors.router)
