from fastapi import APIRouter
from gamepilot.api.v1.endpoints import analytics, coaching, persona, recommendations

api_router = APIRouter()
api_router.include_router(persona.router, tags=["persona"])
api_router.include_router(recommendations.router, tags=["recommendations"])
api_router.include_router(coaching.router, tags=["coaching"])
api_router.include_router(analytics.router, tags=["analytics"])
