"""
API v1 Router
"""

from fastapi import APIRouter

from app.api.v1 import support, users

router = APIRouter()

# Include all endpoint routers
router.include_router(users.router)
router.include_router(support.router)

__all__ = ["router"]
