"""Admin API routes

All routes require membership of the Cognito ``admin`` group.
"""

from fastapi import APIRouter

from .users.routes import router as users_router

router = APIRouter(prefix="/auth/admin")
router.include_router(users_router)
