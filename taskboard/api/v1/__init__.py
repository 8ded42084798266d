"""
API v1 routes.
"""

from fastapi import APIRouter

from taskboard.api.v1 import auth, projects

router = APIRouter()

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(projects.router, prefix="/projects", tags=["Projects"])
