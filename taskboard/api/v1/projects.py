"""
Project endpoints.

Project storage lives outside this service; listing returns nothing yet.
"""

from typing import List

from fastapi import APIRouter

from taskboard.api.deps import CurrentClaims
from taskboard.schemas.project import ProjectResponse

router = APIRouter()


@router.get("/mine", response_model=List[ProjectResponse])
async def list_my_projects(claims: CurrentClaims):
    """List projects the caller belongs to."""
    return []
