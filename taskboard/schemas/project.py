"""
Project schemas.
"""

from datetime import datetime
from typing import List

from pydantic import BaseModel

from taskboard.schemas.auth import UserResponse


class TodoResponse(BaseModel):
    """A single todo inside a project."""

    id: str
    content: str
    is_completed: bool = False


class ProjectResponse(BaseModel):
    """Project with its members and todos."""

    id: str
    created_at: datetime
    title: str
    progress: float = 0.0
    users: List[UserResponse] = []
    todos: List[TodoResponse] = []
