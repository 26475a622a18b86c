"""Pydantic models for the profile endpoints and the task client."""

from .user import (
    PROFILE_FIELDS,
    ProfileFields,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
    UserProfileResponse,
)
from .task import Task, TaskFilter

__all__ = [
    # User
    "PROFILE_FIELDS",
    "ProfileFields",
    "ProfileUpdateRequest",
    "ProfileUpdateResponse",
    "UserProfileResponse",
    # Task
    "Task",
    "TaskFilter",
]
