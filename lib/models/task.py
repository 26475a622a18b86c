"""Models for the remote task resource."""

from typing import Any, Optional

from pydantic import BaseModel, Field

# Shape owned by the remote service; forwarded without validation
Task = dict[str, Any]


class TaskFilter(BaseModel):
    """Query filters for listing tasks."""
    status: Optional[str] = Field(None, description="Task status, e.g. 'done'")
    priority: Optional[str] = Field(None, description="Task priority, e.g. 'high'")
    search: Optional[str] = Field(None, description="Free-text search term")

    def to_params(self) -> dict[str, str]:
        """Query parameters for the filters that were actually given.

        Unset and empty-string filters are left out entirely.
        """
        return {
            key: value
            for key, value in self.model_dump().items()
            if value
        }
