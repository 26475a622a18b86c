"""Async client for the remote task API.

Each call builds one request, raises on any non-2xx status via
``raise_for_status`` and returns the decoded JSON body untouched. Errors are
left to the caller: there is no retry, caching or error translation here.
"""

from typing import Any, Mapping, Optional, Union

import httpx

from lib.config import DEFAULT_TASKS_API_URL, Settings, get_settings
from lib.models import Task, TaskFilter


class TaskClient:
    """Request builder for the ``/tasks`` resource."""

    def __init__(
        self,
        base_url: str = DEFAULT_TASKS_API_URL,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root the ``/tasks`` paths are resolved against.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (e.g. a MockTransport in tests).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs) -> "TaskClient":
        """Build a client from the configured ``TASKS_API_URL``."""
        settings = settings or get_settings()
        kwargs.setdefault("timeout", settings.tasks_api_timeout)
        return cls(settings.tasks_api_url, **kwargs)

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            resp = await client.request(method, path, **kwargs)
            resp.raise_for_status()
            # 204 and other empty replies carry no JSON
            if not resp.content:
                return None
            return resp.json()

    async def list_tasks(
        self,
        filters: Union[TaskFilter, Mapping[str, Optional[str]], None] = None,
        **kwargs: Optional[str],
    ) -> list[Task]:
        """List tasks, sending only the filters that were given.

        ``filters`` may be a TaskFilter or a mapping; keyword arguments
        (``status``, ``priority``, ``search``) are merged on top.
        """
        if not isinstance(filters, TaskFilter):
            filters = TaskFilter(**{**dict(filters or {}), **kwargs})
        elif kwargs:
            filters = filters.model_copy(update=kwargs)
        return await self._request("GET", "/tasks", params=filters.to_params())

    async def get_task(self, task_id: str) -> Task:
        return await self._request("GET", f"/tasks/{task_id}")

    async def create_task(self, data: Task) -> Task:
        return await self._request("POST", "/tasks", json=data)

    async def update_task(self, task_id: str, data: Task) -> Task:
        return await self._request("PUT", f"/tasks/{task_id}", json=data)

    async def delete_task(self, task_id: str) -> Any:
        """Delete a task; returns the confirmation body, or None if empty."""
        return await self._request("DELETE", f"/tasks/{task_id}")
