"""
Request Logger - Records HTTP requests for debugging and monitoring.

Stores recent requests in memory for development inspection via /logs.
"""

from datetime import datetime, timezone
from typing import Optional
from collections import deque
import uuid


class RequestLogger:
    """In-memory request logger for development debugging."""

    def __init__(self, max_logs: int = 1000):
        """
        Initialize the logger.

        Args:
            max_logs: Maximum number of logs to retain in memory
        """
        self._logs: deque = deque(maxlen=max_logs)

    def log_request(self, method: str, path: str) -> str:
        """
        Log an incoming request.

        Args:
            method: HTTP method
            path: Request path, without the query string

        Returns:
            Log ID for correlating with response
        """
        log_id = str(uuid.uuid4())[:8]

        self._logs.append({
            "id": log_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "method": method,
            "path": path,
            "status": "pending",
            "status_code": None,
            "response_time_ms": None,
            "error": None,
        })
        return log_id

    def log_response(
        self,
        log_id: str,
        status_code: Optional[int] = None,
        error: Optional[str] = None,
    ) -> None:
        """
        Update a log entry with response info.

        Args:
            log_id: The log ID from log_request
            status_code: HTTP status sent back, None if the handler raised
            error: Error message if failed
        """
        for log in reversed(self._logs):
            if log["id"] == log_id:
                request_time = datetime.fromisoformat(log["timestamp"])
                response_time = datetime.now(timezone.utc)
                log["response_time_ms"] = int(
                    (response_time - request_time).total_seconds() * 1000
                )
                log["status_code"] = status_code
                ok = status_code is not None and status_code < 400
                log["status"] = "success" if ok else "error"
                if error:
                    log["error"] = error
                break

    def get_logs(self, limit: int = 100) -> list[dict]:
        """
        Get recent logs.

        Args:
            limit: Maximum number of logs to return

        Returns:
            List of log entries, most recent first
        """
        logs = list(self._logs)
        logs.reverse()
        return logs[:limit]

    def clear_logs(self) -> None:
        """Clear all logs."""
        self._logs.clear()


request_logger = RequestLogger()
