"""Custom exception hierarchy for sentry-lookup."""
from __future__ import annotations

from typing import Any, Dict, Optional


class SentryLookupError(Exception):
    """Base exception for all sentry-lookup errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


class ConfigurationError(SentryLookupError):
    """Required configuration is missing or invalid."""
    pass


class CacheError(SentryLookupError):
    """Base exception for project cache errors."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.path = path
        if path:
            self.context["path"] = path


class CacheReadError(CacheError):
    """Cache file is missing, unreadable or does not hold a project list."""
    pass


class CacheWriteError(CacheError):
    """Cache directory or file could not be written."""
    pass


class NetworkError(SentryLookupError):
    """Transport-level failure talking to the Sentry API."""

    def __init__(
        self,
        url: str,
        reason: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"Request to {url} failed: {reason}"
        super().__init__(message, context)
        self.url = url
        self.reason = reason


class ApiError(SentryLookupError):
    """Sentry API returned a non-2xx response.

    The message is the response body exactly as received; the status code
    is kept on the exception rather than folded into the message.
    """

    def __init__(self, status_code: int, body: str):
        super().__init__(body)
        self.status_code = status_code
        self.body = body


class ParseError(SentryLookupError):
    """Response body is not a JSON array of projects."""
    pass


class ProjectNotFoundError(SentryLookupError):
    """No project in the list has the requested id."""

    def __init__(self, project_id: str, context: Optional[Dict[str, Any]] = None):
        super().__init__("Project not found", context)
        self.project_id = project_id
        self.context["project_id"] = project_id
