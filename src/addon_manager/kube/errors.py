"""Errors raised by the cluster resource API clients."""

from __future__ import annotations


class ApiError(Exception):
    """A request to the resource API was rejected or could not be completed."""

    def __init__(self, message: str, *, status: int | None = None, reason: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.reason = reason


class NotFound(ApiError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status=404, reason="NotFound")


class AlreadyExists(ApiError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status=409, reason="AlreadyExists")
