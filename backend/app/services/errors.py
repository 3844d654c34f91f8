"""API error kinds rendered as ``{"error": message}`` responses.

Only the public ``message`` ever reaches the client. Causes from the storage
layer are chained with ``raise ... from exc`` and logged, never rendered.
"""
from __future__ import annotations


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(ApiError):
    status_code = 400


class UnauthenticatedError(ApiError):
    status_code = 401


class NotFoundError(ApiError):
    """Resource absent or not visible to the caller.

    Both cases share this one kind so a response never reveals that another
    user's resource exists.
    """

    status_code = 404


class ConflictError(ApiError):
    status_code = 409


class InternalError(ApiError):
    status_code = 500
