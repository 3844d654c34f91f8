"""Input and ownership checks shared by every owner-scoped operation."""
from __future__ import annotations

from typing import Optional

from ..models.models import Thread
from .errors import BadRequestError, NotFoundError, UnauthenticatedError


def require_id(value: Optional[str], message: str) -> str:
    """Reject blank ids; otherwise return the value exactly as given.

    Lookups must match the stored id byte for byte, so no trimming here.
    """
    if value is None or not value.strip():
        raise BadRequestError(message)
    return value


def require_identity(caller_id: Optional[int]) -> int:
    if caller_id is None:
        raise UnauthenticatedError("Authentication required")
    return caller_id


def owned_or_not_found(thread: Thread | None, caller_id: int, message: str = "Thread not found") -> Thread:
    # Missing and foreign threads must be indistinguishable to the caller.
    if thread is None or thread.owner_user_id != caller_id:
        raise NotFoundError(message)
    return thread
