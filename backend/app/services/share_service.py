"""Share issuance and public resolution of shared threads.

``ShareIssuer`` turns a private thread into a publicly resolvable one for its
owner. ``ShareResolver`` maps a share token to a sanitized, read-only view of
the thread as it is right now (no snapshot is taken at share time). The view
never carries the owner's id or the share token itself.
"""
from __future__ import annotations

import json
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from ..config import get_settings
from ..models.models import Message, Thread
from ..schemas.schemas import SharedMessage, SharedThread, SharedThreadView
from .access import owned_or_not_found, require_id, require_identity
from .errors import NotFoundError
from .thread_store import ThreadStore

logger = logging.getLogger(__name__)

SHARE_TOKEN_BYTES = 16
TOKEN_LOG_PREFIX = 12
SHARED_THREAD_NOT_FOUND = "Shared thread not found"


def generate_share_token(prefix: Optional[str] = None) -> str:
    """128 random bits as hex, prefixed so tokens are recognizable."""
    if prefix is None:
        prefix = get_settings().share_token_prefix
    return f"{prefix}{secrets.token_hex(SHARE_TOKEN_BYTES)}"


def build_share_url(share_token: str, base_url: Optional[str] = None) -> str:
    if base_url is None:
        base_url = get_settings().app_url
    return f"{base_url.rstrip('/')}/share/{share_token}"


def redact_token(token: Optional[str]) -> str:
    if not token or len(token) <= TOKEN_LOG_PREFIX:
        return "<redacted>"
    return f"{token[:TOKEN_LOG_PREFIX]}..."


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 UTC with millisecond precision, e.g. ``2025-01-02T03:04:05.678Z``.

    Naive values (SQLite drops tzinfo) are taken as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def load_attachments(raw: Any) -> list[Any]:
    # Older rows may hold the list serialized as a JSON string.
    if not raw:
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Dropping unparseable attachments value")
            return []
    return list(raw) if isinstance(raw, list) else []


@dataclass(frozen=True)
class ShareResult:
    share_token: str
    share_url: str


@dataclass(frozen=True)
class ShareStatus:
    is_shared: bool
    share_token: Optional[str]
    share_url: Optional[str]


@dataclass(frozen=True)
class BranchResult:
    thread_id: str
    title: str


class ShareIssuer:
    def __init__(
        self,
        store: ThreadStore,
        token_factory: Callable[[], str] = generate_share_token,
        base_url: Optional[str] = None,
    ):
        self.store = store
        self.token_factory = token_factory
        self.base_url = base_url

    def _result(self, share_token: str) -> ShareResult:
        return ShareResult(share_token, build_share_url(share_token, self.base_url))

    async def create_share(self, thread_id: Optional[str], caller_id: Optional[int]) -> ShareResult:
        """Share ``thread_id`` on behalf of its owner.

        Idempotent: an already shared thread returns its existing token and
        nothing is written. Raises ``BadRequestError``, ``UnauthenticatedError``
        or ``NotFoundError`` (missing and foreign threads alike).
        """
        thread_id = require_id(thread_id, "Thread ID is required")
        caller_id = require_identity(caller_id)
        thread = owned_or_not_found(await self.store.get_thread(thread_id), caller_id)

        if thread.is_shared and thread.share_token:
            return self._result(thread.share_token)

        token = self.token_factory()
        won = await self.store.update_thread_sharing(
            thread_id,
            is_shared=True,
            share_token=token,
            shared_at=datetime.now(timezone.utc),
        )
        if won:
            logger.info("Thread %s shared as %s", thread_id, redact_token(token))
            return self._result(token)

        # A concurrent request shared it first; hand back the token that won.
        current = await self.store.get_thread(thread_id)
        if current is None or not current.share_token:
            raise NotFoundError("Thread not found")
        logger.info("Thread %s was shared concurrently, reusing %s", thread_id, redact_token(current.share_token))
        return self._result(current.share_token)

    async def get_share_status(self, thread_id: Optional[str], caller_id: Optional[int]) -> ShareStatus:
        thread_id = require_id(thread_id, "Thread ID is required")
        caller_id = require_identity(caller_id)
        thread = owned_or_not_found(await self.store.get_thread(thread_id), caller_id)
        if not (thread.is_shared and thread.share_token):
            return ShareStatus(False, None, None)
        result = self._result(thread.share_token)
        return ShareStatus(True, result.share_token, result.share_url)


class ShareResolver:
    def __init__(self, store: ThreadStore):
        self.store = store

    async def _shared_thread(self, share_token: Optional[str]) -> Thread:
        share_token = require_id(share_token, "Share ID is required")
        thread = await self.store.get_thread_by_share_token(share_token)
        # The flag is checked too so a token left behind on an unshared
        # thread never resolves.
        if thread is None or not thread.is_shared:
            raise NotFoundError(SHARED_THREAD_NOT_FOUND)
        return thread

    async def resolve_share(self, share_token: Optional[str]) -> SharedThreadView:
        thread = await self._shared_thread(share_token)
        messages = await self.store.get_messages(thread.id)
        return SharedThreadView(
            thread=SharedThread(
                id=thread.id,
                title=thread.title,
                created_at=format_timestamp(thread.created_at),
                shared_at=format_timestamp(thread.shared_at),
            ),
            messages=[_project_message(m) for m in messages],
        )

    async def branch_share(
        self,
        share_token: Optional[str],
        caller_id: Optional[int],
        title: Optional[str] = None,
    ) -> BranchResult:
        """Copy a shared thread's current messages into a new private thread
        owned by the caller. The shared thread itself is left untouched.
        """
        share_token = require_id(share_token, "Share ID is required")
        caller_id = require_identity(caller_id)
        source = await self._shared_thread(share_token)
        messages = await self.store.get_messages(source.id)

        branch_title = (title or "").strip() or f"{source.title} (Branched)"
        branch = await self.store.create_thread(caller_id, branch_title, is_branched=True, commit=False)
        for msg in messages:
            await self.store.add_message(
                branch.id,
                msg.role,
                msg.content,
                model=msg.model,
                attachments=load_attachments(msg.attachments) or None,
                created_at=msg.created_at,
                commit=False,
            )
        await self.store.commit()
        logger.info(
            "Branched %s into thread %s for user %s (%d messages)",
            redact_token(share_token), branch.id, caller_id, len(messages),
        )
        return BranchResult(branch.id, branch_title)


def _project_message(message: Message) -> SharedMessage:
    return SharedMessage(
        id=message.id,
        role=message.role.value,
        content=message.content or "",
        created_at=format_timestamp(message.created_at),
        model=message.model,
        attachments=load_attachments(message.attachments),
    )
