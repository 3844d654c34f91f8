"""SQLAlchemy-backed storage for threads and messages."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Depends
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..models.models import Message, MessageRole, Thread


def new_thread_id() -> str:
    return f"thread_{uuid.uuid4().hex[:24]}"


def new_message_id() -> str:
    return f"msg_{uuid.uuid4().hex[:24]}"


class ThreadStore:
    """Owner-scoped thread and message persistence on one ``AsyncSession``.

    Reads always refresh already-loaded rows, so a thread fetched after a
    concurrent writer committed reflects the committed state.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_thread(self, thread_id: str) -> Thread | None:
        result = await self.db.execute(
            select(Thread)
            .where(Thread.id == thread_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_thread_by_share_token(self, share_token: str) -> Thread | None:
        result = await self.db.execute(
            select(Thread)
            .where(Thread.share_token == share_token)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_threads_for_owner(self, owner_user_id: int) -> list[Thread]:
        result = await self.db.execute(
            select(Thread)
            .where(Thread.owner_user_id == owner_user_id)
            .order_by(Thread.updated_at.desc(), Thread.created_at.desc())
        )
        return list(result.scalars().all())

    async def update_thread_sharing(
        self,
        thread_id: str,
        *,
        is_shared: bool,
        share_token: str,
        shared_at: datetime,
    ) -> bool:
        """Conditionally mark a thread shared.

        A single UPDATE guarded on ``is_shared = false``: of any number of
        concurrent callers exactly one gets ``True``. ``False`` means the
        thread is missing or was already shared.
        """
        result = await self.db.execute(
            update(Thread)
            .where(Thread.id == thread_id, Thread.is_shared.is_(False))
            .values(is_shared=is_shared, share_token=share_token, shared_at=shared_at)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        return result.rowcount == 1

    async def get_messages(self, thread_id: str) -> list[Message]:
        result = await self.db.execute(
            select(Message)
            .where(Message.thread_id == thread_id)
            .order_by(Message.created_at.asc(), Message.seq.asc())
        )
        return list(result.scalars().all())

    async def create_thread(
        self,
        owner_user_id: int,
        title: Optional[str] = None,
        *,
        is_branched: bool = False,
        commit: bool = True,
    ) -> Thread:
        thread = Thread(
            id=new_thread_id(),
            owner_user_id=owner_user_id,
            title=title or "New Chat",
            is_branched=is_branched,
            is_shared=False,
        )
        self.db.add(thread)
        if commit:
            await self.db.commit()
            await self.db.refresh(thread)
        else:
            await self.db.flush()
        return thread

    async def add_message(
        self,
        thread_id: str,
        role: MessageRole,
        content: str,
        *,
        model: Optional[str] = None,
        attachments: Optional[list[dict[str, Any]]] = None,
        created_at: Optional[datetime] = None,
        commit: bool = True,
    ) -> Message:
        message = Message(
            id=new_message_id(),
            thread_id=thread_id,
            role=role,
            content=content,
            model=model,
            attachments=attachments,
        )
        if created_at is not None:
            message.created_at = created_at
        self.db.add(message)
        if commit:
            await self.touch_thread(thread_id)
            await self.db.commit()
            await self.db.refresh(message)
        return message

    async def touch_thread(self, thread_id: str):
        await self.db.execute(
            update(Thread)
            .where(Thread.id == thread_id)
            .values(updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )

    async def commit(self):
        await self.db.commit()

    async def rollback(self):
        await self.db.rollback()


def get_thread_store(db: AsyncSession = Depends(get_db)) -> ThreadStore:
    return ThreadStore(db)
