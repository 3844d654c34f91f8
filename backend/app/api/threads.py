"""Owner-scoped thread routes."""
from fastapi import APIRouter, Depends

from ..models.models import User
from ..schemas.schemas import (
    MessageCreate,
    MessageResponse,
    ShareStatusResponse,
    ThreadCreate,
    ThreadDetail,
    ThreadResponse,
)
from ..services.access import owned_or_not_found
from ..services.auth_service import get_current_user
from ..services.share_service import ShareIssuer
from ..services.thread_store import ThreadStore, get_thread_store

router = APIRouter(prefix="/api/threads", tags=["threads"])


async def _get_owned_thread_or_404(store: ThreadStore, thread_id: str, user: User):
    return owned_or_not_found(await store.get_thread(thread_id), user.id)


@router.post("", response_model=ThreadResponse)
async def create_thread_endpoint(
    data: ThreadCreate,
    store: ThreadStore = Depends(get_thread_store),
    current_user: User = Depends(get_current_user),
):
    return await store.create_thread(current_user.id, data.title)


@router.get("", response_model=list[ThreadResponse])
async def list_threads_endpoint(
    store: ThreadStore = Depends(get_thread_store),
    current_user: User = Depends(get_current_user),
):
    return await store.list_threads_for_owner(current_user.id)


@router.get("/{thread_id}", response_model=ThreadDetail)
async def get_thread_endpoint(
    thread_id: str,
    store: ThreadStore = Depends(get_thread_store),
    current_user: User = Depends(get_current_user),
):
    thread = await _get_owned_thread_or_404(store, thread_id, current_user)
    messages = await store.get_messages(thread.id)
    return ThreadDetail(
        **ThreadResponse.model_validate(thread).model_dump(),
        messages=[MessageResponse.model_validate(m) for m in messages],
    )


@router.post("/{thread_id}/messages", response_model=MessageResponse)
async def add_message_endpoint(
    thread_id: str,
    data: MessageCreate,
    store: ThreadStore = Depends(get_thread_store),
    current_user: User = Depends(get_current_user),
):
    await _get_owned_thread_or_404(store, thread_id, current_user)
    return await store.add_message(
        thread_id,
        data.role,
        data.content,
        model=data.model,
        attachments=data.attachments,
    )


@router.get("/{thread_id}/share", response_model=ShareStatusResponse)
async def get_share_status_endpoint(
    thread_id: str,
    store: ThreadStore = Depends(get_thread_store),
    current_user: User = Depends(get_current_user),
):
    status = await ShareIssuer(store).get_share_status(thread_id, current_user.id)
    return ShareStatusResponse(
        is_shared=status.is_shared,
        share_token=status.share_token,
        share_url=status.share_url,
    )
