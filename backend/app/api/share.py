"""Share endpoints: owner-side creation, public read-only resolution, branching."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from ..schemas.schemas import (
    BranchShareRequest,
    BranchShareResponse,
    CreateShareRequest,
    CreateShareResponse,
    ErrorResponse,
    SharedThreadResponse,
)
from ..services.auth_service import get_current_user_id
from ..services.errors import ApiError, BadRequestError, InternalError
from ..services.share_service import ShareIssuer, ShareResolver, redact_token
from ..services.thread_store import ThreadStore, get_thread_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/share", tags=["share"])

_ERRORS = {code: {"model": ErrorResponse} for code in (400, 401, 404, 500)}


@router.post("/create", response_model=CreateShareResponse, responses=_ERRORS)
async def create_share_endpoint(
    data: Optional[CreateShareRequest] = None,
    store: ThreadStore = Depends(get_thread_store),
    caller_id: Optional[int] = Depends(get_current_user_id),
):
    thread_id = data.thread_id if data else None
    try:
        result = await ShareIssuer(store).create_share(thread_id, caller_id)
    except ApiError as e:
        logger.info("Share create rejected for thread %s: %s", thread_id, e.message)
        raise
    except SQLAlchemyError as e:
        await store.rollback()
        logger.exception("Share create failed for thread %s", thread_id)
        raise InternalError("Failed to create share") from e
    return CreateShareResponse(share_token=result.share_token, share_url=result.share_url)


@router.get("/", responses=_ERRORS, include_in_schema=False)
async def missing_share_id_endpoint():
    raise BadRequestError("Share ID is required")


@router.get("/{share_id}", response_model=SharedThreadResponse, responses=_ERRORS)
async def get_shared_thread_endpoint(share_id: str, store: ThreadStore = Depends(get_thread_store)):
    logger.info("Resolving share %s", redact_token(share_id))
    try:
        view = await ShareResolver(store).resolve_share(share_id)
    except ApiError as e:
        logger.info("Share %s not served: %s", redact_token(share_id), e.message)
        raise
    except SQLAlchemyError as e:
        logger.exception("Share lookup failed for %s", redact_token(share_id))
        raise InternalError("Failed to retrieve shared thread") from e
    logger.info(
        "Served share %s (thread %s, %d messages)",
        redact_token(share_id), view.thread.id, len(view.messages),
    )
    return SharedThreadResponse(thread=view.thread, messages=view.messages)


@router.post("/branch", response_model=BranchShareResponse, responses=_ERRORS)
async def branch_shared_thread_endpoint(
    data: Optional[BranchShareRequest] = None,
    store: ThreadStore = Depends(get_thread_store),
    caller_id: Optional[int] = Depends(get_current_user_id),
):
    share_id = data.share_id if data else None
    title = data.title if data else None
    try:
        result = await ShareResolver(store).branch_share(share_id, caller_id, title)
    except SQLAlchemyError as e:
        await store.rollback()
        logger.exception("Branch failed for share %s", redact_token(share_id))
        raise InternalError("Failed to branch shared thread") from e
    return BranchShareResponse(thread_id=result.thread_id, title=result.title)
