from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Literal, Optional
from datetime import datetime
from ..models.models import MessageRole


class CamelModel(BaseModel):
    """Wire shape uses camelCase; Python code uses snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Auth schemas ---

class UserRegisterRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=8, max_length=128)


class UserLoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    email: str
    created_at: datetime


class AuthStatusResponse(BaseModel):
    user: UserResponse


# --- Thread schemas ---

class ThreadCreate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=200)


class MessageCreate(BaseModel):
    role: MessageRole
    content: str
    model: Optional[str] = None
    attachments: Optional[list[dict[str, Any]]] = None


class MessageResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    thread_id: str
    role: MessageRole
    content: str
    model: Optional[str]
    created_at: datetime


class ThreadResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    title: str
    is_branched: bool
    is_shared: bool
    shared_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class ThreadDetail(ThreadResponse):
    messages: list[MessageResponse] = []


# --- Share schemas ---

class CreateShareRequest(CamelModel):
    # Optional so a missing id is reported as 400 rather than a 422.
    thread_id: Optional[str] = None


class CreateShareResponse(CamelModel):
    success: Literal[True] = True
    share_token: str
    share_url: str


class ShareStatusResponse(CamelModel):
    is_shared: bool
    share_token: Optional[str] = None
    share_url: Optional[str] = None


class BranchShareRequest(CamelModel):
    share_id: Optional[str] = None
    title: Optional[str] = Field(default=None, max_length=200)


class BranchShareResponse(CamelModel):
    success: Literal[True] = True
    thread_id: str
    title: str


class SharedThread(CamelModel):
    """Public thread fields; carries no owner id and no share token."""
    id: str
    title: str
    created_at: Optional[str]
    shared_at: Optional[str]
    is_shared: Literal[True] = True


class SharedMessage(CamelModel):
    id: str
    role: str
    content: str
    created_at: Optional[str]
    model: Optional[str] = None
    attachments: list[Any] = []


class SharedThreadView(CamelModel):
    thread: SharedThread
    messages: list[SharedMessage] = []


class SharedThreadResponse(SharedThreadView):
    success: Literal[True] = True


class ErrorResponse(BaseModel):
    error: str
