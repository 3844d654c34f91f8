"""Tests for Pydantic schemas validation."""
import sys
import os
import pytest
from pydantic import ValidationError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from backend.app.schemas.schemas import (
    BranchShareRequest,
    CreateShareRequest,
    CreateShareResponse,
    MessageCreate,
    SharedMessage,
    SharedThread,
    SharedThreadResponse,
    ThreadCreate,
    UserRegisterRequest,
)
from backend.app.models.models import MessageRole


class TestCreateShareRequest:
    def test_camel_case_input(self):
        assert CreateShareRequest.model_validate({"threadId": "t1"}).thread_id == "t1"

    def test_snake_case_input(self):
        assert CreateShareRequest(thread_id="t1").thread_id == "t1"

    def test_missing_id_allowed(self):
        assert CreateShareRequest.model_validate({}).thread_id is None


class TestBranchShareRequest:
    def test_fields(self):
        req = BranchShareRequest.model_validate({"shareId": "share_x", "title": "Copy"})
        assert req.share_id == "share_x"
        assert req.title == "Copy"

    def test_title_too_long(self):
        with pytest.raises(ValidationError):
            BranchShareRequest(share_id="s", title="x" * 201)


class TestShareResponses:
    def test_create_response_wire_shape(self):
        res = CreateShareResponse(share_token="share_1", share_url="http://x/share/share_1")
        assert res.model_dump(by_alias=True) == {
            "success": True,
            "shareToken": "share_1",
            "shareUrl": "http://x/share/share_1",
        }

    def test_shared_thread_is_always_shared(self):
        thread = SharedThread(id="t1", title="T", created_at="a", shared_at="b")
        assert thread.model_dump(by_alias=True) == {
            "id": "t1",
            "title": "T",
            "createdAt": "a",
            "sharedAt": "b",
            "isShared": True,
        }
        with pytest.raises(ValidationError):
            SharedThread(id="t1", title="T", created_at="a", shared_at="b", is_shared=False)

    def test_shared_message_attachments_default_empty(self):
        msg = SharedMessage(id="m1", role="user", content="hi", created_at="a")
        assert msg.attachments == []
        assert msg.model is None

    def test_shared_thread_response(self):
        res = SharedThreadResponse(thread=SharedThread(id="t1", title="T", created_at=None, shared_at=None))
        data = res.model_dump(by_alias=True)
        assert data["success"] is True
        assert data["messages"] == []


class TestThreadSchemas:
    def test_thread_create_title_optional(self):
        assert ThreadCreate().title is None

    def test_message_create_valid(self):
        msg = MessageCreate(role="assistant", content="x", model="gpt-4o")
        assert msg.role == MessageRole.ASSISTANT
        assert msg.attachments is None

    def test_message_create_invalid_role(self):
        with pytest.raises(ValidationError):
            MessageCreate(role="narrator", content="x")

    def test_message_create_missing_content(self):
        with pytest.raises(ValidationError):
            MessageCreate(role="user")


class TestUserRegisterRequest:
    def test_short_password_fails(self):
        with pytest.raises(ValidationError):
            UserRegisterRequest(email="a@b.c", password="short")
