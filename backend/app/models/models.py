from sqlalchemy import Boolean, Column, Integer, String, Text, DateTime, ForeignKey, Enum as SAEnum, JSON
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
import enum

from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MessageRole(str, enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    threads = relationship("Thread", back_populates="owner")


class Thread(Base):
    __tablename__ = "threads"

    id = Column(String(64), primary_key=True)
    owner_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False, default="New Chat")
    is_branched = Column(Boolean, nullable=False, default=False)
    # share_token is set iff is_shared is true
    is_shared = Column(Boolean, nullable=False, default=False)
    share_token = Column(String(64), nullable=True, unique=True, index=True)
    shared_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    owner = relationship("User", back_populates="threads")
    messages = relationship(
        "Message",
        back_populates="thread",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )


class Message(Base):
    __tablename__ = "messages"

    # Insertion order, used to break created_at ties.
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False, unique=True)
    thread_id = Column(String(64), ForeignKey("threads.id"), nullable=False, index=True)
    role = Column(SAEnum(MessageRole), nullable=False)
    content = Column(Text, nullable=False, default="")
    model = Column(String(100), nullable=True)
    attachments = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=_utcnow)

    thread = relationship("Thread", back_populates="messages")
