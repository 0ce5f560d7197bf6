"""Conversation ORM model — the group chat attached to an event."""
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func
from tennismate.database import Base


def event_conversation_id(event_id: str) -> str:
    return f"event_{event_id}"


class Conversation(Base):
    __tablename__ = "conversations"

    conversation_id = Column(String(50), primary_key=True)
    event_id = Column(String(36), nullable=True, index=True)
    title = Column(String(255), nullable=False, default="Event Chat")
    participants = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
