"""JoinRequest ORM model — one participation intent per (event, user)."""
import uuid
import enum
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.sql import func
from tennismate.database import Base


class JoinRequestStatus(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    declined = "declined"
    left = "left"


# Host view ordering
STATUS_ORDER = {
    JoinRequestStatus.pending: 0,
    JoinRequestStatus.accepted: 1,
    JoinRequestStatus.left: 2,
    JoinRequestStatus.declined: 3,
}


class JoinRequest(Base):
    __tablename__ = "join_requests"

    request_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    status = Column(SAEnum(JoinRequestStatus), nullable=False, default=JoinRequestStatus.pending)
    host_notified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_join_request_event_user"),)
