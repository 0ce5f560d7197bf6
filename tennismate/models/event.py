"""Event and EventParticipant ORM models.

``spots_filled`` is denormalized from the participant rows so the capacity
check inside a transaction reads a single row. ``version`` is the mapper's
version counter: every UPDATE is issued as ``... WHERE version = :old`` and a
concurrent writer that lost the race gets ``StaleDataError``.
"""
import uuid
import enum
from sqlalchemy import (
    Column, String, DateTime, Integer, ForeignKey, CheckConstraint, Index, Enum as SAEnum,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from tennismate.database import Base


class EventType(str, enum.Enum):
    singles = "singles"
    doubles = "doubles"
    social = "social"


class EventStatus(str, enum.Enum):
    open = "open"
    full = "full"
    cancelled = "cancelled"
    completed = "completed"


CLOSED_STATUSES = (EventStatus.cancelled, EventStatus.completed)


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    host_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    title = Column(String(255), nullable=False)
    event_type = Column(SAEnum(EventType), nullable=False, default=EventType.singles)
    location = Column(String(500), nullable=False)
    start_time_utc = Column(DateTime(timezone=True), nullable=False)
    end_time_utc = Column(DateTime(timezone=True), nullable=False)
    duration_mins = Column(Integer, nullable=False, default=60)
    min_skill = Column(String(20), nullable=True)
    spots_total = Column(Integer, nullable=True)
    spots_filled = Column(Integer, nullable=False, default=0)
    status = Column(SAEnum(EventStatus), nullable=False, default=EventStatus.open)
    description = Column(String(300), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    participants = relationship(
        "EventParticipant",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventParticipant.joined_at",
    )

    __table_args__ = (
        CheckConstraint("spots_filled >= 0", name="check_spots_filled_non_negative"),
        CheckConstraint(
            "spots_total IS NULL OR spots_filled <= spots_total",
            name="check_spots_filled_lte_total",
        ),
        Index("ix_events_status_start", "status", "start_time_utc"),
    )

    __mapper_args__ = {"version_id_col": version}

    @property
    def participant_ids(self) -> list[str]:
        return [p.user_id for p in self.participants]

    @property
    def is_closed(self) -> bool:
        return self.status in CLOSED_STATUSES


class EventParticipant(Base):
    __tablename__ = "event_participants"

    event_id = Column(String(36), ForeignKey("events.event_id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.user_id"), primary_key=True)
    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    event = relationship("Event", back_populates="participants")
