"""Player ORM model — the identity the event lifecycle refers to."""
import uuid
from sqlalchemy import Column, String, Float, DateTime
from sqlalchemy.sql import func
from tennismate.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    display_name = Column(String(100), nullable=False, unique=True)
    email = Column(String(255), nullable=True)
    skill_level = Column(Float, nullable=True)  # NTRP-style rating
    default_timezone = Column(String(50), nullable=False, default="UTC")  # IANA tz
    created_at = Column(DateTime(timezone=True), server_default=func.now())
