"""Pydantic schemas for Players."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, field_validator


class UserCreate(BaseModel):
    display_name: str
    email: Optional[str] = None
    skill_level: Optional[float] = None
    default_timezone: str = "UTC"


class UserUpdate(BaseModel):
    display_name: Optional[str] = None
    email: Optional[str] = None
    skill_level: Optional[float] = None
    default_timezone: Optional[str] = None

    @field_validator("display_name", "default_timezone")
    @classmethod
    def reject_null(cls, v: Optional[str]) -> str:
        # omitted means unchanged; an explicit null cannot clear a required column
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class UserOut(BaseModel):
    user_id: str
    display_name: str
    email: Optional[str] = None
    skill_level: Optional[float] = None
    default_timezone: str
    created_at: datetime

    model_config = {"from_attributes": True}
