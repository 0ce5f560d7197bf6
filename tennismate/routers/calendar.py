"""Personal calendar API routes — reads the per-user event mirrors."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tennismate.database import get_db
from tennismate.models.calendar_entry import CalendarEntry
from tennismate.schemas.calendar import CalendarEntryOut

router = APIRouter()


@router.get("/{user_id}", response_model=list[CalendarEntryOut])
def get_calendar(user_id: str, db: Session = Depends(get_db)):
    """List the events mirrored into a user's calendar, soonest first."""
    return (
        db.query(CalendarEntry)
        .filter(CalendarEntry.owner_id == user_id)
        .order_by(CalendarEntry.start_time_utc)
        .all()
    )
