from uuid import UUID
from typing import Optional
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import get_db
from app.schemas.time_slot import Slot, SlotListResponse
from app.schemas.venue import Court
from app.services import court_directory
from app.services.availability import compute_slots

router = APIRouter(prefix="/courts", tags=["Courts"])


# ---------------------------------------------------------------------------
# GET /courts/{court_id}/slots: bookable slots for one day
# ---------------------------------------------------------------------------


@router.get("/{court_id}/slots", response_model=SlotListResponse)
def list_court_slots(
    court_id: UUID,
    slot_date: date = Query(..., alias="date", description="Date (YYYY-MM-DD)"),
    duration: Optional[int] = Query(None, description="Slot length in minutes (default 60)"),
    db: Session = Depends(get_db),
):
    """
    Candidate slots for the court on `date`, in order, each flagged `available`.
    A closed day returns an empty list.
    """
    slots = compute_slots(db, court_id, slot_date, duration)
    return SlotListResponse(
        court_id=court_id,
        date=slot_date,
        duration=duration or settings.DEFAULT_SLOT_DURATION_MINUTES,
        slots=[Slot.model_validate(s) for s in slots],
    )


# ---------------------------------------------------------------------------
# GET /courts/{court_id}: court with weekly schedule
# ---------------------------------------------------------------------------


@router.get("/{court_id}", response_model=Court)
def get_court(court_id: UUID, db: Session = Depends(get_db)):
    return court_directory.serialize_court(court_directory.get_court(db, court_id))
