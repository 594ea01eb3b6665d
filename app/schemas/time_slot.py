from typing import List
from pydantic import BaseModel, UUID4
from decimal import Decimal
from datetime import date


# One candidate slot as computed by the availability calculator
class Slot(BaseModel):
    start_time: str
    end_time: str
    available: bool
    price: Decimal
    duration: int

    class Config:
        from_attributes = True


# Response for GET /courts/{court_id}/slots
class SlotListResponse(BaseModel):
    court_id: UUID4
    date: date
    duration: int
    slots: List[Slot]
