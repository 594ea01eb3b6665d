from typing import Optional, List, Dict
from pydantic import BaseModel, UUID4, Field, field_validator, model_validator
from decimal import Decimal
from datetime import datetime

from app.models.court import CourtType, SportType, Weekday
from app.models.venue import VenueType
from app.utils.timeslots import is_valid_hhmm


def _check_hhmm(value: str) -> str:
    if not is_valid_hhmm(value):
        raise ValueError("Invalid time format. Use HH:MM format.")
    return value


# "HH:MM"-"HH:MM" range used for court hours and peak windows
class TimeRange(BaseModel):
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_times(cls, v):
        return _check_hhmm(v)

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self


class DaySchedule(BaseModel):
    is_open: bool = True
    hours: List[TimeRange] = []


class PeakPricing(BaseModel):
    enabled: bool = False
    price_per_hour: Optional[Decimal] = Field(None, ge=0)
    hours: List[TimeRange] = []


# Court Schemas
class CourtBase(BaseModel):
    name: str
    sport: SportType
    court_type: CourtType = CourtType.indoor
    price_per_hour: Decimal = Field(..., ge=0)


class CourtCreate(CourtBase):
    peak_pricing: PeakPricing = PeakPricing()
    # Weekdays left out are stored open with no hours, i.e. on venue hours
    availability: Dict[Weekday, DaySchedule] = {}


class Court(CourtBase):
    id: UUID4
    venue_id: UUID4
    is_active: bool
    peak_pricing: PeakPricing
    availability: Dict[Weekday, DaySchedule]


# Compact court for nested responses (booking)
class CourtSummary(BaseModel):
    id: UUID4
    name: str
    sport: SportType

    class Config:
        from_attributes = True


# Venue Schemas
class VenueBase(BaseModel):
    name: str
    description: Optional[str] = None
    venue_type: VenueType
    address: Optional[str] = None
    city: str
    contact_phone: Optional[str] = None
    open_time: str = "06:00"
    close_time: str = "22:00"

    @field_validator("open_time", "close_time")
    @classmethod
    def validate_times(cls, v):
        return _check_hhmm(v)


class VenueCreate(VenueBase):
    pass


class Venue(VenueBase):
    id: UUID4
    owner_id: UUID4
    is_approved: bool
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


# Compact venue for nested responses (booking)
class VenueSummary(BaseModel):
    id: UUID4
    name: str
    city: str

    class Config:
        from_attributes = True
