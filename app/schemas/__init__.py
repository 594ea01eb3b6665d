from app.schemas.common import PaginatedResponse, ErrorResponse
from app.schemas.user import User, UserCreate, AdminCreate, UserSummary, Token
from app.schemas.venue import (
    Venue, VenueCreate, VenueSummary,
    Court, CourtCreate, CourtSummary, DaySchedule, PeakPricing, TimeRange,
)
from app.schemas.time_slot import Slot, SlotListResponse
from app.schemas.booking import (
    Booking, BookingCreate, BookingCancel, BookingStatusUpdate, VenueBooking,
    PaymentResult, Review, ReviewCreate,
)
