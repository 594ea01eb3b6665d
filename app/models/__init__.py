from app.models.user import User, UserRole
from app.models.venue import Venue, VenueType
from app.models.court import Court, CourtDaySchedule, CourtOpenInterval, CourtPeakWindow, CourtType, SportType, Weekday
from app.models.booking import Booking, BookingStatus, PaymentStatus, ALLOWED_TRANSITIONS
from app.models.review import Review
