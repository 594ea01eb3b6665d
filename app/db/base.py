from app.db.session import Base
from app.models.user import User
from app.models.venue import Venue
from app.models.court import Court, CourtDaySchedule, CourtOpenInterval, CourtPeakWindow
from app.models.booking import Booking
from app.models.review import Review
