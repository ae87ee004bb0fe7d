from cinebook.models.user import User, MembershipTier
from cinebook.models.catalog import Movie, Cinema
from cinebook.models.showtime import Showtime, ShowFormat
from cinebook.models.booking import Booking, BookingStatus, SeatClaim, LIVE_STATUSES
