from cinebook.schemas.common import PaginatedResponse, ErrorResponse, SeatsUnavailableError, InvalidTransitionError
from cinebook.schemas.user import User, UserCreate, AdminCreate, Token, MembershipInfo
from cinebook.schemas.showtime import Showtime, ShowtimeCreate, ShowtimeUpdate
from cinebook.schemas.seat import SeatMapResponse, SeatRow, SeatStatus, QuoteRequest, QuoteResponse
from cinebook.schemas.booking import Booking, BookingCreate, BookingCancelResponse
