from cinebook.db.session import Base
from cinebook.models.user import User
from cinebook.models.catalog import Movie, Cinema
from cinebook.models.showtime import Showtime
from cinebook.models.booking import Booking, SeatClaim
