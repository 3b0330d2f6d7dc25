from .seat import Seat, SEAT_CATEGORIES
from .room import Room
from .movie import Movie
from .showtime import Showtime
from .booking import Booking, BookingSeat, Receipt
from .user import User, ROLE_ADMIN, ROLE_CLIENT
