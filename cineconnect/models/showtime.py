from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from cineconnect.models.movie import Movie
from cineconnect.models.room import Room
from cineconnect.models.seat import Seat
from cineconnect.utils.formatting import short_time, to_decimal, to_int


@dataclass(frozen=True)
class Showtime:
    id: str
    movie_id: str = ""
    room_id: str = ""
    date: str = ""
    time: str = ""
    price: Optional[Decimal] = None
    ticket_prices: Optional[dict] = None
    movie: Optional[Movie] = None
    room: Optional[Room] = None
    seats: tuple = field(default_factory=tuple)
    available_seats: Optional[int] = None
    total_seats: Optional[int] = None
    booked_seats: Optional[int] = None
    status: str = "scheduled"

    @property
    def starts_at(self):
        if not self.date:
            return None
        clock = short_time(self.time) or "00:00"
        try:
            return datetime.strptime(f"{self.date} {clock}", "%Y-%m-%d %H:%M")
        except ValueError:
            return None

    @property
    def label(self):
        return f"{self.date} {short_time(self.time)}".strip()

    @property
    def movie_title(self):
        return self.movie.title if self.movie else ""

    @property
    def room_name(self):
        return self.room.name if self.room else ""

    @classmethod
    def from_api(cls, data):
        movie = data.get("movie")
        room = data.get("room")
        info = data.get("booking_info") or {}
        total = info.get("total_seats", data.get("total_seats"))
        available = info.get("available_seats", data.get("available_seats"))
        booked = info.get("booked_seats")
        if booked is None and total is not None and available is not None:
            booked = to_int(total) - to_int(available)
        return cls(
            id=str(data.get("id", "")),
            movie_id=str(data.get("movie_id") or (movie or {}).get("id") or ""),
            room_id=str(data.get("room_id") or (room or {}).get("id") or ""),
            date=data.get("date") or "",
            time=data.get("time") or "",
            price=to_decimal(data.get("price")),
            ticket_prices=data.get("ticket_prices") or None,
            movie=Movie.from_api(movie) if movie else None,
            room=Room.from_api(room) if room else None,
            seats=tuple(Seat.from_api(s) for s in data.get("seats") or []),
            available_seats=None if available is None else to_int(available),
            total_seats=None if total is None else to_int(total),
            booked_seats=None if booked is None else to_int(booked),
            status=data.get("status") or "scheduled",
        )
