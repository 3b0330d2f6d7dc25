from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from cineconnect.utils.formatting import short_time, to_decimal, to_float, to_int


def showtime_label(showtime):
    room = showtime.get("room") or {}
    return (
        f"{showtime.get('date', '')} {short_time(showtime.get('time'))}"
        f" • {room.get('name') or 'Unknown room'} ({room.get('location') or 'Unknown location'})"
    )


@dataclass(frozen=True)
class Movie:
    id: str
    title: str
    genre: str = ""
    duration: int = 0
    rating: float = 0.0
    poster: str = ""
    description: str = ""
    price: Optional[Decimal] = None
    release_date: str = ""
    status: str = "active"
    showtimes: tuple = field(default_factory=tuple)

    @property
    def is_active(self):
        return self.status == "active"

    @classmethod
    def from_api(cls, data):
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title") or "",
            genre=data.get("genre") or "",
            duration=to_int(data.get("duration")),
            rating=to_float(data.get("rating")),
            poster=data.get("poster") or "",
            description=data.get("description") or "",
            price=to_decimal(data.get("price")),
            release_date=data.get("release_date") or data.get("releaseDate") or "",
            status=data.get("status") or "active",
            showtimes=tuple(
                s if isinstance(s, str) else showtime_label(s)
                for s in data.get("showtimes") or []
            ),
        )
