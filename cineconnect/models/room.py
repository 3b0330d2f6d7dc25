from dataclasses import dataclass, field

from cineconnect.models.seat import Seat
from cineconnect.utils.formatting import to_int

ROOM_STATUSES = ("active", "maintenance", "inactive")
ROOM_TYPES = ("Estándar", "Premium", "VIP", "IMAX", "4DX")


@dataclass(frozen=True)
class Room:
    id: str
    name: str
    capacity: int = 0
    type: str = ""
    status: str = "active"
    location: str = ""
    seats: tuple = field(default_factory=tuple)

    @property
    def is_active(self):
        return self.status == "active"

    @classmethod
    def from_api(cls, data):
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name") or "",
            capacity=to_int(data.get("capacity")),
            type=data.get("type") or "",
            status=data.get("status") or "active",
            location=data.get("location") or "",
            seats=tuple(Seat.from_api(s) for s in data.get("seats") or []),
        )
