from dataclasses import dataclass

from cineconnect.utils.formatting import to_int

SEAT_CATEGORIES = ("standard", "premium", "vip")


@dataclass(frozen=True)
class Seat:
    id: str
    row: str
    number: int
    category: str = "standard"
    status: str = "available"
    is_available: bool = True

    @property
    def label(self):
        return f"{self.row}{self.number}"

    @property
    def out_of_service(self):
        """Unsellable for every showtime, whatever the reservations say."""
        return self.status == "maintenance" or not self.is_available

    @classmethod
    def from_api(cls, data):
        return cls(
            id=str(data.get("id", "")),
            row=str(data.get("row") or ""),
            number=to_int(data.get("number")),
            category=str(data.get("type") or data.get("category") or "standard").lower(),
            status=data.get("status") or "available",
            is_available=data.get("is_available", True) is not False,
        )
