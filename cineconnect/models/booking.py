from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from cineconnect.models.seat import Seat
from cineconnect.models.showtime import Showtime
from cineconnect.utils.formatting import to_decimal


@dataclass(frozen=True)
class BookingSeat:
    seat: Seat
    price: Optional[Decimal] = None

    @classmethod
    def from_api(cls, data):
        return cls(seat=Seat.from_api(data.get("seat") or {}), price=to_decimal(data.get("price")))


@dataclass(frozen=True)
class Booking:
    id: str
    transaction_id: str = ""
    showtime_id: str = ""
    total_price: Decimal = Decimal("0")
    status: str = "confirmed"
    payment_method: str = ""
    customer_email: str = ""
    receipt_url: str = ""
    purchase_date: str = ""
    showtime: Optional[Showtime] = None
    seats: tuple = field(default_factory=tuple)

    @property
    def seat_labels(self):
        return ", ".join(bs.seat.label for bs in self.seats)

    @classmethod
    def from_api(cls, data):
        showtime = data.get("showtime")
        return cls(
            id=str(data.get("id", "")),
            transaction_id=data.get("transaction_id") or "",
            showtime_id=str(data.get("showtime_id") or (showtime or {}).get("id") or ""),
            total_price=to_decimal(data.get("total_price"), Decimal("0")),
            status=data.get("status") or "confirmed",
            payment_method=data.get("payment_method") or "",
            customer_email=data.get("customer_email") or "",
            receipt_url=data.get("receipt_url") or "",
            purchase_date=data.get("purchase_date") or data.get("createdAt") or "",
            showtime=Showtime.from_api(showtime) if showtime else None,
            seats=tuple(BookingSeat.from_api(bs) for bs in data.get("bookingSeats") or []),
        )


@dataclass(frozen=True)
class Receipt:
    download_url: str
    filename: str = "receipt.pdf"
