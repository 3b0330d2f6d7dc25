import logging

from cineconnect.models import Booking, Receipt
from cineconnect.utils.errors import RejectedError

logger = logging.getLogger(__name__)


class BookingsApi:
    def __init__(self, client):
        self.client = client

    def create_booking(self, payload):
        data = self.client.post("/bookings", payload)
        return Booking.from_api(data.get("booking") or data)

    def get_booking(self, booking_id):
        data = self.client.get(f"/bookings/{booking_id}")
        return Booking.from_api(data.get("booking") or data)

    def user_bookings(self, limit=50):
        data = self.client.get("/bookings/user", params={"limit": limit})
        bookings = []
        for raw in data.get("bookings") or []:
            raw = dict(raw, receipt_url=self.client.absolute_url(raw.get("receipt_url") or ""))
            bookings.append(Booking.from_api(raw))
        return bookings

    def receipt(self, booking_id):
        data = self.client.get(f"/bookings/{booking_id}/receipt")
        if not data.get("download_url"):
            logger.warning("receipt_missing booking=%s", booking_id)
            raise RejectedError("The receipt for this booking is not available yet.")
        return Receipt(
            download_url=self.client.absolute_url(data["download_url"]),
            filename=data.get("filename") or "receipt.pdf",
        )
