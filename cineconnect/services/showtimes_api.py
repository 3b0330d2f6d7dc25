import logging

from cineconnect.models import Seat, Showtime
from cineconnect.utils.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)


class ShowtimesApi:
    def __init__(self, client):
        self.client = client

    def list_showtimes(self, movie_id=None, room_id=None, date=None, time=None,
                       page=None, limit=None):
        data = self.client.get("/showtimes", params={
            "movieId": movie_id,
            "roomId": room_id,
            "date": date,
            "time": time,
            "page": page,
            "limit": limit,
        })
        showtimes = [Showtime.from_api(s) for s in data.get("showtimes") or []]
        return showtimes, data.get("pagination") or {}

    def get_showtime(self, showtime_id):
        data = self.client.get(f"/showtimes/{showtime_id}")
        return Showtime.from_api(data.get("showtime") or data)

    def seat_layout(self, showtime_id):
        """Seats of the room the showtime plays in."""
        data = self.client.get(f"/showtimes/{showtime_id}/seats")
        return [Seat.from_api(s) for s in data.get("seats") or []]

    def reserved_seat_ids(self, showtime_id):
        """Seat ids already sold for this showtime.

        Raises instead of returning an empty list when the answer is unusable;
        an empty list would mean every seat is free.
        """
        data = self.client.get("/booking-seats", params={"showtimeId": showtime_id})
        if not isinstance(data, list):
            logger.warning("reserved_seats_malformed showtime=%s type=%s",
                           showtime_id, type(data).__name__)
            raise ServiceUnavailableError("Seat reservations could not be read.")
        return {str(item["seat_id"]) for item in data
                if isinstance(item, dict) and item.get("seat_id") is not None}

    def create_showtime(self, payload):
        data = self.client.post("/showtimes", payload)
        return Showtime.from_api(data.get("showtime") or data)

    def update_showtime(self, showtime_id, payload):
        data = self.client.put(f"/showtimes/{showtime_id}", payload)
        return Showtime.from_api(data.get("showtime") or data)

    def delete_showtime(self, showtime_id):
        self.client.delete(f"/showtimes/{showtime_id}")

    def schedule(self, payload):
        """Batch-create showtimes. Returns (created, skipped) lists."""
        data = self.client.post("/showtimes/schedule", payload)
        created = [Showtime.from_api(s) for s in data.get("created") or []]
        return created, list(data.get("skipped") or [])
