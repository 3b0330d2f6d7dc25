import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from cineconnect.utils.errors import ValidationError
from cineconnect.utils.formatting import to_decimal

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


@dataclass(frozen=True)
class ScheduleRequest:
    movie_id: str
    room_id: str
    start_date: date
    end_date: date
    times: tuple
    excluded_days: tuple = field(default_factory=tuple)
    price_override: Optional[Decimal] = None

    def to_payload(self):
        payload = {
            "movie_id": self.movie_id,
            "room_id": self.room_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "times": list(self.times),
            "excluded_days": list(self.excluded_days),
        }
        if self.price_override is not None:
            payload["price_override"] = float(self.price_override)
        return payload


def _parse_date(value, label):
    try:
        return date.fromisoformat(value or "")
    except ValueError:
        raise ValidationError(f"{label} must be a date in YYYY-MM-DD format.")


def parse_schedule_form(form):
    """Build a ScheduleRequest from the batch-scheduling form.

    ``times`` is a comma or whitespace separated list of HH:MM values;
    ``excluded_days`` is a multi-value field of lowercase weekday names.
    """
    movie_id = (form.get("movie_id") or "").strip()
    room_id = (form.get("room_id") or "").strip()
    if not movie_id or not room_id:
        raise ValidationError("Choose a movie and a room.")

    start = _parse_date(form.get("start_date"), "Start date")
    end = _parse_date(form.get("end_date"), "End date")
    if end < start:
        raise ValidationError("The end date cannot be before the start date.")

    times = []
    for raw in re.split(r"[,\s]+", form.get("times") or ""):
        if not raw:
            continue
        if not TIME_RE.match(raw):
            raise ValidationError(f"'{raw}' is not a valid time (HH:MM).")
        if raw not in times:
            times.append(raw)
    if not times:
        raise ValidationError("Add at least one screening time.")

    if hasattr(form, "getlist"):
        excluded = form.getlist("excluded_days")
    else:
        excluded = form.get("excluded_days") or []
    unknown = [d for d in excluded if d not in WEEKDAYS]
    if unknown:
        raise ValidationError(f"Unknown weekday: {unknown[0]}.")

    price = None
    if form.get("price_override"):
        price = to_decimal(form.get("price_override"))
        if price is None or price <= 0:
            raise ValidationError("The price override must be a positive amount.")

    return ScheduleRequest(
        movie_id=movie_id,
        room_id=room_id,
        start_date=start,
        end_date=end,
        times=tuple(sorted(times)),
        excluded_days=tuple(d for d in WEEKDAYS if d in excluded),
        price_override=price,
    )


def preview_schedule(req):
    """(date, time) pairs the backend will be asked to create."""
    slots = []
    day = req.start_date
    while day <= req.end_date:
        if WEEKDAYS[day.weekday()] not in req.excluded_days:
            slots.extend((day, t) for t in req.times)
        day += timedelta(days=1)
    return slots
