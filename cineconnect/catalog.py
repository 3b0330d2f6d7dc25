"""Filters and option lists computed from fetched movie/showtime/room snapshots.

Everything here is a pure function of its arguments; nothing is cached, so the
option lists always reflect the snapshot passed in.
"""
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ShowtimeFilters:
    search: str = ""
    room_type: str = ""
    location: str = ""
    date: str = ""
    time: str = ""

    @classmethod
    def from_args(cls, args):
        return cls(
            search=(args.get("search") or "").strip(),
            room_type=args.get("type") or "",
            location=args.get("location") or "",
            date=args.get("date") or "",
            time=args.get("time") or "",
        )


def _start_key(showtime):
    return showtime.starts_at or datetime.max


def sort_showtimes(showtimes):
    return sorted(showtimes, key=_start_key)


def filter_showtimes(showtimes, rooms, filters, now=None):
    """Upcoming showtimes in one of ``rooms`` that match ``filters``."""
    now = now or datetime.now()
    rooms_by_id = {r.id: r for r in rooms}
    search = filters.search.lower()
    result = []
    for st in sort_showtimes(showtimes):
        room = rooms_by_id.get(st.room_id)
        if room is None:
            continue
        if search and search not in room.name.lower() and search not in room.location.lower():
            continue
        if filters.room_type and room.type != filters.room_type:
            continue
        if filters.location and room.location != filters.location:
            continue
        if filters.date and st.date != filters.date:
            continue
        if filters.time and st.time != filters.time:
            continue
        if st.starts_at is None or st.starts_at <= now:
            continue
        result.append(st)
    return result


def available_room_types(rooms, showtimes):
    """Types of the rooms that have at least one showtime for this movie."""
    used = {st.room_id for st in showtimes}
    return sorted({r.type for r in rooms if r.id in used and r.type})


def available_locations(rooms):
    return sorted({r.location for r in rooms if r.location})


def available_dates(showtimes):
    return sorted({st.date for st in showtimes if st.date})


def available_times(showtimes):
    return sorted({st.time for st in showtimes if st.time})


def group_by_date(showtimes):
    grouped = OrderedDict()
    for st in sort_showtimes(showtimes):
        grouped.setdefault(st.date, []).append(st)
    return grouped


def filter_movies(movies, date=""):
    """Active movies with at least one showtime, optionally on ``date``."""
    return [
        m for m in movies
        if m.is_active
        and m.showtimes
        and (not date or any(label.startswith(date) for label in m.showtimes))
    ]


def genres_from_movies(movies):
    return sorted({m.genre for m in movies if m.genre})


def sort_movies_for_admin(movies):
    by_release = sorted(movies, key=lambda m: m.release_date or "", reverse=True)
    return sorted(by_release, key=lambda m: not m.is_active)
