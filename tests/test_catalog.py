from datetime import datetime

from cineconnect.catalog import (
    ShowtimeFilters, available_dates, available_locations, available_room_types,
    available_times, filter_movies, filter_showtimes, genres_from_movies, group_by_date,
    sort_movies_for_admin,
)
from cineconnect.models import Movie, Room, Showtime

NOW = datetime(2026, 10, 19, 18, 0)

ROOMS = [
    Room(id="r1", name="Sala 1", type="IMAX", location="Centro"),
    Room(id="r2", name="Sala 2", type="VIP", location="Norte"),
]

SHOWTIMES = [
    Showtime(id="past", room_id="r1", date="2026-10-19", time="17:00:00"),
    Showtime(id="late", room_id="r2", date="2026-10-20", time="21:00:00"),
    Showtime(id="soon", room_id="r1", date="2026-10-19", time="20:00:00"),
    Showtime(id="gone", room_id="r9", date="2026-10-21", time="20:00:00"),
]


def ids(showtimes):
    return [s.id for s in showtimes]


def test_past_and_roomless_showtimes_are_excluded():
    assert ids(filter_showtimes(SHOWTIMES, ROOMS, ShowtimeFilters(), NOW)) == ["soon", "late"]


def test_filters_combine():
    filters = ShowtimeFilters(location="Norte")
    assert ids(filter_showtimes(SHOWTIMES, ROOMS, filters, NOW)) == ["late"]

    filters = ShowtimeFilters(search="sala 1", date="2026-10-19")
    assert ids(filter_showtimes(SHOWTIMES, ROOMS, filters, NOW)) == ["soon"]

    filters = ShowtimeFilters(room_type="VIP", time="20:00:00")
    assert filter_showtimes(SHOWTIMES, ROOMS, filters, NOW) == []


def test_option_lists_follow_the_snapshot():
    upcoming = filter_showtimes(SHOWTIMES, ROOMS, ShowtimeFilters(), NOW)
    assert available_dates(upcoming) == ["2026-10-19", "2026-10-20"]
    assert available_times(upcoming) == ["20:00:00", "21:00:00"]
    assert available_room_types(ROOMS, SHOWTIMES) == ["IMAX", "VIP"]
    assert available_room_types(ROOMS, SHOWTIMES[:1]) == ["IMAX"]
    assert available_locations(ROOMS) == ["Centro", "Norte"]

    narrowed = filter_showtimes(SHOWTIMES, ROOMS, ShowtimeFilters(location="Centro"), NOW)
    assert available_dates(narrowed) == ["2026-10-19"]


def test_group_by_date_is_chronological():
    grouped = group_by_date(SHOWTIMES[:3])
    assert list(grouped) == ["2026-10-19", "2026-10-20"]
    assert ids(grouped["2026-10-19"]) == ["past", "soon"]


def test_filter_movies_keeps_active_with_showtimes():
    movies = [
        Movie(id="1", title="A", showtimes=("2026-10-20 19:00 • Sala 1 (Centro)",)),
        Movie(id="2", title="B", status="inactive", showtimes=("2026-10-20 19:00 • Sala 1 (Centro)",)),
        Movie(id="3", title="C"),
        Movie(id="4", title="D", showtimes=("2026-10-22 19:00 • Sala 2 (Norte)",)),
    ]
    assert [m.id for m in filter_movies(movies)] == ["1", "4"]
    assert [m.id for m in filter_movies(movies, "2026-10-22")] == ["4"]


def test_genres_and_admin_order():
    movies = [
        Movie(id="1", title="A", genre="Drama", release_date="2024-01-01", status="inactive"),
        Movie(id="2", title="B", genre="Acción", release_date="2023-01-01"),
        Movie(id="3", title="C", genre="Drama", release_date="2025-01-01"),
    ]
    assert genres_from_movies(movies) == ["Acción", "Drama"]
    assert [m.id for m in sort_movies_for_admin(movies)] == ["3", "2", "1"]
