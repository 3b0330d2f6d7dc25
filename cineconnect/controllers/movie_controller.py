# cineconnect/controllers/movie_controller.py
import logging

from flask import flash, redirect, render_template, request, url_for

from cineconnect.catalog import (
    ShowtimeFilters, available_dates, available_locations, available_room_types,
    available_times, filter_movies, filter_showtimes, genres_from_movies, group_by_date,
)
from cineconnect.extensions import api, cache
from cineconnect.utils.errors import ApiError

logger = logging.getLogger(__name__)

ALL_GENRES = "all"


@cache.memoize(timeout=600)
def fetch_genres():
    return api.movies.genres()


@cache.memoize(timeout=600)
def fetch_room_locations():
    return api.rooms.locations()


def movie_routes(app):
    @app.route("/")
    @app.route("/cartelera")
    def home():
        search = (request.args.get("search") or "").strip()
        genre = request.args.get("genre") or ALL_GENRES
        date = request.args.get("date") or ""

        movies = []
        try:
            movies, _ = api.movies.list_movies(
                search=search or None,
                genre=None if genre == ALL_GENRES else genre,
            )
        except ApiError as e:
            flash(e.message, "danger")

        try:
            genres = fetch_genres()
        except ApiError as e:
            logger.warning("genres_unavailable error=%s", e.message)
            genres = genres_from_movies(movies)

        return render_template(
            "home.html",
            movies=filter_movies(movies, date),
            genres=genres,
            search=search,
            genre=genre,
            date=date,
        )

    @app.route("/movie/<movie_id>")
    def movie_detail(movie_id):
        try:
            movie = api.movies.get_movie(movie_id)
        except ApiError as e:
            flash(e.message, "danger")
            return redirect(url_for("home"))

        filters = ShowtimeFilters.from_args(request.args)

        rooms = []
        try:
            rooms = [
                r for r in api.rooms.list_rooms(
                    search=filters.search or None,
                    type=filters.room_type or None,
                    location=filters.location or None,
                    status="active",
                )
                if r.is_active
            ]
        except ApiError as e:
            flash(e.message, "danger")

        showtimes = []
        try:
            showtimes, _ = api.showtimes.list_showtimes(movie_id=movie_id)
        except ApiError as e:
            flash(e.message, "danger")

        try:
            locations = sorted(fetch_room_locations())
        except ApiError as e:
            logger.warning("locations_unavailable error=%s", e.message)
            locations = available_locations(rooms)

        upcoming = filter_showtimes(showtimes, rooms, filters)
        return render_template(
            "movie_detail.html",
            movie=movie,
            filters=filters,
            showtimes_by_date=group_by_date(upcoming),
            rooms_by_id={r.id: r for r in rooms},
            room_types=available_room_types(rooms, showtimes),
            locations=locations,
            dates=available_dates(upcoming),
            times=available_times(upcoming),
        )
