# cineconnect/controllers/admin_controller.py
import logging
from io import BytesIO

from flask import flash, redirect, render_template, request, send_file, url_for
from werkzeug.utils import secure_filename

from cineconnect.auth import role_required
from cineconnect.catalog import sort_movies_for_admin, sort_showtimes
from cineconnect.extensions import api
from cineconnect.models import ROLE_ADMIN
from cineconnect.models.room import ROOM_STATUSES, ROOM_TYPES
from cineconnect.occupancy import occupancy_band, showtime_occupancy
from cineconnect.scheduling import WEEKDAYS, parse_schedule_form, preview_schedule
from cineconnect.services.dashboard_api import EXPORT_FORMATS, PERIODS
from cineconnect.utils.errors import ApiError, ValidationError
from cineconnect.utils.formatting import to_decimal, to_float, to_int

logger = logging.getLogger(__name__)

MOVIE_STATUSES = ("active", "inactive")
SHOWTIME_STATUSES = ("scheduled", "cancelled", "finished")


def _required(form, name, label):
    value = (form.get(name) or "").strip()
    if not value:
        raise ValidationError(f"{label} is required.")
    return value


def _positive_price(form, name="price"):
    price = to_decimal(form.get(name))
    if price is None or price <= 0:
        raise ValidationError("The price must be a positive amount.")
    return float(price)


def movie_payload(form):
    duration = to_int(form.get("duration"), 0)
    if duration <= 0:
        raise ValidationError("The duration must be a positive number of minutes.")
    rating = to_float(form.get("rating"), -1)
    if not 0 <= rating <= 10:
        raise ValidationError("The rating must be between 0 and 10.")
    status = form.get("status") or "active"
    if status not in MOVIE_STATUSES:
        raise ValidationError(f"Unknown status: {status}.")
    return {
        "title": _required(form, "title", "Title"),
        "genre": _required(form, "genre", "Genre"),
        "duration": duration,
        "rating": rating,
        "description": (form.get("description") or "").strip(),
        "price": _positive_price(form),
        "release_date": _required(form, "release_date", "Release date"),
        "poster": (form.get("poster") or "").strip() or "/placeholder.svg",
        "status": status,
    }


def room_payload(form):
    capacity = to_int(form.get("capacity"), 0)
    if capacity <= 0:
        raise ValidationError("The capacity must be a positive number of seats.")
    room_type = form.get("type") or ""
    if room_type not in ROOM_TYPES:
        raise ValidationError("Choose a room type.")
    status = form.get("status") or "active"
    if status not in ROOM_STATUSES:
        raise ValidationError(f"Unknown status: {status}.")
    return {
        "name": _required(form, "name", "Name"),
        "capacity": capacity,
        "type": room_type,
        "status": status,
        "location": _required(form, "location", "Location"),
    }


def showtime_payload(form):
    payload = {
        "movie_id": _required(form, "movie_id", "Movie"),
        "room_id": _required(form, "room_id", "Room"),
        "date": _required(form, "date", "Date"),
        "time": _required(form, "time", "Time"),
        "price": _positive_price(form),
    }
    status = form.get("status")
    if status:
        if status not in SHOWTIME_STATUSES:
            raise ValidationError(f"Unknown status: {status}.")
        payload["status"] = status
    return payload


def _form_options():
    """Movies and rooms for the showtime selects; failures leave them empty."""
    movies, rooms = [], []
    try:
        movies, _ = api.movies.list_movies(limit=100)
        rooms = api.rooms.list_rooms()
    except ApiError as e:
        flash(e.message, "danger")
    return sort_movies_for_admin(movies), rooms


def admin_routes(app):
    @app.route("/admin")
    @role_required(ROLE_ADMIN)
    def admin_index():
        return redirect(url_for("admin_dashboard"))

    # -------------------- Reports --------------------
    @app.route("/admin/dashboard")
    @role_required(ROLE_ADMIN)
    def admin_dashboard():
        period = request.args.get("period") or "week"
        if period not in PERIODS:
            period = "week"
        reports = {
            "stats": (api.dashboard.stats, {}),
            "sales": (api.dashboard.sales_by_movie, []),
            "trends": (api.dashboard.daily_trends, []),
            "genres": (api.dashboard.genre_distribution, []),
        }
        results = {}
        for name, (fetch, empty) in reports.items():
            try:
                results[name] = fetch(period)
            except ApiError as e:
                logger.warning("dashboard_report_failed report=%s error=%s", name, e.message)
                flash(e.message, "danger")
                results[name] = empty
        return render_template(
            "admin/dashboard.html",
            period=period,
            periods=PERIODS,
            **results,
            formats=list(EXPORT_FORMATS),
        )

    @app.route("/admin/occupancy")
    @role_required(ROLE_ADMIN)
    def admin_occupancy():
        location = request.args.get("location") or ""
        period = request.args.get("period") or "today"
        custom_date = request.args.get("customDate") or ""

        data, locations = {}, []
        try:
            locations = api.dashboard.locations()
            data = api.dashboard.room_occupancy(
                location=location or None,
                period=period,
                custom_date=custom_date or None,
            )
        except ApiError as e:
            flash(e.message, "danger")

        rooms = []
        for room in data.get("roomOccupancy") or []:
            avg = to_float(room.get("avgOccupancy"))
            rooms.append(dict(room, band=room.get("occupancyStatus") or occupancy_band(avg)))
        return render_template(
            "admin/occupancy.html",
            rooms=rooms,
            summary=data.get("summary") or {},
            locations=locations,
            location=location,
            period=period,
            custom_date=custom_date,
        )

    @app.route("/admin/reports/export")
    @role_required(ROLE_ADMIN)
    def admin_export_report():
        period = request.args.get("period") or "week"
        fmt = request.args.get("format") or "excel"
        try:
            content, filename, mimetype = api.dashboard.export_report(period, fmt)
        except ApiError as e:
            flash(e.message, "danger")
            return redirect(url_for("admin_dashboard", period=period))
        logger.info("report_exported period=%s format=%s bytes=%s", period, fmt, len(content))
        return send_file(
            BytesIO(content),
            mimetype=mimetype,
            as_attachment=True,
            download_name=secure_filename(filename),
        )

    # -------------------- Movies --------------------
    @app.route("/admin/movies")
    @role_required(ROLE_ADMIN)
    def admin_movies():
        search = (request.args.get("search") or "").strip()
        movies = []
        try:
            movies, _ = api.movies.list_movies(search=search or None, limit=100)
        except ApiError as e:
            flash(e.message, "danger")
        return render_template(
            "admin/movies.html", movies=sort_movies_for_admin(movies), search=search
        )

    @app.route("/admin/movies/new", methods=["GET", "POST"])
    @role_required(ROLE_ADMIN)
    def admin_movie_new():
        if request.method == "POST":
            try:
                movie = api.movies.create_movie(movie_payload(request.form))
            except (ValidationError, ApiError) as e:
                flash(e.message, "danger")
                return render_template("admin/movie_form.html", movie=None, form=request.form,
                                       statuses=MOVIE_STATUSES), 400
            logger.info("movie_created id=%s", movie.id)
            flash(f"Movie '{movie.title}' created.", "success")
            return redirect(url_for("admin_movies"))
        return render_template("admin/movie_form.html", movie=None, form={},
                               statuses=MOVIE_STATUSES)

    @app.route("/admin/movies/<movie_id>/edit", methods=["GET", "POST"])
    @role_required(ROLE_ADMIN)
    def admin_movie_edit(movie_id):
        try:
            movie = api.movies.get_movie(movie_id)
        except ApiError as e:
            flash(e.message, "danger")
            return redirect(url_for("admin_movies"))

        if request.method == "POST":
            try:
                api.movies.update_movie(movie_id, movie_payload(request.form))
            except (ValidationError, ApiError) as e:
                flash(e.message, "danger")
                return render_template("admin/movie_form.html", movie=movie, form=request.form,
                                       statuses=MOVIE_STATUSES), 400
            logger.info("movie_updated id=%s", movie_id)
            flash("Movie updated.", "success")
            return redirect(url_for("admin_movies"))

        form = {
            "title": movie.title,
            "genre": movie.genre,
            "duration": movie.duration,
            "rating": movie.rating,
            "description": movie.description,
            "price": movie.price or "",
            "release_date": (movie.release_date or "")[:10],
            "poster": movie.poster,
            "status": movie.status,
        }
        return render_template("admin/movie_form.html", movie=movie, form=form,
                               statuses=MOVIE_STATUSES)

    @app.route("/admin/movies/<movie_id>/delete", methods=["POST"])
    @role_required(ROLE_ADMIN)
    def admin_movie_delete(movie_id):
        try:
            api.movies.delete_movie(movie_id)
        except ApiError as e:
            flash(e.message, "danger")
        else:
            logger.info("movie_deleted id=%s", movie_id)
            flash("Movie deleted.", "success")
        return redirect(url_for("admin_movies"))

    # -------------------- Rooms --------------------
    @app.route("/admin/rooms")
    @role_required(ROLE_ADMIN)
    def admin_rooms():
        search = (request.args.get("search") or "").strip()
        status = request.args.get("status") or ""
        rooms = []
        try:
            rooms = api.rooms.list_rooms(search=search or None, status=status or None)
        except ApiError as e:
            flash(e.message, "danger")
        return render_template("admin/rooms.html", rooms=rooms, search=search, status=status,
                               statuses=ROOM_STATUSES)

    @app.route("/admin/rooms/new", methods=["GET", "POST"])
    @role_required(ROLE_ADMIN)
    def admin_room_new():
        if request.method == "POST":
            try:
                room = api.rooms.create_room(room_payload(request.form))
            except (ValidationError, ApiError) as e:
                flash(e.message, "danger")
                return render_template("admin/room_form.html", room=None, form=request.form,
                                       types=ROOM_TYPES, statuses=ROOM_STATUSES), 400
            logger.info("room_created id=%s", room.id)
            flash(f"Room '{room.name}' created.", "success")
            return redirect(url_for("admin_rooms"))
        return render_template("admin/room_form.html", room=None, form={},
                               types=ROOM_TYPES, statuses=ROOM_STATUSES)

    @app.route("/admin/rooms/<room_id>/edit", methods=["GET", "POST"])
    @role_required(ROLE_ADMIN)
    def admin_room_edit(room_id):
        try:
            room = api.rooms.get_room(room_id)
        except ApiError as e:
            flash(e.message, "danger")
            return redirect(url_for("admin_rooms"))

        if request.method == "POST":
            try:
                api.rooms.update_room(room_id, room_payload(request.form))
            except (ValidationError, ApiError) as e:
                flash(e.message, "danger")
                return render_template("admin/room_form.html", room=room, form=request.form,
                                       types=ROOM_TYPES, statuses=ROOM_STATUSES), 400
            logger.info("room_updated id=%s", room_id)
            flash("Room updated.", "success")
            return redirect(url_for("admin_rooms"))

        form = {
            "name": room.name,
            "capacity": room.capacity,
            "type": room.type,
            "status": room.status,
            "location": room.location,
        }
        return render_template("admin/room_form.html", room=room, form=form,
                               types=ROOM_TYPES, statuses=ROOM_STATUSES)

    @app.route("/admin/rooms/<room_id>/delete", methods=["POST"])
    @role_required(ROLE_ADMIN)
    def admin_room_delete(room_id):
        try:
            api.rooms.delete_room(room_id)
        except ApiError as e:
            flash(e.message, "danger")
        else:
            logger.info("room_deleted id=%s", room_id)
            flash("Room deleted.", "success")
        return redirect(url_for("admin_rooms"))

    # -------------------- Showtimes --------------------
    @app.route("/admin/showtimes")
    @role_required(ROLE_ADMIN)
    def admin_showtimes():
        movie_id = request.args.get("movie_id") or ""
        room_id = request.args.get("room_id") or ""
        date = request.args.get("date") or ""
        showtimes = []
        try:
            showtimes, _ = api.showtimes.list_showtimes(
                movie_id=movie_id or None, room_id=room_id or None, date=date or None, limit=100
            )
        except ApiError as e:
            flash(e.message, "danger")
        movies, rooms = _form_options()
        return render_template(
            "admin/showtimes.html",
            rows=[showtime_occupancy(st) for st in sort_showtimes(showtimes)],
            movies=movies,
            rooms=rooms,
            movie_id=movie_id,
            room_id=room_id,
            date=date,
        )

    @app.route("/admin/showtimes/new", methods=["GET", "POST"])
    @role_required(ROLE_ADMIN)
    def admin_showtime_new():
        movies, rooms = _form_options()
        if request.method == "POST":
            try:
                showtime = api.showtimes.create_showtime(showtime_payload(request.form))
            except (ValidationError, ApiError) as e:
                flash(e.message, "danger")
                return render_template("admin/showtime_form.html", showtime=None,
                                       form=request.form, movies=movies, rooms=rooms,
                                       statuses=SHOWTIME_STATUSES), 400
            logger.info("showtime_created id=%s", showtime.id)
            flash("Showtime created.", "success")
            return redirect(url_for("admin_showtimes"))
        return render_template("admin/showtime_form.html", showtime=None, form={},
                               movies=movies, rooms=rooms, statuses=SHOWTIME_STATUSES)

    @app.route("/admin/showtimes/<showtime_id>/edit", methods=["GET", "POST"])
    @role_required(ROLE_ADMIN)
    def admin_showtime_edit(showtime_id):
        try:
            showtime = api.showtimes.get_showtime(showtime_id)
        except ApiError as e:
            flash(e.message, "danger")
            return redirect(url_for("admin_showtimes"))
        movies, rooms = _form_options()

        if request.method == "POST":
            try:
                api.showtimes.update_showtime(showtime_id, showtime_payload(request.form))
            except (ValidationError, ApiError) as e:
                flash(e.message, "danger")
                return render_template("admin/showtime_form.html", showtime=showtime,
                                       form=request.form, movies=movies, rooms=rooms,
                                       statuses=SHOWTIME_STATUSES), 400
            logger.info("showtime_updated id=%s", showtime_id)
            flash("Showtime updated.", "success")
            return redirect(url_for("admin_showtimes"))

        form = {
            "movie_id": showtime.movie_id,
            "room_id": showtime.room_id,
            "date": showtime.date,
            "time": showtime.time[:5],
            "price": showtime.price or "",
            "status": showtime.status,
        }
        return render_template("admin/showtime_form.html", showtime=showtime, form=form,
                               movies=movies, rooms=rooms, statuses=SHOWTIME_STATUSES)

    @app.route("/admin/showtimes/<showtime_id>/delete", methods=["POST"])
    @role_required(ROLE_ADMIN)
    def admin_showtime_delete(showtime_id):
        try:
            api.showtimes.delete_showtime(showtime_id)
        except ApiError as e:
            flash(e.message, "danger")
        else:
            logger.info("showtime_deleted id=%s", showtime_id)
            flash("Showtime deleted.", "success")
        return redirect(url_for("admin_showtimes"))

    @app.route("/admin/showtimes/schedule", methods=["GET", "POST"])
    @role_required(ROLE_ADMIN)
    def admin_schedule():
        movies, rooms = _form_options()
        context = dict(movies=movies, rooms=rooms, weekdays=WEEKDAYS, form=request.form,
                       preview=None, skipped=None)
        if request.method == "GET":
            context["form"] = {}
            return render_template("admin/schedule.html", **context)

        try:
            schedule = parse_schedule_form(request.form)
        except ValidationError as e:
            flash(e.message, "danger")
            return render_template("admin/schedule.html", **context), 400

        if request.form.get("action") == "preview":
            context["preview"] = preview_schedule(schedule)
            return render_template("admin/schedule.html", **context)

        try:
            created, skipped = api.showtimes.schedule(schedule.to_payload())
        except ApiError as e:
            flash(e.message, "danger")
            return render_template("admin/schedule.html", **context), 400

        logger.info("showtimes_scheduled movie=%s room=%s created=%s skipped=%s",
                    schedule.movie_id, schedule.room_id, len(created), len(skipped))
        flash(f"{len(created)} showtimes created, {len(skipped)} skipped.", "success")
        if skipped:
            context["skipped"] = skipped
            return render_template("admin/schedule.html", **context)
        return redirect(url_for("admin_showtimes"))
