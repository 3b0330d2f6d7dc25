# cineconnect/controllers/booking_controller.py
import logging

from flask import current_app, flash, redirect, render_template, request, session, url_for

from cineconnect.auth import current_auth, login_required
from cineconnect.booking import (
    BookingFlow, PaymentForm, ENTERING_PAYMENT, SELECTING_SEATS,
    order_summary, prices_for_showtime, resolve_seat_map, unresolved_seat_map,
)
from cineconnect.extensions import api
from cineconnect.utils.errors import ApiError, BookingFlowError, ValidationError

logger = logging.getLogger(__name__)


def load_draft(showtime_id):
    data = (session.get("booking_drafts") or {}).get(str(showtime_id))
    return BookingFlow.from_dict(data) if data else None


def _is_stale(data):
    flow = BookingFlow.from_dict(data)
    return flow.is_confirmed or (flow.state == SELECTING_SEATS and not flow.selected_ids)


def save_draft(flow):
    """Store ``flow`` and drop other drafts that are finished or hold no seats."""
    drafts = {
        showtime_id: data
        for showtime_id, data in (session.get("booking_drafts") or {}).items()
        if showtime_id != str(flow.showtime_id) and not _is_stale(data)
    }
    drafts[str(flow.showtime_id)] = flow.to_dict()
    session["booking_drafts"] = drafts


def drop_draft(showtime_id):
    drafts = dict(session.get("booking_drafts") or {})
    drafts.pop(str(showtime_id), None)
    session["booking_drafts"] = drafts


def new_flow(showtime):
    return BookingFlow(
        showtime.id,
        movie_title=showtime.movie_title,
        showtime_label=showtime.label,
        room_name=showtime.room_name,
    )


def load_seat_map(showtime, selected_ids=()):
    """Seat map for ``showtime`` merged with its current reservations."""
    seats = list(showtime.seats) or api.showtimes.seat_layout(showtime.id)
    try:
        reserved = api.showtimes.reserved_seat_ids(showtime.id)
    except ApiError as e:
        logger.warning("reserved_seats_unavailable showtime=%s error=%s", showtime.id, e.message)
        return unresolved_seat_map(
            showtime.id,
            seats,
            allow_unverified=current_app.config["ALLOW_UNVERIFIED_RESERVATIONS"],
            selected_ids=selected_ids,
        )
    return resolve_seat_map(showtime.id, seats, reserved, selected_ids)


def render_payment(flow, form, error=None, status=200):
    summary = order_summary(flow.subtotal, current_app.config["SERVICE_FEE_RATE"])
    return render_template(
        "booking/payment.html",
        flow=flow,
        form=form,
        error=error,
        summary=summary,
    ), status


def booking_routes(app):
    @app.route("/booking/<showtime_id>", methods=["GET", "POST"])
    @login_required
    def booking(showtime_id):
        try:
            showtime = api.showtimes.get_showtime(showtime_id)
        except ApiError as e:
            flash(e.message, "danger")
            return redirect(url_for("home"))

        flow = load_draft(showtime.id)
        if flow is None or flow.is_confirmed:
            flow = new_flow(showtime)
        if flow.state == ENTERING_PAYMENT:
            flow.back_to_seats()

        wanted = request.form.getlist("seat_ids") if request.method == "POST" else flow.selected_ids
        seat_map = None
        try:
            seat_map = load_seat_map(showtime, flow.selected_ids)
        except ApiError as e:
            flash(e.message, "danger")
        prices = prices_for_showtime(showtime)

        if request.method == "POST" and seat_map is not None:
            try:
                chosen = seat_map.with_selection(wanted)
                flow.proceed_to_payment(chosen, prices)
            except ValidationError as e:
                flash(e.message, "danger")
            else:
                save_draft(flow)
                return redirect(url_for("payment", showtime_id=showtime.id))
        elif seat_map is not None and set(seat_map.selected_ids) != set(flow.selected_ids):
            flash("Some of the seats you had chosen are no longer available.", "warning")
            flow.selected_ids = seat_map.selected_ids

        save_draft(flow)
        return render_template(
            "booking/seats.html",
            showtime=showtime,
            seat_map=seat_map,
            prices=prices,
            flow=flow,
        )

    @app.route("/booking/<showtime_id>/payment", methods=["GET", "POST"])
    @login_required
    def payment(showtime_id):
        flow = load_draft(showtime_id)
        if flow is None or flow.state == SELECTING_SEATS:
            flash("Choose your seats first.", "warning")
            return redirect(url_for("booking", showtime_id=showtime_id))
        if flow.is_confirmed:
            return redirect(url_for("booking_confirmation", showtime_id=showtime_id))

        user = current_auth().user
        if request.method == "GET":
            form = dict(flow.form)
            form["email"] = form.get("email") or user.email
            return render_payment(flow, form, error=flow.error)

        form = PaymentForm.from_request(request.form)
        try:
            flow.submit(
                form,
                api.bookings.create_booking,
                fallback_email=user.email,
                payment_method=current_app.config["PAYMENT_METHOD_LABEL"],
            )
        except ValidationError as e:
            save_draft(flow)
            return render_payment(flow, request.form, error=e.message, status=400)
        except ApiError as e:
            save_draft(flow)
            return render_payment(flow, request.form, error=e.message, status=e.status_code or 502)

        save_draft(flow)
        return redirect(url_for("booking_confirmation", showtime_id=showtime_id))

    @app.route("/booking/<showtime_id>/back", methods=["POST"])
    @login_required
    def booking_back(showtime_id):
        flow = load_draft(showtime_id)
        if flow is not None:
            try:
                flow.back_to_seats()
            except BookingFlowError as e:
                flash(e.message, "warning")
            else:
                save_draft(flow)
        return redirect(url_for("booking", showtime_id=showtime_id))

    @app.route("/booking/<showtime_id>/cancel", methods=["POST"])
    @login_required
    def booking_cancel(showtime_id):
        drop_draft(showtime_id)
        flash("Your seat selection was discarded.", "info")
        return redirect(url_for("home"))

    @app.route("/booking/<showtime_id>/confirmation")
    @login_required
    def booking_confirmation(showtime_id):
        flow = load_draft(showtime_id)
        if flow is None or not flow.is_confirmed:
            return redirect(url_for("booking", showtime_id=showtime_id))

        booking = None
        try:
            booking = api.bookings.get_booking(flow.booking_id)
        except ApiError as e:
            flash(e.message, "warning")
        return render_template("booking/confirmation.html", flow=flow, booking=booking)

    @app.route("/bookings/<booking_id>/receipt")
    @login_required
    def booking_receipt(booking_id):
        try:
            receipt = api.bookings.receipt(booking_id)
        except ApiError as e:
            flash(e.message, "danger")
            return redirect(url_for("profile"))
        logger.info("receipt_download booking=%s", booking_id)
        return redirect(receipt.download_url)
