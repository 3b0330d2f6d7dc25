"""Booking state machine: selecting-seats -> entering-payment -> confirmed.

A ``BookingFlow`` is serialised into the Flask session between requests, one
per showtime. It never holds the card number or the CVV.
"""
import logging
from decimal import Decimal

from cineconnect.booking.payment import validate_payment_form
from cineconnect.booking.pricing import SOURCE_DERIVED
from cineconnect.utils.errors import ApiError, BookingFlowError, ValidationError

logger = logging.getLogger(__name__)

SELECTING_SEATS = "selecting-seats"
ENTERING_PAYMENT = "entering-payment"
CONFIRMED = "confirmed"


class BookingFlow:
    def __init__(self, showtime_id, state=SELECTING_SEATS, selected_ids=None, seats=None,
                 subtotal=None, price_source=None, form=None, error=None,
                 booking_id=None, transaction_id=None, total_price=None,
                 movie_title="", showtime_label="", room_name=""):
        self.showtime_id = str(showtime_id)
        self.state = state
        self.selected_ids = list(selected_ids or [])
        self.seats = list(seats or [])
        self.subtotal = subtotal
        self.price_source = price_source
        self.form = dict(form or {})
        self.error = error
        self.booking_id = booking_id
        self.transaction_id = transaction_id
        self.total_price = total_price
        self.movie_title = movie_title
        self.showtime_label = showtime_label
        self.room_name = room_name

    def __repr__(self):
        return f"<BookingFlow {self.showtime_id} {self.state}>"

    @property
    def is_confirmed(self):
        return self.state == CONFIRMED

    @property
    def prices_estimated(self):
        return self.price_source == SOURCE_DERIVED

    @property
    def seat_labels(self):
        return ", ".join(s["label"] for s in self.seats)

    def proceed_to_payment(self, seat_map, prices):
        if self.state == CONFIRMED:
            raise BookingFlowError("This booking is already confirmed.")
        if seat_map.blocked:
            raise BookingFlowError(
                "Seat availability could not be confirmed. Reload the page to try again."
            )
        selected = seat_map.selected()
        if not selected:
            raise BookingFlowError("Select at least one seat to continue.")
        if prices is None:
            raise BookingFlowError("Ticket prices for this showtime are not available.")

        seats = []
        for state in selected:
            price = prices.price_for(state.seat.category)
            if price is None:
                raise BookingFlowError(
                    f"Seat {state.seat.label} has no price for category '{state.seat.category}'."
                )
            seats.append({
                "id": state.seat.id,
                "label": state.seat.label,
                "category": state.seat.category,
                "price": price,
            })

        self.selected_ids = [s["id"] for s in seats]
        self.seats = seats
        self.subtotal = sum((s["price"] for s in seats), Decimal("0"))
        self.price_source = prices.source
        self.error = None
        self.state = ENTERING_PAYMENT

    def back_to_seats(self):
        if self.state != ENTERING_PAYMENT:
            raise BookingFlowError("There is no payment step to go back from.")
        self.state = SELECTING_SEATS
        self.error = None

    def submit(self, form, submit_booking, today=None, fallback_email="",
               payment_method="Credit Card"):
        """Validate ``form`` and hand the booking to ``submit_booking``.

        On any failure the flow stays in entering-payment with ``error`` set and
        the exception is re-raised for the caller to report.
        """
        if self.state != ENTERING_PAYMENT:
            raise BookingFlowError("Choose your seats before paying.")
        self.form = form.remembered()

        message = validate_payment_form(form, today=today, fallback_email=fallback_email)
        if message:
            self.error = message
            raise ValidationError(message)

        payload = {
            "showtime_id": self.showtime_id,
            "seat_ids": list(self.selected_ids),
            "payment_method": payment_method,
            "customer_email": form.email or fallback_email,
        }
        try:
            booking = submit_booking(payload)
        except ApiError as e:
            self.error = e.message
            logger.warning(
                "booking_rejected showtime=%s seats=%s status=%s message=%s",
                self.showtime_id, len(self.selected_ids), e.status_code, e.message,
            )
            raise

        self.state = CONFIRMED
        self.error = None
        self.booking_id = booking.id
        self.transaction_id = booking.transaction_id
        self.total_price = booking.total_price
        logger.info(
            "booking_confirmed showtime=%s booking=%s seats=%s total=%s",
            self.showtime_id, booking.id, len(self.selected_ids), booking.total_price,
        )
        return booking

    def to_dict(self):
        return {
            "showtime_id": self.showtime_id,
            "state": self.state,
            "selected_ids": list(self.selected_ids),
            "seats": [dict(s, price=str(s["price"])) for s in self.seats],
            "subtotal": None if self.subtotal is None else str(self.subtotal),
            "price_source": self.price_source,
            "form": dict(self.form),
            "error": self.error,
            "booking_id": self.booking_id,
            "transaction_id": self.transaction_id,
            "total_price": None if self.total_price is None else str(self.total_price),
            "movie_title": self.movie_title,
            "showtime_label": self.showtime_label,
            "room_name": self.room_name,
        }

    @classmethod
    def from_dict(cls, data):
        data = dict(data)
        data["seats"] = [dict(s, price=Decimal(s["price"])) for s in data.get("seats") or []]
        for key in ("subtotal", "total_price"):
            if data.get(key) is not None:
                data[key] = Decimal(data[key])
        return cls(**data)
