from .flow import BookingFlow, SELECTING_SEATS, ENTERING_PAYMENT, CONFIRMED
from .payment import PaymentForm, validate_payment_form
from .pricing import TicketPrices, resolve_ticket_prices, prices_for_showtime, order_summary
from .seats import SeatMap, SeatState, resolve_seat_map, unresolved_seat_map
