"""Ticket price resolution for a showtime.

Prices published by the showtime (``ticket_prices``) are authoritative and used
verbatim. When a showtime carries only its base price, the three category
prices are estimated from it; such prices are tagged ``derived`` so that every
place that shows or stores them can tell they are an approximation.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from cineconnect.models.seat import SEAT_CATEGORIES
from cineconnect.utils.formatting import CENT, to_decimal

logger = logging.getLogger(__name__)

SOURCE_SHOWTIME = "showtime"
SOURCE_DERIVED = "derived"

PREMIUM_MULTIPLIER = Decimal("1.10")
VIP_MULTIPLIER = Decimal("1.20")


@dataclass(frozen=True)
class TicketPrices:
    standard: Decimal
    premium: Decimal
    vip: Decimal
    source: str = SOURCE_SHOWTIME

    @property
    def is_estimate(self):
        return self.source == SOURCE_DERIVED

    def price_for(self, category):
        """Price for a seat category, or None when the category is unknown."""
        category = (category or "").lower()
        if category not in SEAT_CATEGORIES:
            return None
        return getattr(self, category)


def derive_ticket_prices(base_price):
    base = to_decimal(base_price)
    if base is None:
        return None
    return TicketPrices(
        standard=base.quantize(CENT, rounding=ROUND_HALF_UP),
        premium=(base * PREMIUM_MULTIPLIER).quantize(CENT, rounding=ROUND_HALF_UP),
        vip=(base * VIP_MULTIPLIER).quantize(CENT, rounding=ROUND_HALF_UP),
        source=SOURCE_DERIVED,
    )


def resolve_ticket_prices(ticket_prices, base_price, showtime_id=None):
    if ticket_prices:
        parsed = {c: to_decimal(ticket_prices.get(c)) for c in SEAT_CATEGORIES}
        if all(v is not None for v in parsed.values()):
            return TicketPrices(source=SOURCE_SHOWTIME, **parsed)
        logger.warning(
            "ticket_prices_incomplete showtime=%s categories=%s",
            showtime_id,
            sorted(c for c, v in parsed.items() if v is not None),
        )

    derived = derive_ticket_prices(base_price)
    if derived is None:
        logger.warning("ticket_prices_unavailable showtime=%s", showtime_id)
        return None
    logger.warning(
        "ticket_prices_derived showtime=%s base=%s premium=%s vip=%s",
        showtime_id, derived.standard, derived.premium, derived.vip,
    )
    return derived


def prices_for_showtime(showtime):
    return resolve_ticket_prices(showtime.ticket_prices, showtime.price, showtime.id)


def order_summary(subtotal, fee_rate):
    """Subtotal plus the display-only service fee shown on the payment page."""
    subtotal = to_decimal(subtotal, Decimal("0"))
    fees = (subtotal * to_decimal(fee_rate, Decimal("0"))).quantize(CENT, rounding=ROUND_HALF_UP)
    return {"subtotal": subtotal, "fees": fees, "total": subtotal + fees}
