import logging
from dataclasses import dataclass, replace
from itertools import groupby
from typing import Optional

from cineconnect.utils.errors import SeatUnavailableError

logger = logging.getLogger(__name__)

AVAILABLE = "available"
OCCUPIED = "occupied"
SELECTED = "selected"

REASON_RESERVED = "reserved"
REASON_MAINTENANCE = "maintenance"


@dataclass(frozen=True)
class SeatState:
    seat: object
    status: str
    reason: Optional[str] = None

    @property
    def id(self):
        return self.seat.id


@dataclass(frozen=True)
class SeatMap:
    """Seat states for one showtime.

    ``blocked`` means the reservation list could not be loaded and nothing may
    be selected. ``unverified`` means it could not be loaded but the app is
    configured to let the user choose anyway; the backend still has the last word.
    """

    showtime_id: str
    states: tuple
    blocked: bool = False
    unverified: bool = False

    def state_of(self, seat_id):
        for state in self.states:
            if state.id == str(seat_id):
                return state
        return None

    def is_selectable(self, state):
        return not self.blocked and state.status != OCCUPIED

    def selected(self):
        return [s for s in self.states if s.status == SELECTED]

    @property
    def selected_ids(self):
        return [s.id for s in self.selected()]

    @property
    def available_count(self):
        return sum(1 for s in self.states if s.status != OCCUPIED)

    def rows(self):
        ordered = sorted(self.states, key=lambda s: (s.seat.row, s.seat.number))
        return [(row, list(group)) for row, group in groupby(ordered, key=lambda s: s.seat.row)]

    def toggle(self, seat_id):
        state = self.state_of(seat_id)
        if state is None:
            raise SeatUnavailableError(f"Seat {seat_id} does not exist in this room.")
        if not self.is_selectable(state):
            raise SeatUnavailableError(_unavailable_message(self, state))
        new_status = AVAILABLE if state.status == SELECTED else SELECTED
        states = tuple(
            replace(s, status=new_status) if s.id == state.id else s for s in self.states
        )
        return replace(self, states=states)

    def with_selection(self, seat_ids):
        """Replace the current selection with ``seat_ids``."""
        wanted = {str(i) for i in seat_ids}
        for seat_id in wanted:
            state = self.state_of(seat_id)
            if state is None:
                raise SeatUnavailableError(f"Seat {seat_id} does not exist in this room.")
            if not self.is_selectable(state):
                raise SeatUnavailableError(_unavailable_message(self, state))
        states = []
        for s in self.states:
            if s.status == OCCUPIED:
                states.append(s)
            else:
                states.append(replace(s, status=SELECTED if s.id in wanted else AVAILABLE))
        return replace(self, states=tuple(states))


def _unavailable_message(seat_map, state):
    if seat_map.blocked:
        return "Seat availability could not be confirmed. Reload the page to try again."
    if state.reason == REASON_MAINTENANCE:
        return f"Seat {state.seat.label} is out of service."
    return f"Seat {state.seat.label} is already taken for this showtime."


def _state_for(seat, reserved, selected):
    if seat.out_of_service:
        return SeatState(seat, OCCUPIED, REASON_MAINTENANCE)
    if seat.id in reserved:
        return SeatState(seat, OCCUPIED, REASON_RESERVED)
    if seat.id in selected:
        return SeatState(seat, SELECTED)
    return SeatState(seat, AVAILABLE)


def resolve_seat_map(showtime_id, seats, reserved_ids, selected_ids=()):
    """Merge the room layout with this showtime's reservations.

    Seat ids in ``selected_ids`` that turned out to be occupied are not selected
    in the result; callers compare ``selected_ids`` to notice that.
    """
    reserved = {str(i) for i in reserved_ids}
    selected = {str(i) for i in selected_ids}
    states = tuple(_state_for(seat, reserved, selected) for seat in seats)
    return SeatMap(showtime_id=str(showtime_id), states=states)


def unresolved_seat_map(showtime_id, seats, allow_unverified=False, selected_ids=()):
    """Seat map for when the reservation list could not be fetched."""
    if allow_unverified:
        logger.warning(
            "seat_map_unverified showtime=%s seats=%s reservations=unknown",
            showtime_id, len(seats),
        )
        seat_map = resolve_seat_map(showtime_id, seats, (), selected_ids)
        return replace(seat_map, unverified=True)

    logger.warning("seat_map_blocked showtime=%s reservations=unknown", showtime_id)
    seat_map = resolve_seat_map(showtime_id, seats, ())
    return replace(seat_map, blocked=True)
