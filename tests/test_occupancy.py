import pytest

from cineconnect.models import Showtime
from cineconnect.occupancy import occupancy_band, occupancy_rate, showtime_occupancy


def test_rate_is_a_percentage():
    assert occupancy_rate(45, 120) == 37.5
    assert occupancy_rate(0, 0) == 0.0
    assert occupancy_rate(None, 100) == 0.0


@pytest.mark.parametrize("pct, band", [
    (95, "full"), (90, "full"), (89.9, "high"), (70, "high"),
    (40, "medium"), (39.9, "low"), (0, "low"),
])
def test_bands(pct, band):
    assert occupancy_band(pct) == band


def test_showtime_occupancy_uses_booking_info():
    showtime = Showtime.from_api({
        "id": "s1",
        "booking_info": {"total_seats": 100, "available_seats": 25},
    })
    row = showtime_occupancy(showtime)
    assert (row["booked"], row["total"], row["rate"], row["band"]) == (75, 100, 75.0, "high")
