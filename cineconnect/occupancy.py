BAND_FULL = "full"
BAND_HIGH = "high"
BAND_MEDIUM = "medium"
BAND_LOW = "low"


def occupancy_rate(booked, total):
    """Percentage of seats booked, rounded to one decimal."""
    if not total or total <= 0:
        return 0.0
    return round(100.0 * (booked or 0) / total, 1)


def occupancy_band(pct):
    if pct >= 90:
        return BAND_FULL
    if pct >= 70:
        return BAND_HIGH
    if pct >= 40:
        return BAND_MEDIUM
    return BAND_LOW


def showtime_occupancy(showtime):
    rate = occupancy_rate(showtime.booked_seats, showtime.total_seats)
    return {
        "showtime": showtime,
        "booked": showtime.booked_seats or 0,
        "total": showtime.total_seats or 0,
        "rate": rate,
        "band": occupancy_band(rate),
    }
