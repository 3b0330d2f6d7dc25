from datetime import date
from decimal import Decimal

import pytest
from werkzeug.datastructures import MultiDict

from cineconnect.scheduling import parse_schedule_form, preview_schedule
from cineconnect.utils.errors import ValidationError


def schedule_form(**overrides):
    values = {
        "movie_id": "m1",
        "room_id": "r1",
        "start_date": "2026-10-19",
        "end_date": "2026-10-25",
        "times": "21:00, 15:30",
    }
    values.update(overrides)
    form = MultiDict(values)
    return form


def test_parse_sorts_times_and_builds_payload():
    form = schedule_form(price_override="9.50")
    form.setlist("excluded_days", ["sunday", "monday"])

    req = parse_schedule_form(form)

    assert req.times == ("15:30", "21:00")
    assert req.excluded_days == ("monday", "sunday")
    assert req.price_override == Decimal("9.50")
    assert req.to_payload() == {
        "movie_id": "m1",
        "room_id": "r1",
        "start_date": "2026-10-19",
        "end_date": "2026-10-25",
        "times": ["15:30", "21:00"],
        "excluded_days": ["monday", "sunday"],
        "price_override": 9.5,
    }


def test_preview_skips_excluded_weekdays():
    form = schedule_form(times="18:00")
    form.setlist("excluded_days", ["monday", "sunday"])

    slots = preview_schedule(parse_schedule_form(form))

    # 2026-10-19 is a Monday and 2026-10-25 a Sunday
    assert [d for d, _ in slots] == [date(2026, 10, d) for d in range(20, 25)]


def test_inverted_range_is_rejected():
    with pytest.raises(ValidationError, match="end date"):
        parse_schedule_form(schedule_form(start_date="2026-10-25", end_date="2026-10-19"))


@pytest.mark.parametrize("overrides", [
    {"times": ""},
    {"times": "25:00"},
    {"times": "7pm"},
    {"movie_id": ""},
    {"start_date": "19/10/2026"},
    {"price_override": "-3"},
    {"price_override": "NaN"},
    {"price_override": "Infinity"},
])
def test_bad_input_is_rejected(overrides):
    with pytest.raises(ValidationError):
        parse_schedule_form(schedule_form(**overrides))


def test_unknown_weekday_is_rejected():
    form = schedule_form()
    form.setlist("excluded_days", ["funday"])
    with pytest.raises(ValidationError, match="funday"):
        parse_schedule_form(form)
