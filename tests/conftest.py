from decimal import Decimal

import pytest

from cineconnect import create_app
from cineconnect.extensions import api
from cineconnect.models import Booking, Movie, Room, Seat, Showtime

CLIENT_USER = {"id": "u1", "name": "Ana Lopez", "email": "ana@example.com",
               "role": "cliente", "phone": None}
ADMIN_USER = {"id": "a1", "name": "Admin", "email": "admin@example.com",
              "role": "admin", "phone": None}


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test",
        "CACHE_TYPE": "NullCache",
        "API_BASE_URL": "http://api.test/api",
        "ALLOW_UNVERIFIED_RESERVATIONS": False,
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


def login_as(client, user=CLIENT_USER, token="token-123"):
    with client.session_transaction() as sess:
        sess["token"] = token
        sess["user"] = dict(user)


@pytest.fixture
def customer(client):
    login_as(client, CLIENT_USER)
    return client


@pytest.fixture
def admin(client):
    login_as(client, ADMIN_USER)
    return client


def make_seats():
    return (
        Seat(id="1", row="A", number=1, category="standard"),
        Seat(id="2", row="A", number=2, category="vip"),
        Seat(id="3", row="B", number=1, category="premium"),
        Seat(id="4", row="B", number=2, category="standard", status="maintenance"),
    )


def make_showtime(**kwargs):
    values = dict(
        id="s1",
        movie_id="m1",
        room_id="r1",
        date="2030-05-10",
        time="19:30:00",
        price=Decimal("12.50"),
        movie=Movie(id="m1", title="Dune"),
        room=Room(id="r1", name="Sala 1", type="IMAX", location="Centro"),
        seats=make_seats(),
    )
    values.update(kwargs)
    return Showtime(**values)


class FakeShowtimes:
    def __init__(self, showtime=None, reserved=(), reserved_error=None, error=None):
        self.showtime = showtime or make_showtime()
        self.reserved = set(reserved)
        self.reserved_error = reserved_error
        self.error = error
        self.showtimes = [self.showtime]
        self.created = []
        self.scheduled = []

    def get_showtime(self, showtime_id):
        if self.error:
            raise self.error
        return self.showtime

    def list_showtimes(self, **params):
        if self.error:
            raise self.error
        return list(self.showtimes), {}

    def seat_layout(self, showtime_id):
        return list(self.showtime.seats)

    def reserved_seat_ids(self, showtime_id):
        if self.reserved_error:
            raise self.reserved_error
        return set(self.reserved)

    def create_showtime(self, payload):
        self.created.append(payload)
        return make_showtime(id="s-new")

    def schedule(self, payload):
        self.scheduled.append(payload)
        return [make_showtime(id="s-a"), make_showtime(id="s-b")], []


class FakeBookings:
    def __init__(self, error=None, booking=None):
        self.error = error
        self.booking = booking or Booking(
            id="b1",
            transaction_id="TX-0001",
            showtime_id="s1",
            total_price=Decimal("12.50"),
            payment_method="Credit Card",
            customer_email="ana@example.com",
        )
        self.payloads = []

    def create_booking(self, payload):
        self.payloads.append(payload)
        if self.error:
            raise self.error
        return self.booking

    def get_booking(self, booking_id):
        return self.booking

    def user_bookings(self, limit=50):
        if self.error:
            raise self.error
        return [self.booking]


@pytest.fixture
def showtimes(app, monkeypatch):
    fake = FakeShowtimes()
    monkeypatch.setattr(api, "showtimes", fake)
    return fake


@pytest.fixture
def bookings(app, monkeypatch):
    fake = FakeBookings()
    monkeypatch.setattr(api, "bookings", fake)
    return fake
