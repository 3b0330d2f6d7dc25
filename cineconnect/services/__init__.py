# cineconnect/services/__init__.py
from flask import has_request_context, session

from cineconnect.utils.api_client import ApiClient

from .auth_api import AuthApi, AuthResult
from .bookings_api import BookingsApi
from .dashboard_api import DashboardApi
from .movies_api import MoviesApi
from .rooms_api import RoomsApi
from .showtimes_api import ShowtimesApi


def session_token():
    """Bearer token of the signed-in user, outside a request there is none."""
    if not has_request_context():
        return None
    return session.get("token")


class CinemaApi:
    """One ApiClient per app, with a service object per REST resource."""

    def __init__(self, app=None):
        self.client = None
        self.auth = None
        self.movies = None
        self.rooms = None
        self.showtimes = None
        self.bookings = None
        self.dashboard = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.client = ApiClient(
            app.config["API_BASE_URL"],
            timeout=app.config.get("API_TIMEOUT", 6),
            token_getter=session_token,
        )
        self.auth = AuthApi(self.client)
        self.movies = MoviesApi(self.client)
        self.rooms = RoomsApi(self.client)
        self.showtimes = ShowtimesApi(self.client)
        self.bookings = BookingsApi(self.client)
        self.dashboard = DashboardApi(self.client)
        app.extensions["cineconnect_api"] = self
