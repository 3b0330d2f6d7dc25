from .auth_controller import auth_routes
from .movie_controller import movie_routes
from .booking_controller import booking_routes
from .admin_controller import admin_routes


def register_controllers(app):
    auth_routes(app)
    movie_routes(app)
    booking_routes(app)
    admin_routes(app)
