# cineconnect/extensions.py
from flask_caching import Cache

from cineconnect.services import CinemaApi

cache = Cache()
api = CinemaApi()
