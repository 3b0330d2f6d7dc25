# cineconnect/config.py
import logging
import os

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _int(name, default):
    try:
        return int(os.getenv(name, str(default)).strip())
    except ValueError:
        logger.warning("invalid %s=%s, using default=%s", name, os.getenv(name), default)
        return default


def _bool(name, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    val = raw.strip().lower()
    if val in ("1", "true", "yes", "on"):
        return True
    if val in ("0", "false", "no", "off"):
        return False
    logger.warning("invalid %s=%s, using default=%s", name, raw, default)
    return default


class Config:
    # Flask session cookie signing; override in every deployed environment
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-cineconnect-secret")

    API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:4000/api").rstrip("/")
    API_TIMEOUT = _int("API_TIMEOUT", 6)

    # Flask-Caching. Catalog lookups only; bookings are never cached.
    CACHE_TYPE = os.getenv("CACHE_TYPE", "SimpleCache")
    CACHE_DEFAULT_TIMEOUT = _int("CACHE_DEFAULT_TIMEOUT", 300)

    ALLOW_UNVERIFIED_RESERVATIONS = _bool("ALLOW_UNVERIFIED_RESERVATIONS", False)
    SERVICE_FEE_RATE = os.getenv("SERVICE_FEE_RATE", "0.05")
    PAYMENT_METHOD_LABEL = os.getenv("PAYMENT_METHOD_LABEL", "Credit Card")
    USER_BOOKINGS_LIMIT = _int("USER_BOOKINGS_LIMIT", 50)
    CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "Q")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
