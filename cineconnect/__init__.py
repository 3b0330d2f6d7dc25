# cineconnect/__init__.py
import logging

from flask import Flask, jsonify

from cineconnect import auth
from cineconnect.config import Config
from cineconnect.controllers import register_controllers
from cineconnect.extensions import api, cache
from cineconnect.logging_config import setup_logging
from cineconnect.utils.errors import ApiError
from cineconnect.utils.formatting import format_date, format_money, short_time

logger = logging.getLogger(__name__)


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    setup_logging(app.config["LOG_LEVEL"])
    cache.init_app(app)
    api.init_app(app)
    auth.init_app(app)
    register_controllers(app)

    symbol = app.config.get("CURRENCY_SYMBOL", "Q")
    app.add_template_filter(lambda v: format_money(v, symbol), "money")
    app.add_template_filter(short_time, "short_time")
    app.add_template_filter(format_date, "format_date")

    @app.route("/health")
    def health():
        try:
            backend = api.auth.health()
        except ApiError as e:
            return jsonify({"status": "degraded", "backend": e.message}), 503
        return jsonify({"status": "ok", "backend": backend})

    logger.info("app_ready api=%s cache=%s", app.config["API_BASE_URL"], app.config["CACHE_TYPE"])
    return app
