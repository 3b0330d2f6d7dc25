# cineconnect/auth.py
import logging
from functools import wraps

from flask import flash, g, redirect, request, session, url_for

from cineconnect.extensions import api
from cineconnect.models import User
from cineconnect.utils.errors import ApiError, AuthenticationError

logger = logging.getLogger(__name__)

SESSION_KEYS = ("token", "user", "booking_drafts")


class AuthSession:
    """Who is signed in for the current request.

    The token and a copy of the user live in the Flask session. ``init()`` runs
    once per request; the token is checked against the profile endpoint only
    when no user has been cached for it yet.
    """

    def __init__(self, store, auth_service):
        self.store = store
        self.auth_service = auth_service
        self.user = None

    @property
    def token(self):
        return self.store.get("token")

    @property
    def is_authenticated(self):
        return self.user is not None

    def has_role(self, *roles):
        return self.user is not None and self.user.role in roles

    def init(self):
        cached = self.store.get("user")
        if cached and self.token:
            self.user = User.from_session(cached)
            return self.user
        if not self.token:
            return None

        try:
            user = self.auth_service.profile(self.token)
        except AuthenticationError:
            logger.info("session_token_rejected")
            self.clear()
            return None
        except ApiError as e:
            # keep the token, the next request will try again
            logger.warning("profile_unavailable error=%s", e.message)
            return None
        self.store["user"] = user.to_session()
        self.user = user
        return user

    def start(self, result):
        self.clear()
        self.store["token"] = result.token
        self.store["user"] = result.user.to_session()
        self.user = result.user
        return result.user

    def login(self, email, password):
        return self.start(self.auth_service.login(email, password))

    def register(self, name, email, password):
        return self.start(self.auth_service.register(name, email, password))

    def logout(self):
        token = self.token
        try:
            if token:
                self.auth_service.logout(token)
        except (ApiError, AuthenticationError) as e:
            logger.info("logout_remote_failed error=%s", e.message)
        finally:
            self.clear()

    def clear(self):
        for key in SESSION_KEYS:
            self.store.pop(key, None)
        self.user = None


def current_auth():
    auth = g.get("auth")
    if auth is None:
        auth = g.auth = AuthSession(session, api.auth)
    return auth


def _next_path():
    if request.method != "GET":
        return None
    return request.full_path.rstrip("?")


def safe_next(target, default):
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return default


def login_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        if not current_auth().is_authenticated:
            flash("Please sign in to continue.", "warning")
            return redirect(url_for("login", next=_next_path()))
        return view(*args, **kwargs)
    return wrapped


def role_required(*roles):
    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            auth = current_auth()
            if not auth.is_authenticated:
                flash("Please sign in to continue.", "warning")
                return redirect(url_for("login", next=_next_path()))
            if not auth.has_role(*roles):
                logger.info("role_denied user=%s role=%s path=%s",
                            auth.user.id, auth.user.role, request.path)
                return redirect(url_for("unauthorized"))
            return view(*args, **kwargs)
        return wrapped
    return decorator


def init_app(app):
    @app.before_request
    def load_auth_session():
        g.auth = AuthSession(session, api.auth)
        g.auth.init()

    @app.errorhandler(AuthenticationError)
    def handle_authentication_error(e):
        logger.info("auth_expired path=%s", request.path)
        current_auth().clear()
        flash(e.message, "warning")
        return redirect(url_for("login", next=_next_path()))

    @app.context_processor
    def inject_user():
        auth = g.get("auth")
        return {"current_user": auth.user if auth else None}
