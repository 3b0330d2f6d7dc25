# cineconnect/controllers/auth_controller.py
import logging

from flask import current_app, flash, redirect, render_template, request, url_for

from cineconnect.auth import current_auth, role_required, safe_next
from cineconnect.extensions import api
from cineconnect.models import ROLE_ADMIN, ROLE_CLIENT
from cineconnect.utils.errors import ApiError, AuthenticationError

logger = logging.getLogger(__name__)


def auth_routes(app):
    @app.route("/login", methods=["GET", "POST"])
    def login():
        next_url = request.values.get("next")
        if current_auth().is_authenticated and request.method == "GET":
            return redirect(safe_next(next_url, url_for("home")))

        if request.method == "POST":
            email = (request.form.get("email") or "").strip()
            password = request.form.get("password") or ""
            if not email or not password:
                flash("Enter your email and password.", "danger")
                return render_template("login.html", email=email, next=next_url)
            try:
                user = current_auth().login(email, password)
            except (ApiError, AuthenticationError) as e:
                flash(e.message, "danger")
                return render_template("login.html", email=email, next=next_url)
            flash(f"Welcome back, {user.name}!", "success")
            default = url_for("admin_dashboard") if user.is_admin else url_for("home")
            return redirect(safe_next(next_url, default))

        return render_template("login.html", next=next_url)

    @app.route("/register", methods=["GET", "POST"])
    def register():
        if request.method == "POST":
            name = (request.form.get("name") or "").strip()
            email = (request.form.get("email") or "").strip()
            password = request.form.get("password") or ""
            confirm_password = request.form.get("confirm_password") or ""

            error = None
            if not name or not email or not password:
                error = "All fields are required."
            elif password != confirm_password:
                error = "Passwords do not match."
            if error:
                flash(error, "danger")
                return render_template("register.html", name=name, email=email)

            try:
                current_auth().register(name, email, password)
            except (ApiError, AuthenticationError) as e:
                flash(e.message, "danger")
                return render_template("register.html", name=name, email=email)
            flash("Account created!", "success")
            return redirect(url_for("home"))

        return render_template("register.html")

    @app.route("/logout", methods=["GET", "POST"])
    def logout():
        current_auth().logout()
        flash("You have signed out.", "success")
        return redirect(url_for("login"))

    @app.route("/profile")
    @role_required(ROLE_CLIENT, ROLE_ADMIN)
    def profile():
        bookings = []
        try:
            bookings = api.bookings.user_bookings(limit=current_app.config["USER_BOOKINGS_LIMIT"])
        except ApiError as e:
            flash(e.message, "danger")
        return render_template("profile.html", user=current_auth().user, bookings=bookings)

    @app.route("/unauthorized")
    def unauthorized():
        return render_template("unauthorized.html"), 403
