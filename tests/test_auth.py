from cineconnect.extensions import api
from cineconnect.models import User
from cineconnect.services.auth_api import AuthResult
from cineconnect.utils.errors import AuthenticationError, ServiceUnavailableError

from tests.conftest import CLIENT_USER, FakeShowtimes, login_as


class FakeAuth:
    def __init__(self, user=None, error=None):
        self.user = user or User.from_api(CLIENT_USER)
        self.error = error
        self.logged_out = []

    def login(self, email, password):
        if self.error:
            raise self.error
        return AuthResult(token="fresh", user=self.user)

    def profile(self, token=None):
        if self.error:
            raise self.error
        return self.user

    def logout(self, token=None):
        self.logged_out.append(token)


class BrokenLogoutAuth(FakeAuth):
    def logout(self, token=None):
        raise ServiceUnavailableError("down")


def test_login_stores_token_and_user(client, monkeypatch):
    monkeypatch.setattr(api, "auth", FakeAuth())

    resp = client.post("/login", data={"email": "ana@example.com", "password": "pw"})

    assert resp.status_code == 302
    with client.session_transaction() as sess:
        assert sess["token"] == "fresh"
        assert sess["user"]["email"] == "ana@example.com"


def test_login_failure_shows_server_message(client, monkeypatch):
    monkeypatch.setattr(api, "auth", FakeAuth(error=AuthenticationError("Invalid credentials")))

    resp = client.post("/login", data={"email": "ana@example.com", "password": "bad"})

    assert resp.status_code == 200
    assert b"Invalid credentials" in resp.data


def test_login_redirects_to_safe_next_only(client, monkeypatch):
    monkeypatch.setattr(api, "auth", FakeAuth())
    resp = client.post("/login", data={"email": "a@b.co", "password": "pw", "next": "//evil.test"})
    assert resp.headers["Location"].endswith("/")

    login_as(client)
    resp = client.get("/login?next=/booking/s1")
    assert resp.headers["Location"].endswith("/booking/s1")


def test_token_without_user_is_checked_once(client, monkeypatch):
    fake = FakeAuth()
    monkeypatch.setattr(api, "auth", fake)
    with client.session_transaction() as sess:
        sess["token"] = "persisted"

    client.get("/unauthorized")

    with client.session_transaction() as sess:
        assert sess["user"]["id"] == "u1"


def test_rejected_persisted_token_clears_session(client, monkeypatch):
    monkeypatch.setattr(api, "auth", FakeAuth(error=AuthenticationError("expired")))
    with client.session_transaction() as sess:
        sess["token"] = "stale"

    client.get("/unauthorized")

    with client.session_transaction() as sess:
        assert "token" not in sess


def test_profile_outage_keeps_token(client, monkeypatch):
    monkeypatch.setattr(api, "auth", FakeAuth(error=ServiceUnavailableError("down")))
    with client.session_transaction() as sess:
        sess["token"] = "persisted"

    client.get("/unauthorized")

    with client.session_transaction() as sess:
        assert sess["token"] == "persisted"
        assert "user" not in sess


def test_401_from_any_call_signs_out(customer, monkeypatch):
    monkeypatch.setattr(api, "showtimes",
                        FakeShowtimes(error=AuthenticationError("Your session has expired.")))

    resp = customer.get("/booking/s1")

    assert resp.status_code == 302
    assert "/login" in resp.headers["Location"]
    with customer.session_transaction() as sess:
        assert "token" not in sess
        assert "user" not in sess


def test_anonymous_admin_visit_goes_to_login(client):
    resp = client.get("/admin/movies")
    assert resp.status_code == 302
    assert "/login" in resp.headers["Location"]


def test_customer_admin_visit_is_unauthorized(customer):
    resp = customer.get("/admin/dashboard")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/unauthorized")


def test_logout_clears_session_even_if_api_fails(customer, monkeypatch):
    monkeypatch.setattr(api, "auth", BrokenLogoutAuth())

    resp = customer.post("/logout")

    assert resp.status_code == 302
    with customer.session_transaction() as sess:
        assert "token" not in sess
