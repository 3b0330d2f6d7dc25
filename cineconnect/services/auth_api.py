import logging
from dataclasses import dataclass

from cineconnect.models import User, ROLE_CLIENT
from cineconnect.utils.errors import RejectedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    token: str
    user: User


class AuthApi:
    def __init__(self, client):
        self.client = client

    def _auth_result(self, data):
        token = data.get("token")
        if not token or not data.get("user"):
            raise RejectedError("The sign-in response was incomplete. Please try again.")
        return AuthResult(token=token, user=User.from_api(data["user"]))

    def login(self, email, password):
        data = self.client.post("/auth/login", {"email": email, "password": password})
        result = self._auth_result(data)
        logger.info("login user=%s role=%s", result.user.id, result.user.role)
        return result

    def register(self, name, email, password):
        # the public sign-up form can only ever create customers
        payload = {"name": name, "email": email, "password": password, "role": ROLE_CLIENT}
        result = self._auth_result(self.client.post("/auth/register", payload))
        logger.info("register user=%s", result.user.id)
        return result

    def profile(self, token=None):
        data = self.client.get("/auth/profile", token=token)
        return User.from_api(data.get("user") or data)

    def logout(self, token=None):
        self.client.post("/auth/logout", token=token)

    def health(self):
        return self.client.health()
