# cineconnect/utils/api_client.py
import logging
import re

import requests

from cineconnect.utils.errors import (
    AuthenticationError,
    RejectedError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)

FILENAME_RE = re.compile(r'filename\*?=(?:UTF-8\'\')?"?([^";]+)"?', re.IGNORECASE)


class ApiClient:
    """Shared HTTP session for the booking service.

    Every JSON endpoint answers with a ``{success, message, data}`` envelope;
    ``request()`` returns ``data`` and turns everything else into one of the
    errors from ``cineconnect.utils.errors``.
    """

    def __init__(self, base_url, timeout=6, token_getter=None, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token_getter = token_getter
        # reuse one session so TCP connections are kept alive between calls
        self.http = session or requests.Session()

    @property
    def server_url(self):
        """Root of the server; receipts and /health are not under /api."""
        return re.sub(r"/api$", "", self.base_url)

    def absolute_url(self, path):
        if not path or path.startswith("http"):
            return path
        return f"{self.server_url}/{path.lstrip('/')}"

    def _headers(self, token=None):
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if token is None and self.token_getter is not None:
            token = self.token_getter()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @staticmethod
    def _error_message(resp):
        try:
            body = resp.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            return body.get("message") or body.get("error")
        return None

    def _send(self, method, url, params=None, json=None, token=None):
        if params:
            params = {k: v for k, v in params.items() if v not in (None, "")}
        try:
            resp = self.http.request(
                method,
                url,
                params=params or None,
                json=json,
                headers=self._headers(token),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.warning("api_timeout method=%s url=%s", method, url)
            raise ServiceUnavailableError(
                "The booking service took too long to respond. Please try again."
            ) from e
        except requests.exceptions.RequestException as e:
            logger.warning("api_unreachable method=%s url=%s error=%s", method, url, e)
            raise ServiceUnavailableError(
                "Could not reach the booking service. Please try again."
            ) from e

        if resp.status_code == 401:
            logger.info("api_unauthorized method=%s url=%s", method, url)
            raise AuthenticationError(
                self._error_message(resp) or "Your session has expired. Please sign in again."
            )
        if not resp.ok:
            message = self._error_message(resp) or f"Request failed with status {resp.status_code}."
            logger.warning(
                "api_rejected method=%s url=%s status=%s message=%s",
                method, url, resp.status_code, message,
            )
            raise RejectedError(message, resp.status_code)
        return resp

    def request(self, method, endpoint, params=None, json=None, token=None):
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        resp = self._send(method, url, params=params, json=json, token=token)
        try:
            body = resp.json()
        except ValueError as e:
            logger.warning("api_invalid_json method=%s url=%s", method, url)
            raise ServiceUnavailableError(
                "The booking service returned an unreadable response.", resp.status_code
            ) from e

        if not isinstance(body, dict) or not body.get("success", False):
            message = body.get("message") if isinstance(body, dict) else None
            logger.warning("api_unsuccessful method=%s url=%s message=%s", method, url, message)
            raise RejectedError(
                message or "The booking service could not complete the request.",
                resp.status_code,
            )
        data = body.get("data")
        return {} if data is None else data

    def get(self, endpoint, params=None, token=None):
        return self.request("GET", endpoint, params=params, token=token)

    def post(self, endpoint, payload=None, token=None):
        return self.request("POST", endpoint, json=payload or {}, token=token)

    def put(self, endpoint, payload=None, token=None):
        return self.request("PUT", endpoint, json=payload or {}, token=token)

    def delete(self, endpoint, token=None):
        return self.request("DELETE", endpoint, token=token)

    def download(self, endpoint, params=None):
        """Fetch a binary body. Returns (content, mimetype, filename or None)."""
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        resp = self._send("GET", url, params=params)
        match = FILENAME_RE.search(resp.headers.get("Content-Disposition", ""))
        mimetype = resp.headers.get("Content-Type", "application/octet-stream").split(";")[0]
        return resp.content, mimetype, match.group(1) if match else None

    def health(self):
        resp = self._send("GET", f"{self.server_url}/health")
        try:
            return resp.json()
        except ValueError:
            return {"status": "unknown"}
