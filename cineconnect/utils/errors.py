class ApiError(Exception):
    """A call to the booking service failed in a way the current view can report."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ServiceUnavailableError(ApiError):
    """Connection refused, timeout, or a response that is not the expected JSON."""


class RejectedError(ApiError):
    """The service answered but refused the request (4xx/5xx or success=false)."""


class AuthenticationError(Exception):
    """The bearer token is missing, expired or invalid.

    Kept outside ApiError so views let it propagate and the
    application-wide handler can clear the session and send the user to login.
    """

    def __init__(self, message, status_code=401):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(Exception):
    """Client-side check failed before anything was sent."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class SeatUnavailableError(ValidationError):
    pass


class BookingFlowError(ValidationError):
    pass
