class APIError(Exception):
    """Base for failures reported to the caller as ``{"error": message}``."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequest(APIError):
    status_code = 400
    default_message = "Bad request"


class Unauthenticated(APIError):
    status_code = 401
    default_message = "Access token required"


class InvalidCredentials(APIError):
    status_code = 401
    default_message = "Invalid credentials"


class InvalidToken(APIError):
    status_code = 403
    default_message = "Invalid or expired token"


class NotFound(APIError):
    status_code = 404
    default_message = "Not found"
