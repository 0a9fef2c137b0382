"""
Domain error taxonomy.

Services raise these; the API layer renders each one as
``{"message": ...}`` with the status code carried by the class.
"""


class EventHubError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(EventHubError):
    status_code = 400
    default_message = "Invalid request"


class UnauthenticatedError(EventHubError):
    status_code = 401
    default_message = "Token is not valid"


class ForbiddenError(EventHubError):
    status_code = 403
    default_message = "Not authorized"


class NotFoundError(EventHubError):
    status_code = 404
    default_message = "Not found"


class ConflictError(EventHubError):
    status_code = 400
    default_message = "Conflict"


class CapacityExceededError(EventHubError):
    status_code = 400
    default_message = "Event is at full capacity"


class InvalidCredentialsError(EventHubError):
    # Same message for unknown email and wrong password
    status_code = 400
    default_message = "Invalid credentials"


class InternalError(EventHubError):
    status_code = 500
