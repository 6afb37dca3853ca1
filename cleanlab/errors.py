"""
Error kinds raised by the booking and auth services.

Each error carries the HTTP status the API layer answers with and a short
machine-readable kind.
"""


class CleanLabError(Exception):
    """Base class for expected business and store failures"""

    status_code = 500
    kind = "unexpected"
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"success": False, "error": self.kind, "message": self.message}


class ValidationError(CleanLabError):
    status_code = 400
    kind = "validation_error"
    default_message = "Invalid input"


class NotFoundError(CleanLabError):
    status_code = 404
    kind = "not_found"
    default_message = "Not found"


class ForbiddenError(CleanLabError):
    status_code = 403
    kind = "forbidden"
    default_message = "Access denied"


class ConflictError(CleanLabError):
    status_code = 409
    kind = "conflict"
    default_message = "Request conflicts with an existing record"


class SlotFullError(ConflictError):
    default_message = "This time slot is fully booked. Please choose another time."


class InvalidStateError(CleanLabError):
    status_code = 409
    kind = "invalid_state"
    default_message = "Operation not allowed in the current state"


class UnverifiedError(CleanLabError):
    status_code = 403
    kind = "unverified"
    default_message = "Please verify your phone number before logging in"


class InvalidCredentialsError(CleanLabError):
    status_code = 401
    kind = "invalid_credentials"
    default_message = "Invalid phone number or password"


class TransientStoreError(CleanLabError):
    status_code = 503
    kind = "transient_store_error"
    default_message = "The database is temporarily unavailable. Please try again."


class UnexpectedError(CleanLabError):
    pass
