"""
Domain errors raised by the complaint lifecycle and query services.

Each error carries the HTTP status the API layer answers with, so route
handlers can let them propagate to the handlers registered in main.py.
"""


class CivicError(Exception):
    """Base class for errors the caller can act on"""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(CivicError):
    """Unknown complaint, tracking id or contractor"""

    status_code = 404


class InvalidStateError(CivicError):
    """Operation not allowed in the complaint's current state"""

    status_code = 400


class InvalidTransitionError(InvalidStateError):
    """Status change outside the allowed transition table"""

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot move complaint from '{current}' to '{requested}'")
        self.current = current
        self.requested = requested


class InvalidInputError(CivicError):
    """Malformed or missing input not caught by request schemas"""

    status_code = 422
