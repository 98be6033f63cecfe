"""
Custom exception classes for the discovery and booking engine.

Every operation raises one of these typed errors so callers (the HTTP
adapter, a mobile backend, a script) can render a human-readable reason
instead of a generic 500.
"""


class RentalError(Exception):
    """Base class for all engine errors."""

    status_code = 400

    def __init__(self, message: str = "Error: request rejected") -> None:
        self.message = message
        super().__init__(self.message)

    def __str__(self) -> str:  # pragma: no cover
        return self.message

    @property
    def kind(self) -> str:
        return type(self).__name__


class StoreUnavailable(RentalError):
    """Raised when the document store cannot be reached or fails to persist."""

    status_code = 503

    def __init__(self, message: str = "Error: store unavailable") -> None:
        super().__init__(message)


class NotFound(RentalError):
    """Raised when a referenced vehicle, supplier or booking does not exist."""

    status_code = 404

    def __init__(self, message: str = "Error: record not found") -> None:
        super().__init__(message)


class InvalidTransition(RentalError):
    """Raised when a booking status change is not legal from its current state."""

    status_code = 409

    def __init__(self, message: str = "Error: invalid booking transition") -> None:
        super().__init__(message)


class AlreadyRated(RentalError):
    """Raised on a second rating submission for the same booking."""

    status_code = 409

    def __init__(self, message: str = "Error: booking already rated") -> None:
        super().__init__(message)


class ValidationError(RentalError):
    """Raised for malformed dates/times, bad scores or a missing identity."""

    status_code = 422

    def __init__(self, message: str = "Error: invalid input") -> None:
        super().__init__(message)


class WriteConflict(RentalError):
    """Raised by the store when a write precondition no longer holds."""

    status_code = 409

    def __init__(self, message: str = "Error: concurrent update detected") -> None:
        super().__init__(message)
