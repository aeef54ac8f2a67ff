from fastapi import status


class BookingError(Exception):
    """Base class for errors surfaced to API clients as ``{success: false, error}``."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BookingValidationError(BookingError):
    """Missing or malformed booking details."""


class SlotConflict(BookingError):
    """The requested court is no longer free for one or more slots."""


class BookingNotFound(BookingError):
    status_code = status.HTTP_404_NOT_FOUND


class UpstreamFailure(BookingError):
    """Storage or Redis could not be reached."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
