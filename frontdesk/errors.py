"""
Error taxonomy for the front-desk core.

Services raise these; the handlers registered in ``main.py`` turn every one
of them into a single ``{"error": message}`` JSON body with the status code
carried by the exception class.
"""


class FrontDeskError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code: int = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(FrontDeskError):
    """A required field is missing or has an invalid value."""

    status_code = 400


class InvalidDateFormat(ValidationError):
    def __init__(self, message: str = "Invalid date format"):
        super().__init__(message)


class NotFoundError(FrontDeskError):
    status_code = 404


class BookingNotFound(NotFoundError):
    def __init__(self, message: str = "Booking not found"):
        super().__init__(message)


class AllocationError(FrontDeskError):
    """Rooms could not be allocated for a category entry."""

    status_code = 400


class CategoryNotFound(AllocationError):
    def __init__(self, category_id):
        self.category_id = category_id
        super().__init__(f"Category not found: {category_id}")


class InsufficientAvailability(AllocationError):
    def __init__(self, category_name: str, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(f"Not enough available rooms in {category_name}")


class InvalidStateError(FrontDeskError):
    status_code = 400


class InactiveBooking(InvalidStateError):
    def __init__(self, message: str = "Cannot extend inactive booking"):
        super().__init__(message)


class PersistenceError(FrontDeskError):
    """Unexpected storage failure."""

    status_code = 500
