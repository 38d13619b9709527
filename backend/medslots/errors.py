# backend/medslots/errors.py
"""
Domain errors. Routers never build HTTP errors for domain rules themselves:
the component that owns a rule raises one of these, and the exception
handlers in main.py map it to a {"message": ...} response.
"""


class SchedulingError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(SchedulingError):
    """Malformed input: dates, recurrence shape, slot ids, durations."""

    status_code = 400


class NotFoundError(SchedulingError):
    """Doctor, patient, pattern or slot does not exist."""

    status_code = 404


class ConflictError(SchedulingError):
    """State conflict: slot not available, already booked, lost booking race."""

    status_code = 409
