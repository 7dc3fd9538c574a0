# clinic_booking/errors.py
"""
Typed errors raised by the lifecycle services.

The app-level exception handler turns any BookingError into a JSON
response with the same status code and message.
"""


class BookingError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    status_code = 400


class ConflictError(BookingError):
    status_code = 409


class NotFoundError(BookingError):
    status_code = 404


class PermissionDeniedError(BookingError):
    status_code = 403


class PersistenceError(BookingError):
    status_code = 500


class HolidaySourceError(BookingError):
    status_code = 502


class NotificationError(Exception):
    """Raised by the mailer; the notifier logs it and never re-raises."""


class AuthenticationError(BookingError):
    status_code = 401
