"""
Error types raised by the service layer.

Every failure a caller can act on is a ``LogicError`` subclass.  Each
class carries a ``kind`` naming the failure category and the HTTP status
code the API layer answers with.  Store errors other than uniqueness
violations are not wrapped and propagate as raised by ``sqlite3``.
"""


class LogicError(Exception):
    """Base class for validation and business rule failures."""

    kind = "LogicError"
    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidTypeError(LogicError, TypeError):
    """An argument has the wrong type."""

    kind = "InvalidType"
    status_code = 400


class InvalidValueError(LogicError, ValueError):
    """An argument has the right type but an unusable value."""

    kind = "InvalidValue"
    status_code = 400


class NotFoundError(LogicError):
    kind = "NotFound"
    status_code = 404


class ConflictError(LogicError):
    kind = "Conflict"
    status_code = 409


class UnauthorizedError(LogicError):
    kind = "Unauthorized"
    status_code = 401
