from functools import wraps

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError


class AppException(Exception):
    """Base for errors surfaced to API callers as JSON."""

    error_type = "application_error"

    def __init__(self, message: str, status_code: int = 400, code: str = "error"):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class DBException(AppException):
    error_type = "database_error"

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message, status_code, code="database_error")


class GuardViolation(AppException):
    """
    A state-machine guard refused the operation.
    Permanent: retrying the same call can never succeed.
    """

    error_type = "guard_violation"

    def __init__(self, message: str, code: str):
        super().__init__(message, 409, code)


class NotFoundError(AppException):
    error_type = "not_found"

    def __init__(self, message: str, code: str = "not_found"):
        super().__init__(message, 404, code)


class PermissionDenied(AppException):
    error_type = "forbidden"

    def __init__(self, message: str = "Not allowed", code: str = "forbidden"):
        super().__init__(message, 403, code)


class ServiceUnavailable(AppException):
    """Transient failure of the store or transport. Safe to retry with backoff."""

    error_type = "unavailable"

    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(message, 503, code="unavailable")


def db_exception(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except IntegrityError:
            # duplicate row, e.g. a second start of the same section
            raise GuardViolation("Duplicate entry: already exists", "duplicate_entry")
        except OperationalError:
            raise ServiceUnavailable("Database is unreachable, try again shortly")
        except SQLAlchemyError:
            raise DBException("Database error occurred", 500)

    return wrapper
