from functools import wraps

from sqlalchemy.exc import IntegrityError, SQLAlchemyError


class GalleryException(Exception):
    error_type = "error"

    def __init__(self, message: str, status_code: int = 400, error_type: str = None):
        self.message = message
        self.status_code = status_code
        if error_type:
            self.error_type = error_type
        super().__init__(message)


class ValidationFailed(GalleryException):
    error_type = "validation_error"

    def __init__(self, message: str):
        super().__init__(message, 400)


class ModerationRejected(GalleryException):
    """Content matched the banned-word filter."""

    error_type = "moderation_error"

    def __init__(self, message: str = "Comment contains inappropriate content"):
        super().__init__(message, 400)


class NotFound(GalleryException):
    error_type = "not_found"

    def __init__(self, message: str):
        super().__init__(message, 404)


class Conflict(GalleryException):
    error_type = "conflict"

    def __init__(self, message: str):
        super().__init__(message, 409)


class DBException(GalleryException):
    error_type = "database_error"


def db_exception(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except GalleryException:
            raise
        except IntegrityError:
            # most likely a duplicate entry
            raise DBException("Duplicate entry: already exists", 409)
        except SQLAlchemyError:
            raise DBException("Database error occurred", 500)

    return wrapper
