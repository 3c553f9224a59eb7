"""Error taxonomy shared by services and the HTTP boundary.

Every class is an ``HTTPException`` so services raise them exactly where they
would raise one, and FastAPI renders them as ``{"detail": ...}``.
"""

from fastapi import HTTPException, status
from sqlalchemy.exc import DBAPIError, IntegrityError


class AppError(HTTPException):
    code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(status_code=self.code, detail=detail or self.default_detail)


class ValidationError(AppError):
    code = status.HTTP_400_BAD_REQUEST
    default_detail = "Validation failed"


class AuthenticationError(AppError):
    code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authenticated"


class AuthorizationError(AppError):
    code = status.HTTP_403_FORBIDDEN
    default_detail = "Not allowed"


class NotFoundError(AppError):
    code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(AppError):
    code = status.HTTP_409_CONFLICT
    default_detail = "Duplicate entry. This record already exists."


class DependencyError(AppError):
    code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Database is unavailable"


UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"
UNDEFINED_TABLE = "42P01"
INVALID_PASSWORD = "28P01"
INVALID_CATALOG_NAME = "3D000"

_SQLSTATE_ERRORS: dict[str, AppError] = {
    UNIQUE_VIOLATION: ConflictError(),
    FOREIGN_KEY_VIOLATION: ValidationError(
        "Invalid reference. Related record does not exist."
    ),
    NOT_NULL_VIOLATION: ValidationError("Required field is missing."),
    UNDEFINED_TABLE: DependencyError("Database table does not exist."),
    INVALID_PASSWORD: DependencyError(
        "Database authentication failed. Please check your database credentials."
    ),
    INVALID_CATALOG_NAME: DependencyError(
        "Database does not exist. Please create the database first."
    ),
}

# SQLite reports no SQLSTATE, only messages.
_MESSAGE_CODES: tuple[tuple[str, str], ...] = (
    ("unique constraint failed", UNIQUE_VIOLATION),
    ("foreign key constraint failed", FOREIGN_KEY_VIOLATION),
    ("not null constraint failed", NOT_NULL_VIOLATION),
    ("no such table", UNDEFINED_TABLE),
    ("password authentication failed", INVALID_PASSWORD),
    ("does not exist", INVALID_CATALOG_NAME),
)

_CONNECTION_MARKERS = (
    "connection refused",
    "could not connect",
    "could not translate host name",
    "unable to open database file",
)


def sqlstate_of(exc: DBAPIError) -> str | None:
    orig = getattr(exc, "orig", None)
    if orig is None:
        return None
    # psycopg 3 exposes ``sqlstate``, psycopg2 ``pgcode``.
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def classify_database_error(exc: DBAPIError) -> AppError:
    """Map a storage fault to the user-facing error it should surface as."""
    code = sqlstate_of(exc)
    message = str(getattr(exc, "orig", None) or exc).lower()

    if code is None:
        for marker, marker_code in _MESSAGE_CODES:
            if marker in message:
                code = marker_code
                break

    if code in _SQLSTATE_ERRORS:
        template = _SQLSTATE_ERRORS[code]
        return type(template)(template.detail)

    if any(marker in message for marker in _CONNECTION_MARKERS):
        return DependencyError(
            "Database connection failed. Please check your database configuration."
        )

    if isinstance(exc, IntegrityError):
        return ValidationError("Request conflicts with existing data.")

    return AppError()
