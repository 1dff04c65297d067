"""
Translation of application exceptions into HTTP errors.
"""

from fastapi import HTTPException

from application.exceptions import (
    ConflictError,
    EnrollmentError,
    ForbiddenError,
    InvalidStatusError,
    NotFoundError,
)

STATUS_CODES = {
    NotFoundError: 404,
    ForbiddenError: 403,
    ConflictError: 409,
    InvalidStatusError: 422,
}


def to_http_exception(error: EnrollmentError) -> HTTPException:
    """Map an application error to the HTTPException returned to the caller."""
    for error_type, status_code in STATUS_CODES.items():
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=error.message)
    return HTTPException(status_code=500, detail=error.message)
