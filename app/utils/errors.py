"""
Error taxonomy shared by services and routes.

Each error is an HTTPException so the app-level handler renders it with the
right status code; services raise them the same way they always raised
HTTPException.
"""
from typing import Any, Optional

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """Input broke a business rule that request validation cannot express"""

    def __init__(self, detail: Any = "Validation failed"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: Any = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: Any = "Resource already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    def __init__(self, detail: Any = "You do not have permission to perform this action"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UpstreamError(HTTPException):
    """The external movie provider was unreachable or answered with an error"""

    def __init__(self, detail: Any = "Movie provider unavailable", cause: Optional[Exception] = None):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
        self.cause = cause


class InternalError(HTTPException):
    """Infrastructure fault; the caller only ever sees the generic message"""

    def __init__(self, detail: Any = "Internal server error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
