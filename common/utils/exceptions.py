"""
API error taxonomy.

Each class maps one failure kind to a status code and a default
machine-readable code. Handlers render them as
``{"success": false, "message": ..., "code": ...}``.

Example:
    from common.utils import NotFoundException

    course = await course_service.get_course(course_id)
    if not course:
        raise NotFoundException("Course not found", code="COURSE_NOT_FOUND")
"""

from typing import Optional, Dict
from fastapi import HTTPException


class APIException(HTTPException):
    """HTTPException carrying a user-facing message and an error code."""

    default_message = "Request failed"
    default_code: Optional[str] = None
    status = 400

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message or self.default_message
        self.code = code or self.default_code

        detail = {"message": self.message}
        if self.code:
            detail["code"] = self.code

        super().__init__(status_code=self.status, detail=detail, headers=headers)


class InvalidInputException(APIException):
    """Malformed or missing request field, or an out-of-range value."""
    status = 400
    default_message = "Invalid Details"
    default_code = "INVALID_INPUT"


class UnauthorizedException(APIException):
    """Missing or invalid bearer token, or a bad webhook signature."""
    status = 401
    default_message = "Unauthorized"
    default_code = "UNAUTHORIZED"


class ForbiddenException(APIException):
    """Authenticated, but not allowed (not enrolled, not an educator)."""
    status = 403
    default_message = "Forbidden"
    default_code = "FORBIDDEN"


class NotFoundException(APIException):
    """Referenced user or course does not exist."""
    status = 404
    default_message = "Not found"
    default_code = "NOT_FOUND"


class InternalServerException(APIException):
    """A dependency (media host, database) failed."""
    status = 500
    default_message = "Internal server error"
    default_code = "INTERNAL_ERROR"


ServerException = InternalServerException
