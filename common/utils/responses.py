"""
Response body helpers.

Every body carries a top-level ``success`` flag with payload fields beside
it, never under a wrapper key:

    {"success": true, "courses": [...]}
    {"success": true, "message": "Enrollment Successful"}
    {"success": false, "message": "Course not found", "code": "COURSE_NOT_FOUND"}
"""

from typing import Any, Optional, Dict


def success_response(message: Optional[str] = None, **fields: Any) -> Dict[str, Any]:
    """Success body with ``fields`` at the top level and an optional message."""
    body: Dict[str, Any] = {"success": True, **fields}
    if message:
        body["message"] = message
    return body


def error_response(message: str, code: Optional[str] = None) -> Dict[str, Any]:
    """Failure body. ``code`` is omitted when not given."""
    body: Dict[str, Any] = {"success": False, "message": message}
    if code:
        body["code"] = code
    return body
