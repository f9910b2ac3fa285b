"""
Async HTTP client for the CourseHub API.

Every endpoint answers with a body carrying a ``success`` flag; the client
returns that body as-is and only raises when no usable body was received.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from coursehub.client.errors import NetworkError

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Awaitable[Optional[str]]]


class CourseHubClient:
    """
    Thin wrapper over httpx.AsyncClient for the course and user endpoints.
    """

    def __init__(
        self,
        base_url: str,
        get_token: TokenProvider,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize CourseHubClient.

        Args:
            base_url: Backend base URL, e.g. http://localhost:8000
            get_token: Async callable returning the identity provider's
                current session token
            http_client: Pre-configured httpx client (tests, shared pools)
            timeout: Request timeout in seconds
        """
        self._get_token = get_token
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        authenticated: bool = True,
    ) -> Dict[str, Any]:
        headers = {}
        if authenticated:
            token = await self._get_token()
            if not token:
                raise NetworkError("Authentication token not available.")
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise NetworkError(str(e)) from e

        try:
            return response.json()
        except ValueError:
            raise NetworkError(f"Unexpected response from server ({response.status_code})")

    # ─────────────────────────────────────────────────────────────────
    # Course catalogue
    # ─────────────────────────────────────────────────────────────────

    async def get_all_courses(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/course/all", authenticated=False)

    async def get_course(self, course_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/api/course/{course_id}", authenticated=False)

    # ─────────────────────────────────────────────────────────────────
    # User
    # ─────────────────────────────────────────────────────────────────

    async def get_user_data(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/user/data")

    async def get_enrolled_courses(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/user/enrolled-courses")

    async def enroll(self, course_id: str) -> Dict[str, Any]:
        return await self._request("POST", "/api/user/enroll", json={"courseId": course_id})

    async def update_course_progress(self, course_id: str, lecture_id: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/api/user/update-course-progress",
            json={"courseId": course_id, "lectureId": lecture_id}
        )

    async def get_course_progress(self, course_id: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/api/user/get-course-progress",
            json={"courseId": course_id}
        )

    async def add_rating(self, course_id: str, rating: int) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/api/user/add-rating",
            json={"courseId": course_id, "rating": rating}
        )
