"""
Client-side session state.

Holds the course catalogue, the signed-in user's record and enrolled
courses, and per-course progress. State is re-fetched after every mutation
rather than patched locally.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from coursehub.client.api_client import CourseHubClient, TokenProvider
from coursehub.client.errors import NetworkError
from coursehub.client.notifier import Notifier, LoggingNotifier
from coursehub.client.scheduler import Scheduler, AsyncioScheduler
from coursehub.client.user_loader import UserRecordLoader
from coursehub.config import Settings
from coursehub.schemas.course import Course
from coursehub.schemas.user import CourseProgressRecord
from coursehub.services.course.course_stats import (
    count_lectures,
    lecture_ids,
    course_completion,
    course_duration,
    format_duration,
)

logger = logging.getLogger(__name__)


class AppState:
    """
    Explicit state container for one client session.
    """

    def __init__(
        self,
        client: CourseHubClient,
        scheduler: Scheduler,
        notifier: Notifier,
        max_attempts: int = 3,
        retry_delay: float = 2.0,
    ):
        self._client = client
        self._scheduler = scheduler
        self._notifier = notifier
        self._max_attempts = max_attempts
        self._retry_delay = retry_delay

        self.identity: Optional[Dict[str, Any]] = None
        self.courses: List[Dict[str, Any]] = []
        self.user: Optional[Dict[str, Any]] = None
        self.enrolled_courses: List[Dict[str, Any]] = []
        self.progress: Dict[str, Optional[CourseProgressRecord]] = {}
        self.is_educator = False
        self.is_user_loading = False

        self._loader: Optional[UserRecordLoader] = None

    # ─────────────────────────────────────────────────────────────────
    # Session lifecycle
    # ─────────────────────────────────────────────────────────────────

    async def start_session(self, identity: Dict[str, Any]) -> None:
        """
        Start a session for a signed-in identity.

        Args:
            identity: Identity-provider claims; ``sub`` is the user ID and
                ``role`` the public role flag
        """
        if self.identity is not None:
            if self.identity.get("sub") == identity.get("sub"):
                return
            self.end_session()

        self.identity = identity
        self.is_educator = identity.get("role") == "educator"

        await self.fetch_all_courses()

        self._loader = UserRecordLoader(
            fetch_user=self._client.get_user_data,
            scheduler=self._scheduler,
            notifier=self._notifier,
            max_attempts=self._max_attempts,
            retry_delay=self._retry_delay,
            on_loading_change=self._on_loading_change,
            on_result=self._on_user_loaded,
        )
        await self._loader.start()

    def end_session(self) -> None:
        """Drop all cached user state and cancel any pending retry."""
        if self._loader is not None:
            self._loader.reset()
            self._loader = None

        self.identity = None
        self.user = None
        self.enrolled_courses = []
        self.progress = {}
        self.is_educator = False
        self.is_user_loading = False

    def _on_loading_change(self, loading: bool) -> None:
        self.is_user_loading = loading

    async def _on_user_loaded(self, user: Optional[Dict[str, Any]]) -> None:
        self.user = user
        identity_role = (self.identity or {}).get("role")
        self.is_educator = identity_role == "educator" or (
            user is not None and user.get("role") == "educator"
        )
        await self.fetch_enrolled_courses()

    # ─────────────────────────────────────────────────────────────────
    # Fetching
    # ─────────────────────────────────────────────────────────────────

    async def fetch_all_courses(self) -> None:
        try:
            response = await self._client.get_all_courses()
        except NetworkError as e:
            self._notifier.error(f"Fetch Courses Network Error: {e.detail}")
            return

        if response.get("success"):
            self.courses = response.get("courses", [])
        else:
            self._notifier.error(f"Fetch Courses Error: {response.get('message')}")

    async def fetch_enrolled_courses(self) -> None:
        """Load enrolled courses, most recent enrollment first."""
        if not self.user:
            self.enrolled_courses = []
            return

        try:
            response = await self._client.get_enrolled_courses()
        except NetworkError as e:
            self._notifier.error(f"Fetch Enrolled Courses Network Error: {e.detail}")
            self.enrolled_courses = []
            return

        if response.get("success"):
            self.enrolled_courses = list(reversed(response.get("enrolledCourses") or []))
        else:
            self._notifier.error(f"Fetch Enrolled Courses Error: {response.get('message')}")
            self.enrolled_courses = []

    async def refresh_user(self) -> None:
        """Re-read the user record without the provisioning retry."""
        try:
            response = await self._client.get_user_data()
        except NetworkError as e:
            self._notifier.error(f"Fetch User Data Network Error: {e.detail}")
            return

        if response.get("success"):
            self.user = response.get("user")

    async def get_progress(self, course_id: str) -> Optional[CourseProgressRecord]:
        """Fetch and cache progress for one course. None when nothing completed."""
        try:
            response = await self._client.get_course_progress(course_id)
        except NetworkError as e:
            self._notifier.error(f"Fetch Progress Network Error: {e.detail}")
            return self.progress.get(course_id)

        if not response.get("success"):
            self._notifier.error(f"Fetch Progress Error: {response.get('message')}")
            return self.progress.get(course_id)

        data = response.get("progressData")
        record = CourseProgressRecord.model_validate(data) if data else None
        self.progress[course_id] = record
        return record

    async def refresh_progress(self) -> None:
        """Fetch progress for every enrolled course concurrently."""
        await asyncio.gather(*(
            self.get_progress(course["_id"])
            for course in self.enrolled_courses
            if course.get("_id")
        ))

    # ─────────────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────────────

    async def enroll(self, course_id: str) -> bool:
        """Enroll in a course, then re-fetch the user and enrolled courses."""
        try:
            response = await self._client.enroll(course_id)
        except NetworkError as e:
            self._notifier.error(f"Enrollment Network Error: {e.detail}")
            return False

        if not response.get("success"):
            self._notifier.error(response.get("message") or "Enrollment failed")
            return False

        await self.refresh_user()
        await self.fetch_enrolled_courses()
        return True

    async def mark_lecture_complete(
        self,
        course_id: str,
        lecture_id: str,
    ) -> Optional[CourseProgressRecord]:
        """Mark a lecture completed, then re-fetch the course's progress."""
        try:
            response = await self._client.update_course_progress(course_id, lecture_id)
        except NetworkError as e:
            self._notifier.error(f"Progress Network Error: {e.detail}")
            return self.progress.get(course_id)

        if not response.get("success"):
            self._notifier.error(response.get("message") or "Progress update failed")
            return self.progress.get(course_id)

        return await self.get_progress(course_id)

    async def add_rating(self, course_id: str, rating: int) -> bool:
        """Rate a course, then re-fetch courses that carry the rating list."""
        try:
            response = await self._client.add_rating(course_id, rating)
        except NetworkError as e:
            self._notifier.error(f"Rating Network Error: {e.detail}")
            return False

        if not response.get("success"):
            self._notifier.error(response.get("message") or "Rating failed")
            return False

        await self.fetch_enrolled_courses()
        await self.fetch_all_courses()
        return True

    # ─────────────────────────────────────────────────────────────────
    # Derived views
    # ─────────────────────────────────────────────────────────────────

    def enrollment_progress(self) -> List[Dict[str, Any]]:
        """
        Per-course progress for every enrolled course.

        Uses cached progress; call refresh_progress() first for fresh values.
        """
        views = []
        for raw in self.enrolled_courses:
            try:
                course = Course.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"Skipping malformed course {raw.get('_id')}: {e}")
                continue

            progress = self.progress.get(course.id)
            completed = set(progress.lectureCompleted) & lecture_ids(course) if progress else set()
            percentage = course_completion(course, progress)

            views.append({
                "courseId": course.id,
                "courseTitle": course.courseTitle,
                "courseThumbnail": course.courseThumbnail,
                "duration": format_duration(course_duration(course)),
                "totalLectures": count_lectures(course),
                "lectureCompleted": len(completed),
                "percentage": percentage,
                "completed": percentage >= 100,
            })
        return views


def create_app_state(
    get_token: TokenProvider,
    settings: Optional[Settings] = None,
    scheduler: Optional[Scheduler] = None,
    notifier: Optional[Notifier] = None,
) -> AppState:
    """Build an AppState wired to the configured backend."""
    settings = settings or Settings()

    return AppState(
        client=CourseHubClient(settings.BACKEND_URL, get_token),
        scheduler=scheduler or AsyncioScheduler(),
        notifier=notifier or LoggingNotifier(),
        max_attempts=settings.USER_FETCH_MAX_ATTEMPTS,
        retry_delay=settings.USER_FETCH_RETRY_DELAY_SECONDS,
    )
