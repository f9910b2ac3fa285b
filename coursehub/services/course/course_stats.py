"""
Derived course values for display.

Completion percentages, durations and ratings are never stored; they are
recomputed from the course tree and the progress record whenever read.
"""

import re
from typing import Optional

from coursehub.schemas.course import Chapter, Course
from coursehub.schemas.user import CourseProgressRecord

_VIDEO_ID_PATTERNS = (
    re.compile(r"[?&]v=([a-zA-Z0-9_-]{11})"),
    re.compile(r"youtu\.be/([a-zA-Z0-9_-]{11})"),
    re.compile(r"/embed/([a-zA-Z0-9_-]{11})"),
    re.compile(r"([a-zA-Z0-9_-]{11})"),
)


def count_lectures(course: Course) -> int:
    """Total number of lectures across all chapters."""
    return sum(len(chapter.chapterContent) for chapter in course.courseContent)


def lecture_ids(course: Course) -> set:
    """IDs of every lecture currently in the course."""
    return {
        lecture.lectureId
        for chapter in course.courseContent
        for lecture in chapter.chapterContent
    }


def completion_percentage(completed_count: int, total_lectures: int) -> float:
    """
    Percentage of lectures completed.

    A course without lectures is 0% whatever the completed count.
    """
    if total_lectures <= 0:
        return 0.0
    return min(100.0, completed_count / total_lectures * 100)


def course_completion(
    course: Course,
    progress: Optional[CourseProgressRecord],
) -> float:
    """
    Completion percentage of a course for one user.

    Args:
        course: Course with its content tree
        progress: The user's progress record, None if nothing watched yet

    Returns:
        Percentage between 0 and 100
    """
    if progress is None:
        return 0.0

    # Lectures removed from the course no longer count
    completed = set(progress.lectureCompleted) & lecture_ids(course)
    return completion_percentage(len(completed), count_lectures(course))


def is_lecture_completed(
    progress: Optional[CourseProgressRecord],
    lecture_id: str,
) -> bool:
    """Whether a lecture appears in the progress record."""
    if progress is None:
        return False
    return lecture_id in progress.lectureCompleted


def average_rating(course: Course) -> float:
    """Arithmetic mean of all ratings, 0 when the course has none."""
    ratings = [entry.rating for entry in course.courseRatings]
    if not ratings:
        return 0.0
    return sum(ratings) / len(ratings)


def rating_stars(rating: float) -> int:
    """Number of filled stars (0-5) for a rating, rounded half up."""
    return max(0, min(5, int(rating + 0.5)))


def user_rating(course: Course, user_id: str) -> int:
    """The given user's rating of the course, 0 when not rated."""
    for entry in course.courseRatings:
        if entry.userId == user_id:
            return entry.rating
    return 0


def chapter_duration(chapter: Chapter) -> float:
    """Total lecture minutes in a chapter."""
    return sum(lecture.lectureDuration for lecture in chapter.chapterContent)


def course_duration(course: Course) -> float:
    """Total lecture minutes in a course."""
    return sum(chapter_duration(chapter) for chapter in course.courseContent)


def format_duration(minutes: float) -> str:
    """Render minutes as e.g. "1h 30m" or "45m"."""
    total = int(round(minutes))
    hours, mins = divmod(total, 60)
    if hours and mins:
        return f"{hours}h {mins}m"
    if hours:
        return f"{hours}h"
    return f"{mins}m"


def extract_video_id(url: Optional[str]) -> Optional[str]:
    """
    Extract an 11-character YouTube video ID from a lecture URL.

    Accepts watch URLs, youtu.be short links, embed URLs and bare IDs.
    Returns None when no ID can be found.
    """
    if not url or not isinstance(url, str):
        return None

    trimmed = url.strip()
    for pattern in _VIDEO_ID_PATTERNS:
        match = pattern.search(trimmed)
        if match:
            return match.group(1)
    return None

