"""
Course progress store.

One record per (user, course) pair holding the set of completed lecture IDs.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

logger = logging.getLogger(__name__)


class CourseProgressService:
    """
    Tracks which lectures a user has completed in each course.
    Records are created lazily on the first completed lecture.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize CourseProgressService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._progress_collection = db["courseprogresses"]

    async def ensure_indexes(self) -> None:
        """Create the unique (userId, courseId) index."""
        await self._progress_collection.create_index(
            [("userId", 1), ("courseId", 1)],
            unique=True,
            name="user_course_unique"
        )

    async def get_progress(self, user_id: str, course_id: str) -> Optional[Dict[str, Any]]:
        """
        Get the progress record for a user and course.

        Args:
            user_id: User ID
            course_id: Course ID

        Returns:
            Progress dict, or None when the user has not completed anything
        """
        record = await self._progress_collection.find_one({
            "userId": user_id,
            "courseId": course_id
        })
        return self._format_record(record) if record else None

    async def mark_lecture_complete(
        self,
        user_id: str,
        course_id: str,
        lecture_id: str,
    ) -> bool:
        """
        Add a lecture to the completed set, creating the record if needed.

        Args:
            user_id: User ID
            course_id: Course ID
            lecture_id: Lecture ID

        Returns:
            True if the lecture was newly recorded, False if it was
            already completed
        """
        try:
            return await self._add_lecture(user_id, course_id, lecture_id)
        except DuplicateKeyError:
            # A concurrent first completion created the record; retry as an update
            logger.debug(f"Progress record raced for user {user_id}, course {course_id}")
            return await self._add_lecture(user_id, course_id, lecture_id)

    async def _add_lecture(self, user_id: str, course_id: str, lecture_id: str) -> bool:
        now = datetime.now(timezone.utc)

        result = await self._progress_collection.update_one(
            {"userId": user_id, "courseId": course_id},
            {
                "$addToSet": {"lectureCompleted": lecture_id},
                "$setOnInsert": {"completed": False, "createdAt": now},
            },
            upsert=True
        )

        added = result.upserted_id is not None or result.modified_count > 0
        if added:
            logger.info(f"Lecture {lecture_id} completed for user {user_id}, course {course_id}")
        return added

    def _format_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Format progress record for response."""
        return {
            "_id": str(record["_id"]),
            "userId": record["userId"],
            "courseId": record["courseId"],
            "completed": record.get("completed", False),
            "lectureCompleted": list(record.get("lectureCompleted", [])),
            "createdAt": record.get("createdAt"),
        }
