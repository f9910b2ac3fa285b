"""
Course store.

Reads and writes course documents: catalogue listings, the content tree,
the enrolled-student set and per-user ratings.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

logger = logging.getLogger(__name__)


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse a course ID, returning None when it is not a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


class CourseService:
    """
    Manages course documents in MongoDB.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize CourseService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._courses_collection = db["courses"]
        self._users_collection = db["users"]

    async def get_published_courses(self) -> List[Dict[str, Any]]:
        """
        Get all published courses for the catalogue.

        Content trees and enrolled-student lists are left out.

        Returns:
            List of courses, newest first, with educator populated
        """
        cursor = self._courses_collection.find(
            {"isPublished": True},
            {"courseContent": 0, "enrolledStudents": 0, "enrollmentDates": 0}
        )
        cursor = cursor.sort("createdAt", -1)
        docs = await cursor.to_list(length=None)

        courses = [self._format_course(doc) for doc in docs]
        await self._populate_educators(courses)
        return courses

    async def get_course(self, course_id: str) -> Optional[Dict[str, Any]]:
        """
        Load a course by ID, unmodified.

        Args:
            course_id: Course ObjectId as string

        Returns:
            Course dict or None if not found or the ID is malformed
        """
        oid = to_object_id(course_id)
        if oid is None:
            return None

        doc = await self._courses_collection.find_one({"_id": oid})
        return self._format_course(doc) if doc else None

    async def get_course_details(self, course_id: str) -> Optional[Dict[str, Any]]:
        """
        Load a course for its public details page.

        Lecture URLs are blanked for lectures that are not free previews.

        Args:
            course_id: Course ObjectId as string

        Returns:
            Course dict with educator populated, or None
        """
        course = await self.get_course(course_id)
        if not course:
            return None

        for chapter in course.get("courseContent", []):
            for lecture in chapter.get("chapterContent", []):
                if not lecture.get("isPreviewFree"):
                    lecture["lectureUrl"] = ""

        await self._populate_educators([course])
        return course

    async def get_courses_by_ids(self, course_ids: List[str]) -> List[Dict[str, Any]]:
        """
        Load several courses, keeping the order of the given IDs.

        Missing courses are skipped.
        """
        oids = [oid for oid in (to_object_id(cid) for cid in course_ids) if oid is not None]
        if not oids:
            return []

        cursor = self._courses_collection.find({"_id": {"$in": oids}})
        docs = await cursor.to_list(length=None)
        by_id = {str(doc["_id"]): self._format_course(doc) for doc in docs}

        courses = [by_id[str(oid)] for oid in oids if str(oid) in by_id]
        await self._populate_educators(courses)
        return courses

    async def get_courses_by_educator(self, educator_id: str) -> List[Dict[str, Any]]:
        """
        Get all courses owned by an educator.

        Args:
            educator_id: Identity-provider user ID

        Returns:
            List of courses, newest first, including enrollment dates
        """
        cursor = self._courses_collection.find({"educator": educator_id})
        cursor = cursor.sort("createdAt", -1)
        docs = await cursor.to_list(length=None)
        return [self._format_course(doc, include_enrollment_dates=True) for doc in docs]

    async def create_course(
        self,
        educator_id: str,
        course_data: Dict[str, Any],
        thumbnail_url: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Create a new course.

        Args:
            educator_id: Owning educator's identity-provider user ID
            course_data: Validated course fields (title, description, content)
            thumbnail_url: Stable URL returned by the media host

        Returns:
            Created course dict
        """
        now = datetime.now(timezone.utc)

        course_doc = {
            "courseTitle": course_data["courseTitle"],
            "courseDescription": course_data.get("courseDescription", ""),
            "courseThumbnail": thumbnail_url,
            "isPublished": course_data.get("isPublished", True),
            "educator": educator_id,
            "courseContent": course_data.get("courseContent", []),
            "courseRatings": [],
            "enrolledStudents": [],
            "enrollmentDates": {},
            "createdAt": now,
            "updatedAt": now,
        }

        result = await self._courses_collection.insert_one(course_doc)
        course_doc["_id"] = result.inserted_id

        logger.info(f"Course created: {result.inserted_id} by educator {educator_id}")
        return self._format_course(course_doc)

    async def add_enrolled_student(self, course_id: str, user_id: str) -> bool:
        """
        Add a user to the course's enrolled-student set.

        The first enrollment time is kept in ``enrollmentDates``.

        Returns:
            True if the course exists
        """
        now = datetime.now(timezone.utc)

        result = await self._courses_collection.update_one(
            {"_id": to_object_id(course_id)},
            {
                "$addToSet": {"enrolledStudents": user_id},
                "$min": {f"enrollmentDates.{user_id}": now},
                "$set": {"updatedAt": now},
            }
        )
        return result.matched_count > 0

    async def upsert_rating(self, course_id: str, user_id: str, rating: int) -> bool:
        """
        Store a user's rating, overwriting any earlier rating in place.

        Args:
            course_id: Course ObjectId as string
            user_id: Rating user's ID
            rating: Integer 1-5 (validated by the caller)

        Returns:
            True if an existing rating was overwritten, False if appended
        """
        oid = to_object_id(course_id)
        now = datetime.now(timezone.utc)

        result = await self._courses_collection.update_one(
            {"_id": oid, "courseRatings.userId": user_id},
            {"$set": {"courseRatings.$.rating": rating, "updatedAt": now}}
        )
        if result.matched_count > 0:
            logger.info(f"Rating updated for course {course_id} by user {user_id}: {rating}")
            return True

        # The $ne guard keeps a concurrent first rating from adding a duplicate
        result = await self._courses_collection.update_one(
            {"_id": oid, "courseRatings.userId": {"$ne": user_id}},
            {
                "$push": {"courseRatings": {"userId": user_id, "rating": rating}},
                "$set": {"updatedAt": now},
            }
        )
        if result.modified_count == 0:
            # Lost the race to another first rating, overwrite it instead
            await self._courses_collection.update_one(
                {"_id": oid, "courseRatings.userId": user_id},
                {"$set": {"courseRatings.$.rating": rating, "updatedAt": now}}
            )
            return True

        logger.info(f"Rating added for course {course_id} by user {user_id}: {rating}")
        return False

    async def _populate_educators(self, courses: List[Dict[str, Any]]) -> None:
        """Replace educator IDs with {_id, name, imageUrl}, or None if missing."""
        educator_ids = list({c["educator"] for c in courses if isinstance(c.get("educator"), str)})
        if not educator_ids:
            for course in courses:
                course["educator"] = None
            return

        cursor = self._users_collection.find(
            {"_id": {"$in": educator_ids}},
            {"name": 1, "imageUrl": 1}
        )
        educators = await cursor.to_list(length=None)
        by_id = {
            e["_id"]: {"_id": e["_id"], "name": e.get("name"), "imageUrl": e.get("imageUrl")}
            for e in educators
        }

        for course in courses:
            course["educator"] = by_id.get(course.get("educator"))

    def _format_course(
        self,
        doc: Dict[str, Any],
        include_enrollment_dates: bool = False,
    ) -> Dict[str, Any]:
        """Format course document for response."""
        course = dict(doc)
        enrollment_dates = course.pop("enrollmentDates", None) or {}
        if include_enrollment_dates:
            course["enrollmentDates"] = dict(enrollment_dates)
        course["_id"] = str(doc["_id"])
        course["courseRatings"] = [
            {"userId": r["userId"], "rating": r["rating"]}
            for r in doc.get("courseRatings", [])
        ]
        if "enrolledStudents" in doc:
            course["enrolledStudents"] = [str(s) for s in doc["enrolledStudents"]]
        if "courseContent" in doc:
            course["courseContent"] = [
                {**chapter, "chapterContent": [dict(l) for l in chapter.get("chapterContent", [])]}
                for chapter in doc["courseContent"]
            ]
        return course
