"""
User store.

User documents are keyed by the identity provider's user ID and created
asynchronously by the provisioning webhook.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from motor.motor_asyncio import AsyncIOMotorDatabase

from coursehub.services.course.course_service import to_object_id

logger = logging.getLogger(__name__)


class UserService:
    """
    Manages user records and their enrolled-course sets.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize UserService.

        Args:
            db: MongoDB database connection
        """
        self._db = db
        self._users_collection = db["users"]

    async def get_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        Load user by identity-provider ID.

        Args:
            user_id: Identity-provider user ID

        Returns:
            User dict or None if not provisioned yet
        """
        doc = await self._users_collection.find_one({"_id": user_id})
        return self._format_user(doc) if doc else None

    async def get_users_by_ids(self, user_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        """
        Load public student details for several users.

        Returns:
            Dict mapping user ID to {_id, name, imageUrl, createdAt}
        """
        if not user_ids:
            return {}

        cursor = self._users_collection.find(
            {"_id": {"$in": list(user_ids)}},
            {"name": 1, "imageUrl": 1, "createdAt": 1}
        )
        docs = await cursor.to_list(length=None)

        return {
            doc["_id"]: {
                "_id": doc["_id"],
                "name": doc.get("name"),
                "imageUrl": doc.get("imageUrl"),
                "createdAt": doc.get("createdAt"),
            }
            for doc in docs
        }

    async def add_enrolled_course(self, user_id: str, course_id: str) -> bool:
        """
        Add a course to the user's enrolled-course set.

        Returns:
            True if the course was added, False if it was already present
        """
        oid = to_object_id(course_id)

        result = await self._users_collection.update_one(
            {"_id": user_id, "enrolledCourses": {"$ne": oid}},
            {
                "$addToSet": {"enrolledCourses": oid},
                "$set": {"updatedAt": datetime.now(timezone.utc)},
            }
        )
        return result.modified_count > 0

    async def upsert_from_identity(
        self,
        user_id: str,
        email: Optional[str],
        name: Optional[str],
        image_url: Optional[str],
    ) -> None:
        """
        Create or refresh a user record from identity-provider profile data.

        Enrollment and role are only initialised on insert.
        """
        now = datetime.now(timezone.utc)

        await self._users_collection.update_one(
            {"_id": user_id},
            {
                "$set": {
                    "email": email,
                    "name": name,
                    "imageUrl": image_url,
                    "updatedAt": now,
                },
                "$setOnInsert": {
                    "role": "student",
                    "enrolledCourses": [],
                    "createdAt": now,
                },
            },
            upsert=True
        )
        logger.info(f"User record provisioned: {user_id}")

    async def set_role(self, user_id: str, role: str) -> None:
        """Store the user's role on the user record."""
        await self._users_collection.update_one(
            {"_id": user_id},
            {"$set": {"role": role, "updatedAt": datetime.now(timezone.utc)}}
        )

    def _format_user(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        """Format user document for response."""
        return {
            "_id": doc["_id"],
            "name": doc.get("name"),
            "email": doc.get("email"),
            "imageUrl": doc.get("imageUrl"),
            "role": doc.get("role", "student"),
            "enrolledCourses": [str(cid) for cid in doc.get("enrolledCourses", [])],
            "createdAt": doc.get("createdAt"),
        }
