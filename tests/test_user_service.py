"""Unit tests for UserService."""

import pytest
from unittest.mock import MagicMock
from datetime import datetime, timezone
from bson import ObjectId

from conftest import make_cursor, update_result
from coursehub.services.user.user_service import UserService


@pytest.fixture
def service(mock_db):
    return UserService(mock_db)


class TestGetUserById:
    @pytest.mark.asyncio
    async def test_formats_enrolled_course_ids(self, service, mock_collection, sample_user_id):
        course_id = ObjectId()
        mock_collection.find_one.return_value = {
            "_id": sample_user_id,
            "name": "Grace",
            "email": "grace@example.com",
            "enrolledCourses": [course_id],
        }

        user = await service.get_user_by_id(sample_user_id)

        mock_collection.find_one.assert_called_once_with({"_id": sample_user_id})
        assert user["enrolledCourses"] == [str(course_id)]
        assert user["role"] == "student"

    @pytest.mark.asyncio
    async def test_not_provisioned(self, service, mock_collection, sample_user_id):
        mock_collection.find_one.return_value = None
        assert await service.get_user_by_id(sample_user_id) is None


class TestGetUsersByIds:
    @pytest.mark.asyncio
    async def test_maps_by_id(self, service, mock_collection):
        created = datetime(2024, 5, 1, tzinfo=timezone.utc)
        mock_collection.find = MagicMock(return_value=make_cursor([
            {"_id": "u1", "name": "One", "imageUrl": None, "createdAt": created},
        ]))

        result = await service.get_users_by_ids(["u1", "u2"])

        assert set(result) == {"u1"}
        assert result["u1"]["createdAt"] == created

    @pytest.mark.asyncio
    async def test_empty_skips_query(self, service, mock_collection):
        assert await service.get_users_by_ids([]) == {}
        mock_collection.find.assert_not_called()


class TestAddEnrolledCourse:
    @pytest.mark.asyncio
    async def test_added(self, service, mock_collection, sample_user_id, sample_course_id):
        mock_collection.update_one.return_value = update_result(modified=1)

        assert await service.add_enrolled_course(sample_user_id, sample_course_id) is True

        query, update = mock_collection.update_one.call_args[0]
        oid = ObjectId(sample_course_id)
        assert query == {"_id": sample_user_id, "enrolledCourses": {"$ne": oid}}
        assert update["$addToSet"] == {"enrolledCourses": oid}

    @pytest.mark.asyncio
    async def test_already_present(self, service, mock_collection, sample_user_id, sample_course_id):
        mock_collection.update_one.return_value = update_result(matched=0, modified=0)
        assert await service.add_enrolled_course(sample_user_id, sample_course_id) is False


class TestUpsertFromIdentity:
    @pytest.mark.asyncio
    async def test_enrollment_and_role_only_on_insert(self, service, mock_collection, sample_user_id):
        await service.upsert_from_identity(
            user_id=sample_user_id,
            email="new@example.com",
            name="New User",
            image_url="https://img/new.png",
        )

        query, update = mock_collection.update_one.call_args[0]
        assert query == {"_id": sample_user_id}
        assert update["$set"]["email"] == "new@example.com"
        assert "enrolledCourses" not in update["$set"]
        assert update["$setOnInsert"]["enrolledCourses"] == []
        assert update["$setOnInsert"]["role"] == "student"
        assert mock_collection.update_one.call_args[1]["upsert"] is True


class TestSetRole:
    @pytest.mark.asyncio
    async def test_sets_role(self, service, mock_collection, sample_user_id):
        await service.set_role(sample_user_id, "educator")

        _, update = mock_collection.update_one.call_args[0]
        assert update["$set"]["role"] == "educator"
