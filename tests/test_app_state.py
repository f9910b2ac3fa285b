"""Tests for client session state and the API client."""

import json
import pytest
import httpx
from unittest.mock import AsyncMock, MagicMock

from coursehub.client import AppState, CourseHubClient, NetworkError
from coursehub.client.user_loader import RETRIES_EXHAUSTED_MESSAGE


# ─────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────


STUDENT = {"_id": "u1", "name": "Ada", "role": "student", "enrolledCourses": ["c1", "c2"]}


@pytest.fixture
def api_course(sample_course_doc):
    """The sample course as the API returns it (string IDs)."""
    course = dict(sample_course_doc)
    course["_id"] = "c1"
    course["educator"] = {"_id": "user_educator1", "name": "Grace"}
    return course


@pytest.fixture
def fake_client(api_course):
    client = MagicMock()
    client.get_all_courses = AsyncMock(return_value={"success": True, "courses": [api_course]})
    client.get_user_data = AsyncMock(return_value={"success": True, "user": STUDENT})
    client.get_enrolled_courses = AsyncMock(return_value={
        "success": True,
        "enrolledCourses": [api_course, {**api_course, "_id": "c2", "courseTitle": "Second"}],
    })
    client.enroll = AsyncMock(return_value={"success": True, "message": "Enrollment Successful"})
    client.get_course_progress = AsyncMock(return_value={"success": True, "progressData": None})
    client.update_course_progress = AsyncMock(return_value={"success": True, "message": "Progress Updated"})
    client.add_rating = AsyncMock(return_value={"success": True, "message": "Rating added"})
    return client


@pytest.fixture
def state(fake_client, manual_scheduler, notifier):
    return AppState(client=fake_client, scheduler=manual_scheduler, notifier=notifier)


# ─────────────────────────────────────────────────────────────────
# Session lifecycle
# ─────────────────────────────────────────────────────────────────


class TestSession:
    @pytest.mark.asyncio
    async def test_start_session_loads_everything(self, state, fake_client):
        await state.start_session({"sub": "u1"})

        assert [c["_id"] for c in state.courses] == ["c1"]
        assert state.user == STUDENT
        assert state.is_educator is False
        assert state.is_user_loading is False
        # Most recent enrollment first
        assert [c["_id"] for c in state.enrolled_courses] == ["c2", "c1"]

    @pytest.mark.asyncio
    async def test_same_identity_does_not_refetch(self, state, fake_client):
        await state.start_session({"sub": "u1"})
        await state.start_session({"sub": "u1"})

        assert fake_client.get_user_data.call_count == 1

    @pytest.mark.asyncio
    async def test_role_claim_makes_educator(self, state):
        await state.start_session({"sub": "u1", "role": "educator"})

        assert state.is_educator is True

    @pytest.mark.asyncio
    async def test_stored_role_makes_educator(self, state, fake_client):
        fake_client.get_user_data.return_value = {"success": True, "user": {**STUDENT, "role": "educator"}}

        await state.start_session({"sub": "u1"})

        assert state.is_educator is True

    @pytest.mark.asyncio
    async def test_waits_for_provisioning(self, state, fake_client, manual_scheduler):
        fake_client.get_user_data.side_effect = [
            {"success": False, "message": "User Not Found"},
            {"success": True, "user": STUDENT},
        ]

        await state.start_session({"sub": "u1"})
        assert state.is_user_loading is True
        assert state.user is None

        await manual_scheduler.advance(2)

        assert state.user == STUDENT
        assert state.is_user_loading is False
        assert len(state.enrolled_courses) == 2

    @pytest.mark.asyncio
    async def test_provisioning_never_finishes(self, state, fake_client, manual_scheduler, notifier):
        fake_client.get_user_data.return_value = {"success": False, "message": "User Not Found"}

        await state.start_session({"sub": "u1"})
        await manual_scheduler.advance(60)

        assert state.user is None
        assert state.enrolled_courses == []
        assert notifier.messages == [RETRIES_EXHAUSTED_MESSAGE]
        fake_client.get_enrolled_courses.assert_not_called()

    @pytest.mark.asyncio
    async def test_end_session_cancels_retry(self, state, fake_client, manual_scheduler):
        fake_client.get_user_data.return_value = {"success": False, "message": "User Not Found"}

        await state.start_session({"sub": "u1"})
        state.end_session()
        await manual_scheduler.advance(60)

        assert fake_client.get_user_data.call_count == 1
        assert state.identity is None
        assert state.is_user_loading is False

    @pytest.mark.asyncio
    async def test_switching_identity_restarts(self, state, fake_client):
        await state.start_session({"sub": "u1"})
        await state.start_session({"sub": "u2"})

        assert state.identity == {"sub": "u2"}
        assert fake_client.get_user_data.call_count == 2


# ─────────────────────────────────────────────────────────────────
# Fetch errors
# ─────────────────────────────────────────────────────────────────


class TestFetchErrors:
    @pytest.mark.asyncio
    async def test_course_fetch_error(self, state, fake_client, notifier):
        fake_client.get_all_courses.return_value = {"success": False, "message": "Something went wrong"}

        await state.fetch_all_courses()

        assert notifier.messages == ["Fetch Courses Error: Something went wrong"]
        assert state.courses == []

    @pytest.mark.asyncio
    async def test_course_fetch_network_error(self, state, fake_client, notifier):
        fake_client.get_all_courses.side_effect = NetworkError("timed out")

        await state.fetch_all_courses()

        assert notifier.messages == ["Fetch Courses Network Error: timed out"]


# ─────────────────────────────────────────────────────────────────
# Mutations
# ─────────────────────────────────────────────────────────────────


class TestMutations:
    @pytest.mark.asyncio
    async def test_enroll_refreshes_user_and_courses(self, state, fake_client):
        await state.start_session({"sub": "u1"})

        assert await state.enroll("c3") is True

        fake_client.enroll.assert_called_once_with("c3")
        assert fake_client.get_user_data.call_count == 2
        assert fake_client.get_enrolled_courses.call_count == 2

    @pytest.mark.asyncio
    async def test_enroll_failure_is_notified(self, state, fake_client, notifier):
        fake_client.enroll.return_value = {"success": False, "message": "Data Not Found"}

        assert await state.enroll("c3") is False
        assert notifier.messages == ["Data Not Found"]

    @pytest.mark.asyncio
    async def test_mark_lecture_complete_refetches_progress(self, state, fake_client):
        fake_client.get_course_progress.return_value = {
            "success": True,
            "progressData": {"userId": "u1", "courseId": "c1", "completed": False, "lectureCompleted": ["l1"]},
        }

        record = await state.mark_lecture_complete("c1", "l1")

        fake_client.update_course_progress.assert_called_once_with("c1", "l1")
        assert record.lectureCompleted == ["l1"]
        assert state.progress["c1"] is record

    @pytest.mark.asyncio
    async def test_add_rating_refetches_courses(self, state, fake_client):
        await state.start_session({"sub": "u1"})

        assert await state.add_rating("c1", 4) is True
        assert fake_client.get_all_courses.call_count == 2
        assert fake_client.get_enrolled_courses.call_count == 2


# ─────────────────────────────────────────────────────────────────
# Derived views
# ─────────────────────────────────────────────────────────────────


class TestEnrollmentProgress:
    @pytest.mark.asyncio
    async def test_percentages(self, state, fake_client):
        async def progress_for(course_id):
            if course_id == "c1":
                return {
                    "success": True,
                    "progressData": {
                        "userId": "u1",
                        "courseId": "c1",
                        "lectureCompleted": ["l1", "l2", "l3", "removed"],
                    },
                }
            return {"success": True, "progressData": None}

        fake_client.get_course_progress.side_effect = progress_for

        await state.start_session({"sub": "u1"})
        await state.refresh_progress()
        views = {v["courseId"]: v for v in state.enrollment_progress()}

        assert views["c1"]["totalLectures"] == 5
        assert views["c1"]["lectureCompleted"] == 3
        assert views["c1"]["percentage"] == pytest.approx(60.0)
        assert views["c1"]["completed"] is False
        assert views["c1"]["duration"] == "1h 30m"
        assert views["c2"]["percentage"] == 0.0


# ─────────────────────────────────────────────────────────────────
# CourseHubClient
# ─────────────────────────────────────────────────────────────────


def _client(handler, token="tok-123"):
    async def get_token():
        return token

    http = httpx.AsyncClient(base_url="http://api.test", transport=httpx.MockTransport(handler))
    return CourseHubClient("http://api.test", get_token, http_client=http)


class TestCourseHubClient:
    @pytest.mark.asyncio
    async def test_sends_bearer_token(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "message": "Enrollment Successful"})

        client = _client(handler)
        body = await client.enroll("c1")
        await client.aclose()

        assert body["success"] is True
        assert seen == {"auth": "Bearer tok-123", "path": "/api/user/enroll", "body": {"courseId": "c1"}}

    @pytest.mark.asyncio
    async def test_catalogue_is_unauthenticated(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"success": True, "courses": []})

        client = _client(handler, token=None)
        body = await client.get_all_courses()
        await client.aclose()

        assert body == {"success": True, "courses": []}
        assert seen["auth"] is None

    @pytest.mark.asyncio
    async def test_failure_body_is_returned(self):
        client = _client(lambda request: httpx.Response(401, json={"success": False, "message": "Unauthorized"}))

        body = await client.get_user_data()
        await client.aclose()

        assert body["success"] is False

    @pytest.mark.asyncio
    async def test_missing_token(self):
        client = _client(lambda request: httpx.Response(200, json={}), token=None)

        with pytest.raises(NetworkError):
            await client.get_user_data()
        await client.aclose()

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = _client(handler)

        with pytest.raises(NetworkError) as exc:
            await client.get_enrolled_courses()
        await client.aclose()

        assert "refused" in exc.value.detail

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        client = _client(lambda request: httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(NetworkError):
            await client.get_all_courses()
        await client.aclose()
