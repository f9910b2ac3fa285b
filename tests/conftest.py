"""Shared test fixtures for CourseHub backend tests."""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId


def make_cursor(docs):
    """Motor cursor mock: sort() chains, to_list() is awaited."""
    cursor = MagicMock()
    cursor.sort = MagicMock(return_value=cursor)
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


def update_result(matched=1, modified=1, upserted_id=None):
    result = MagicMock()
    result.matched_count = matched
    result.modified_count = modified
    result.upserted_id = upserted_id
    return result


def _new_collection():
    collection = AsyncMock()
    # Motor's find() returns a cursor synchronously (not a coroutine),
    # so use MagicMock for it. Async methods like find_one, insert_one,
    # update_one etc. stay as AsyncMock.
    collection.find = MagicMock(return_value=make_cursor([]))
    return collection


@pytest.fixture
def sample_user_id():
    return "user_2xYzAbC123"


@pytest.fixture
def sample_course_id():
    return str(ObjectId())


@pytest.fixture
def mock_collection():
    return _new_collection()


@pytest.fixture
def mock_db(mock_collection):
    db = MagicMock()
    db.__getitem__ = MagicMock(return_value=mock_collection)
    return db


@pytest.fixture
def collections():
    """One mock collection per name, created on first access."""
    return {}


@pytest.fixture
def multi_db(collections):
    def get(name):
        if name not in collections:
            collections[name] = _new_collection()
        return collections[name]

    db = MagicMock()
    db.__getitem__ = MagicMock(side_effect=get)
    return db


@pytest.fixture
def sample_course_doc(sample_course_id):
    """A course with two chapters of 3 and 2 lectures."""
    now = datetime.now(timezone.utc)
    return {
        "_id": ObjectId(sample_course_id),
        "courseTitle": "Python for Data Science",
        "courseDescription": "<p>From zero to pandas</p>",
        "courseThumbnail": "https://res.cloudinary.com/demo/image/upload/thumb.png",
        "isPublished": True,
        "educator": "user_educator1",
        "courseContent": [
            {
                "chapterId": "ch1",
                "chapterOrder": 1,
                "chapterTitle": "Basics",
                "chapterContent": [
                    {"lectureId": "l1", "lectureTitle": "Intro", "lectureDuration": 10,
                     "lectureUrl": "https://youtu.be/dQw4w9WgXcQ", "isPreviewFree": True, "lectureOrder": 1},
                    {"lectureId": "l2", "lectureTitle": "Variables", "lectureDuration": 20,
                     "lectureUrl": "https://youtu.be/aaaaaaaaaaa", "isPreviewFree": False, "lectureOrder": 2},
                    {"lectureId": "l3", "lectureTitle": "Loops", "lectureDuration": 30,
                     "lectureUrl": "https://youtu.be/bbbbbbbbbbb", "isPreviewFree": False, "lectureOrder": 3},
                ],
            },
            {
                "chapterId": "ch2",
                "chapterOrder": 2,
                "chapterTitle": "Pandas",
                "chapterContent": [
                    {"lectureId": "l4", "lectureTitle": "DataFrames", "lectureDuration": 25,
                     "lectureUrl": "https://youtu.be/ccccccccccc", "isPreviewFree": False, "lectureOrder": 1},
                    {"lectureId": "l5", "lectureTitle": "GroupBy", "lectureDuration": 5,
                     "lectureUrl": "https://youtu.be/ddddddddddd", "isPreviewFree": False, "lectureOrder": 2},
                ],
            },
        ],
        "courseRatings": [],
        "enrolledStudents": [],
        "enrollmentDates": {},
        "createdAt": now,
        "updatedAt": now,
    }


# ─────────────────────────────────────────────────────────────────
# Client-side helpers
# ─────────────────────────────────────────────────────────────────


class _ManualTimer:
    def __init__(self, when, callback):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Scheduler on a virtual clock, advanced explicitly by tests."""

    def __init__(self):
        self.now = 0.0
        self.timers = []

    def call_later(self, delay, callback):
        timer = _ManualTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self):
        return [t for t in self.timers if not t.cancelled]

    async def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = sorted(
                (t for t in self.pending if t.when <= target),
                key=lambda t: t.when,
            )
            if not due:
                break
            timer = due[0]
            self.timers.remove(timer)
            self.now = timer.when
            await timer.callback()
        self.now = target


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    def error(self, message):
        self.messages.append(message)


@pytest.fixture
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture
def notifier():
    return RecordingNotifier()
