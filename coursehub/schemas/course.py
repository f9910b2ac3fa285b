"""
Pydantic models for the course content tree.

Field names follow the stored MongoDB documents (camelCase). Values that may
legitimately be absent (the educator, a lecture's URL, the thumbnail) are
Optional so read sites have to handle the missing case.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Lecture(BaseModel):
    """Smallest content unit within a chapter."""
    lectureId: str
    lectureTitle: str
    lectureDuration: float = 0  # Minutes
    lectureUrl: Optional[str] = None
    isPreviewFree: bool = False
    lectureOrder: int = 0


class Chapter(BaseModel):
    """Ordered group of lectures."""
    chapterId: str
    chapterOrder: int = 0
    chapterTitle: str
    chapterContent: List[Lecture] = Field(default_factory=list)


class CourseRating(BaseModel):
    """One user's rating of a course."""
    userId: str
    rating: int = Field(ge=1, le=5)


class EducatorSummary(BaseModel):
    """Populated educator reference."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    name: Optional[str] = None
    imageUrl: Optional[str] = None


class Course(BaseModel):
    """Course document as returned by the API."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    courseTitle: str
    courseDescription: str = ""
    courseThumbnail: Optional[str] = None
    isPublished: bool = True
    educator: Optional[EducatorSummary] = None
    courseContent: List[Chapter] = Field(default_factory=list)
    courseRatings: List[CourseRating] = Field(default_factory=list)
    enrolledStudents: List[str] = Field(default_factory=list)
    createdAt: Optional[datetime] = None

    @field_validator("educator", mode="before")
    @classmethod
    def _unpopulated_educator(cls, value):
        # Educator listings return the bare identity ID
        if isinstance(value, str):
            return {"_id": value}
        return value


class CourseCreateRequest(BaseModel):
    """Course payload submitted by an educator (JSON inside multipart form)."""
    courseTitle: str = Field(..., min_length=1, max_length=200)
    courseDescription: str = ""
    isPublished: bool = True
    courseContent: List[Chapter] = Field(default_factory=list)
