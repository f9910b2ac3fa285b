"""
Pydantic models for users, progress records and the user endpoints.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, StrictInt


class UserRecord(BaseModel):
    """User document as returned by the API."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id")
    name: Optional[str] = None
    email: Optional[str] = None
    imageUrl: Optional[str] = None
    role: str = "student"  # "student" | "educator"
    enrolledCourses: List[str] = Field(default_factory=list)
    createdAt: Optional[datetime] = None


class CourseProgressRecord(BaseModel):
    """Completed lecture IDs for one (user, course) pair."""
    model_config = ConfigDict(extra="ignore")

    userId: str
    courseId: str
    completed: bool = False
    lectureCompleted: List[str] = Field(default_factory=list)


# =============================================================================
# Request Schemas
# =============================================================================

class EnrollRequest(BaseModel):
    """Request body for enrolling in a course."""
    courseId: str = Field(..., min_length=1)


class ProgressUpdateRequest(BaseModel):
    """Request body for marking a lecture complete."""
    courseId: str = Field(..., min_length=1)
    lectureId: str = Field(..., min_length=1)


class ProgressQueryRequest(BaseModel):
    """Request body for reading course progress."""
    courseId: str = Field(..., min_length=1)


class RatingRequest(BaseModel):
    """Request body for rating a course. Range is checked by the pipeline."""
    courseId: str = Field(..., min_length=1)
    # No coercion: true, "5" and 5.0 are rejected, not read as integers
    rating: Optional[StrictInt] = None
