"""
FastAPI router for educator endpoints.

Provides endpoints for the role upgrade, course publishing and the
educator dashboard.
"""

import logging
from typing import Annotated, Optional, Dict, Any

from fastapi import APIRouter, Depends, File, Form, UploadFile

from common.auth.base import AuthProvider
from common.utils import success_response
from coursehub.config import Settings
from coursehub.dependencies import (
    require_auth,
    require_educator,
    get_auth_provider,
    get_course_service,
    get_user_service,
    get_thumbnail_service,
    get_settings,
)
from coursehub.pipelines.educator import (
    update_role_to_educator_pipeline,
    add_course_pipeline,
    get_educator_courses_pipeline,
    get_educator_dashboard_pipeline,
    get_enrolled_students_pipeline,
)
from coursehub.services.course.course_service import CourseService
from coursehub.services.media.thumbnail_service import ThumbnailService
from coursehub.services.user.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/educator", tags=["educator"])


@router.get("/update-role")
async def update_role_to_educator(
    claims: Annotated[Dict[str, Any], Depends(require_auth)],
    auth_provider: Annotated[AuthProvider, Depends(get_auth_provider)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Grant the current user the educator role."""
    result = await update_role_to_educator_pipeline(
        auth_provider=auth_provider,
        user_service=user_service,
        user_id=claims["sub"]
    )
    return success_response(message=result["message"])


@router.post("/add-course")
async def add_course(
    claims: Annotated[Dict[str, Any], Depends(require_educator)],
    course_service: Annotated[CourseService, Depends(get_course_service)],
    thumbnail_service: Annotated[ThumbnailService, Depends(get_thumbnail_service)],
    courseData: Annotated[Optional[str], Form()] = None,
    image: Annotated[Optional[UploadFile], File()] = None,
):
    """Publish a course. Multipart form with courseData JSON and an image file."""
    image_content = await image.read() if image is not None else None

    result = await add_course_pipeline(
        course_service=course_service,
        thumbnail_service=thumbnail_service,
        educator_id=claims["sub"],
        course_data=courseData,
        image_filename=image.filename if image is not None else None,
        image_content=image_content,
        image_content_type=image.content_type if image is not None else None
    )
    return success_response(message=result["message"])


@router.get("/courses")
async def get_educator_courses(
    claims: Annotated[Dict[str, Any], Depends(require_educator)],
    course_service: Annotated[CourseService, Depends(get_course_service)],
):
    """Get the current educator's courses."""
    courses = await get_educator_courses_pipeline(course_service, claims["sub"])
    return success_response(courses=courses)


@router.get("/dashboard")
async def get_educator_dashboard(
    claims: Annotated[Dict[str, Any], Depends(require_educator)],
    course_service: Annotated[CourseService, Depends(get_course_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Get course and enrollment totals plus the latest enrollments."""
    dashboard = await get_educator_dashboard_pipeline(
        course_service=course_service,
        user_service=user_service,
        educator_id=claims["sub"],
        latest_limit=settings.DASHBOARD_LATEST_LIMIT
    )
    return success_response(dashboardData=dashboard)


@router.get("/enrolled-students")
async def get_enrolled_students(
    claims: Annotated[Dict[str, Any], Depends(require_educator)],
    course_service: Annotated[CourseService, Depends(get_course_service)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Get every student enrolled in the current educator's courses."""
    enrolled_students = await get_enrolled_students_pipeline(
        course_service=course_service,
        user_service=user_service,
        educator_id=claims["sub"]
    )
    return success_response(enrolledStudents=enrolled_students)
