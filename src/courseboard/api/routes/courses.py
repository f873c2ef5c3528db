"""Course catalog endpoints."""

from fastapi import APIRouter, Query

from courseboard.api.dependencies import StateStoreDep
from courseboard.api.models import APIResponse, CourseResponse, course_to_response
from courseboard.state_store import SkillLevel

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=APIResponse[list[CourseResponse]])
def list_courses(
    store: StateStoreDep,
    category: str | None = Query(default=None, description="Filter by category"),
    difficulty: SkillLevel | None = Query(default=None, description="Filter by difficulty"),
    search: str | None = Query(default=None, description="Search title and description"),
    limit: int = Query(default=20, ge=1, le=100, description="Max results"),
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
) -> APIResponse[list[CourseResponse]]:
    """List active courses, highest rated first."""
    courses = store.list_courses(
        category=category,
        difficulty=difficulty.value if difficulty else None,
        search=search,
        limit=limit,
        offset=offset,
    )
    return APIResponse(data=[course_to_response(c) for c in courses])


@router.get("/{course_id}", response_model=APIResponse[CourseResponse])
def get_course(course_id: str, store: StateStoreDep) -> APIResponse[CourseResponse]:
    """Get a course by ID."""
    course = store.get_course(course_id)
    return APIResponse(data=course_to_response(course))
