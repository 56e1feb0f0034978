"""Course catalog and favorites endpoints."""
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_catalog, get_course, get_data_dir, get_favorites
from api.models import CourseResponse, FavoriteResponse
from api.services.course_service import CourseCatalog, FavoritesRepository, is_downloaded
from models import Course

router = APIRouter(prefix="/api/courses", tags=["courses"])


@router.get("", response_model=list[CourseResponse])
def list_courses(
    catalog: Annotated[CourseCatalog, Depends(get_catalog)],
    favorites: Annotated[FavoritesRepository, Depends(get_favorites)],
    data_dir: Annotated[Path, Depends(get_data_dir)],
    favorites_only: bool = Query(False, alias="favorites"),
) -> list[CourseResponse]:
    """List all courses with favorite and download state."""
    favorite_ids = favorites.ids()
    courses = catalog.all()
    if favorites_only:
        courses = [course for course in courses if course.short_name in favorite_ids]
    return [
        CourseResponse.from_course(
            course,
            is_favorite=course.short_name in favorite_ids,
            is_downloaded=is_downloaded(course.short_name, data_dir),
        )
        for course in courses
    ]


@router.get("/{course_id}", response_model=CourseResponse)
def get_course_details(
    course: Annotated[Course, Depends(get_course)],
    favorites: Annotated[FavoritesRepository, Depends(get_favorites)],
    data_dir: Annotated[Path, Depends(get_data_dir)],
) -> CourseResponse:
    return CourseResponse.from_course(
        course,
        is_favorite=favorites.contains(course.short_name),
        is_downloaded=is_downloaded(course.short_name, data_dir),
    )


@router.put("/{course_id}/favorite", response_model=FavoriteResponse)
def add_favorite(
    course: Annotated[Course, Depends(get_course)],
    favorites: Annotated[FavoritesRepository, Depends(get_favorites)],
) -> FavoriteResponse:
    favorites.add(course.short_name)
    return FavoriteResponse(course_id=course.short_name, is_favorite=True)


@router.delete("/{course_id}/favorite", response_model=FavoriteResponse)
def remove_favorite(
    course: Annotated[Course, Depends(get_course)],
    favorites: Annotated[FavoritesRepository, Depends(get_favorites)],
) -> FavoriteResponse:
    favorites.remove(course.short_name)
    return FavoriteResponse(course_id=course.short_name, is_favorite=False)
