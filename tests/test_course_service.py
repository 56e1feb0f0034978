from pathlib import Path

import pytest
from fastapi import HTTPException

from api.services.course_service import (
    CourseCatalog,
    FavoritesRepository,
    get_course_or_404,
    is_downloaded,
)
from api.utils import question_set_path, write_json_file
from helpers import make_course


def test_bundled_catalog_loads() -> None:
    catalog = CourseCatalog.from_file()

    assert len(catalog) == 25
    saa = catalog.get("SAA-C03")
    assert saa is not None
    assert saa.company == "Amazon Web Services"
    assert saa.question_url.startswith("https://raw.githubusercontent.com/")
    assert set(saa.exams) == {"quick", "intermediate", "real"}
    assert all(detail.question_count > 0 for detail in saa.exams.values())


def test_catalog_rejects_duplicates() -> None:
    with pytest.raises(ValueError):
        CourseCatalog([make_course("A"), make_course("A")])


def test_catalog_from_invalid_file(tmp_path: Path) -> None:
    path = tmp_path / "courses.json"
    write_json_file(path, {"short_name": "A"})
    with pytest.raises(ValueError):
        CourseCatalog.from_file(path)


def test_get_course_or_404() -> None:
    catalog = CourseCatalog([make_course("A")])
    assert get_course_or_404(catalog, "A").short_name == "A"
    with pytest.raises(HTTPException) as excinfo:
        get_course_or_404(catalog, "B")
    assert excinfo.value.status_code == 404


def test_is_downloaded(data_dir: Path) -> None:
    assert is_downloaded("A", data_dir) is False
    write_json_file(question_set_path("A", data_dir), [])
    assert is_downloaded("A", data_dir) is True


def test_favorites_persist(db_session) -> None:
    catalog = CourseCatalog([make_course("A"), make_course("B"), make_course("C")])
    favorites = FavoritesRepository(db_session)

    assert favorites.add("C") is True
    assert favorites.add("A") is True
    assert favorites.add("A") is False
    assert favorites.ids() == {"A", "C"}
    assert [c.short_name for c in favorites.courses(catalog)] == ["A", "C"]

    assert FavoritesRepository(db_session).contains("C")
    assert favorites.remove("C") is True
    assert favorites.remove("C") is False
    assert favorites.ids() == {"A"}
