import json

from fastapi import HTTPException
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.models.course import CatalogCourse
from app.schemas.course import (
    CatalogCourseCreate,
    CatalogCourseListResponse,
    CatalogCourseResponse,
)

_JSON_LIST_FIELDS = ("prerequisite_codes", "offered_terms")


def bulk_create_catalog_courses(
    db: Session, courses: list[CatalogCourseCreate]
) -> list[CatalogCourseResponse]:
    items = []
    for course in courses:
        data = course.model_dump()
        for name in _JSON_LIST_FIELDS:
            data[name] = json.dumps(data[name])
        items.append(CatalogCourse(**data))
    db.add_all(items)
    db.commit()
    for item in items:
        db.refresh(item)
    return [_to_response(item) for item in items]


def list_catalog_years(db: Session) -> list[str]:
    rows = (
        db.query(CatalogCourse.catalog_year)
        .distinct()
        .order_by(CatalogCourse.catalog_year.desc())
        .all()
    )
    return [row[0] for row in rows]


def list_catalog_courses(
    db: Session,
    year: str | None = None,
    code: str | None = None,
    prefix: str | None = None,
    ucore: str | None = None,
    min_credits: float | None = None,
    max_credits: float | None = None,
    term: str | None = None,
    search: str | None = None,
    limit: int = 100,
) -> CatalogCourseListResponse:
    if not year:
        years = list_catalog_years(db)
        year = years[0] if years else None
    if not year:
        raise HTTPException(
            status_code=400,
            detail="year query parameter is required or no catalog years available",
        )

    query = db.query(CatalogCourse).filter(CatalogCourse.catalog_year == year)
    if code:
        query = query.filter(CatalogCourse.code == code)
    if prefix:
        query = query.filter(func.lower(CatalogCourse.prefix) == prefix.lower())
    if ucore:
        query = query.filter(func.lower(CatalogCourse.ucore).like(f"%{ucore.lower()}%"))
    if min_credits is not None:
        query = query.filter(CatalogCourse.credits >= min_credits)
    if max_credits is not None:
        query = query.filter(CatalogCourse.credits <= max_credits)
    if term:
        query = query.filter(func.lower(CatalogCourse.offered_terms).like(f"%{term.lower()}%"))
    if search:
        pattern = f"%{search.lower()}%"
        query = query.filter(
            or_(
                func.lower(CatalogCourse.title).like(pattern),
                func.lower(CatalogCourse.description).like(pattern),
                func.lower(CatalogCourse.code).like(pattern),
            )
        )

    rows = (
        query.order_by(CatalogCourse.prefix, CatalogCourse.number, CatalogCourse.code)
        .limit(limit)
        .all()
    )
    courses = [_to_response(row) for row in rows]
    return CatalogCourseListResponse(year=year, total=len(courses), courses=courses)


def _to_response(row: CatalogCourse) -> CatalogCourseResponse:
    return CatalogCourseResponse(
        id=row.id,
        catalog_year=row.catalog_year,
        code=row.code,
        prefix=row.prefix,
        number=row.number,
        title=row.title,
        description=row.description,
        credits=row.credits,
        credits_phrase=row.credits_phrase,
        ucore=row.ucore,
        prerequisite_raw=row.prerequisite_raw,
        prerequisite_codes=_load_list(row.prerequisite_codes),
        offered_terms=_load_list(row.offered_terms),
        footnotes=row.footnotes,
        attributes=row.attributes,
        notes=row.notes,
        allow_concurrent=bool(row.allow_concurrent),
    )


def _load_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except ValueError:
        return []
    return [str(item) for item in value] if isinstance(value, list) else []
