from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.course import (
    CatalogCourseCreateRequest,
    CatalogCourseListResponse,
    CatalogCourseResponse,
)
from app.schemas.plan import (
    OptimizeRequest,
    OptimizeResponse,
    PlanStatsRequest,
    PlanStatsResponse,
    PlanYear,
    TermUpdateRequest,
)
from app.services.calculations import (
    calculate_credits_achieved,
    calculate_credits_planned,
    calculate_gpa,
    completed_course_codes,
    duplicate_course_codes,
)
from app.services.courses import (
    bulk_create_catalog_courses,
    list_catalog_courses,
    list_catalog_years,
)
from app.services.planner import optimize
from app.services.plans import apply_term_update

router = APIRouter(prefix="/api")


# ── Plans ─────────────────────────────────────────────────────────────────────

@router.post("/plans/optimize", response_model=OptimizeResponse)
def optimize_plan_endpoint(payload: OptimizeRequest):
    result = optimize(
        payload.plan,
        payload.catalog_year,
        payload.years,
        pace=payload.pace,
        include_summer=payload.include_summer,
        ensure_full_time=payload.ensure_full_time,
    )
    return OptimizeResponse(plan=result.plan, years=result.years, warnings=result.warnings)


@router.post("/plans/stats", response_model=PlanStatsResponse)
def plan_stats_endpoint(payload: PlanStatsRequest):
    return PlanStatsResponse(
        gpa=calculate_gpa(payload.plan),
        credits_achieved=calculate_credits_achieved(payload.plan),
        credits_planned=calculate_credits_planned(payload.plan),
        completed_courses=completed_course_codes(payload.plan),
        duplicate_courses=duplicate_course_codes(payload.plan),
    )


@router.put("/plans/terms", response_model=dict[int, PlanYear])
def update_term_endpoint(payload: TermUpdateRequest):
    return apply_term_update(payload.plan, payload.year_id, payload.term, payload.courses)


# ── Catalog ───────────────────────────────────────────────────────────────────

@router.post("/catalog/courses", response_model=list[CatalogCourseResponse])
def bulk_create_catalog_courses_endpoint(
    payload: CatalogCourseCreateRequest,
    db: Session = Depends(get_db),
):
    return bulk_create_catalog_courses(db, payload.courses)


@router.get("/catalog/courses", response_model=CatalogCourseListResponse)
def list_catalog_courses_endpoint(
    year: str | None = None,
    code: str | None = None,
    prefix: str | None = None,
    ucore: str | None = None,
    min_credits: float | None = Query(None, ge=0),
    max_credits: float | None = Query(None, ge=0),
    term: str | None = None,
    search: str | None = None,
    limit: int = Query(100, ge=1, le=10000),
    db: Session = Depends(get_db),
):
    return list_catalog_courses(
        db,
        year=year,
        code=code,
        prefix=prefix,
        ucore=ucore,
        min_credits=min_credits,
        max_credits=max_credits,
        term=term,
        search=search,
        limit=limit,
    )


@router.get("/catalog/years", response_model=list[str])
def list_catalog_years_endpoint(db: Session = Depends(get_db)):
    return list_catalog_years(db)
