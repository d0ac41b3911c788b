from typing import Literal

from pydantic import BaseModel, Field, field_validator

Term = Literal["fall", "spring", "summer"]
CourseStatus = Literal["not-taken", "planned", "in-progress", "taken"]
Pace = Literal["accelerated", "normal", "relaxed"]


class PlanCourse(BaseModel):
    id: str | int | None = None
    name: str = ""
    prefix: str | None = None
    number: str | int | None = None
    credits: int = Field(0, ge=0)
    status: CourseStatus = "not-taken"
    grade: str | None = None
    # Free text mined for prerequisites and availability cues
    footnotes: list[str] | str | None = None
    attributes: list[str] | str | None = None
    raw: str | None = None
    offered_terms: list[str] | None = None
    alternatives: list[str] | None = None
    allow_concurrent: bool = False

    @field_validator("offered_terms")
    @classmethod
    def _normalize_terms(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return [term.strip().lower() for term in value if term and term.strip()]


class TermBucket(BaseModel):
    courses: list[PlanCourse] = []


class PlanYear(BaseModel):
    fall: TermBucket = Field(default_factory=TermBucket)
    spring: TermBucket = Field(default_factory=TermBucket)
    summer: TermBucket = Field(default_factory=TermBucket)


class YearDescriptor(BaseModel):
    id: int
    name: str


class OptimizeRequest(BaseModel):
    plan: dict[int, PlanYear]
    years: list[YearDescriptor]
    catalog_year: str | None = None
    pace: Pace = "normal"
    include_summer: bool = True
    ensure_full_time: bool = True


class OptimizeResponse(BaseModel):
    plan: dict[int, PlanYear]
    years: list[YearDescriptor]
    warnings: list[str] = []


class TermUpdateRequest(BaseModel):
    plan: dict[int, PlanYear]
    year_id: int
    term: Term
    courses: list[PlanCourse]


class PlanStatsRequest(BaseModel):
    plan: dict[int, PlanYear]


class PlanStatsResponse(BaseModel):
    gpa: float
    credits_achieved: int
    credits_planned: int
    completed_courses: list[str] = []
    duplicate_courses: list[str] = []
