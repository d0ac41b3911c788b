from dataclasses import dataclass, field
from typing import Iterator

from app.schemas.plan import PlanCourse, PlanYear, TermBucket

TERMS = ("fall", "spring", "summer")
TERM_ORDER = {"fall": 1, "spring": 2, "summer": 3}


@dataclass
class PlanEntry:
    course: PlanCourse
    key: str
    original_year: int
    original_term: str
    offered_terms: list[str] | None = None

    @property
    def credits(self) -> int:
        return self.course.credits or 0


@dataclass
class FlatPlan:
    taken: set[str] = field(default_factory=set)
    unscheduled: list[PlanEntry] = field(default_factory=list)


def course_key(course: PlanCourse) -> str:
    prefix = "".join(str(course.prefix).split()).upper() if course.prefix else ""
    number = str(course.number).strip() if course.number is not None else ""
    if prefix and number:
        return f"{prefix} {number}"
    return course.name.upper()


def iter_courses(plan: dict[int, PlanYear]) -> Iterator[tuple[int, str, PlanCourse]]:
    for year_id, year in plan.items():
        for term in TERMS:
            for course in getattr(year, term).courses:
                yield year_id, term, course


def flatten_plan(plan: dict[int, PlanYear]) -> FlatPlan:
    flat = FlatPlan()
    for year_id, term, course in iter_courses(plan):
        if not course.name:
            continue
        key = course_key(course)
        if course.status == "taken":
            flat.taken.add(key)
            continue
        flat.unscheduled.append(
            PlanEntry(
                course=course,
                key=key,
                original_year=int(year_id),
                original_term=term,
                offered_terms=list(course.offered_terms) if course.offered_terms else None,
            )
        )
    return flat


def empty_year() -> PlanYear:
    return PlanYear(fall=TermBucket(), spring=TermBucket(), summer=TermBucket())


def apply_term_update(
    plan: dict[int, PlanYear],
    year_id: int,
    term: str,
    courses: list[PlanCourse],
) -> dict[int, PlanYear]:
    """Return a new plan whose ``year_id``/``term`` bucket holds ``courses``.

    Untouched years are shared with the input plan; the input is never mutated.
    A year missing from the plan is created empty before the update.
    """
    if term not in TERMS:
        raise ValueError(f"Unknown term '{term}'. Must be one of: {list(TERMS)}")
    updated = dict(plan)
    year = updated.get(year_id) or empty_year()
    updated[year_id] = year.model_copy(update={term: TermBucket(courses=list(courses))})
    return updated
