import re

from app.schemas.plan import PlanYear
from app.services.plans import iter_courses

PASSING_GRADES = {"A", "A-", "B+", "B", "B-", "C+", "C", "P"}

_COMPLETED_CODE_RE = re.compile(r"^([A-Z]{2,6}\s*\d{3})", re.IGNORECASE)
_PLANNED_CODE_RE = re.compile(r"^([A-Z\s&/]{2,15})\s*(\d{3})", re.IGNORECASE)


def calculate_credits_achieved(plan: dict[int, PlanYear]) -> int:
    return sum(
        course.credits or 0
        for _, _, course in iter_courses(plan)
        if course.status == "taken" and course.grade in PASSING_GRADES
    )


def calculate_credits_planned(plan: dict[int, PlanYear]) -> int:
    return sum(
        course.credits
        for _, _, course in iter_courses(plan)
        if course.name and course.credits > 0
    )


def calculate_gpa(plan: dict[int, PlanYear]) -> float:
    total_points = 0.0
    total_credits = 0
    for _, _, course in iter_courses(plan):
        if course.status != "taken" or not course.grade or not course.credits:
            continue
        points = _grade_points(course.grade)
        # P and unrecognised grades stay out of the average
        if points is None:
            continue
        total_points += points * course.credits
        total_credits += course.credits

    if total_credits == 0:
        return 0.0
    return round(total_points / total_credits, 2)


def completed_course_codes(plan: dict[int, PlanYear]) -> list[str]:
    codes = []
    for _, _, course in iter_courses(plan):
        if course.status != "taken" or not course.name:
            continue
        match = _COMPLETED_CODE_RE.match(course.name)
        if match:
            codes.append(" ".join(match.group(1).split()).upper())
    return codes


def duplicate_course_codes(plan: dict[int, PlanYear]) -> list[str]:
    seen: set[str] = set()
    duplicates: dict[str, None] = {}
    for _, _, course in iter_courses(plan):
        if not course.name:
            continue
        match = _PLANNED_CODE_RE.match(course.name)
        if not match:
            continue
        code = f"{match.group(1).strip().upper()} {match.group(2)}"
        if code in seen:
            duplicates[code] = None
        seen.add(code)
    return list(duplicates)


def _grade_points(grade: str) -> float | None:
    normalized = grade.strip().upper()
    scale = {
        "A": 4.0,
        "A-": 3.7,
        "B+": 3.3,
        "B": 3.0,
        "B-": 2.7,
        "C+": 2.3,
        "C": 2.0,
        "C-": 1.7,
        "D+": 1.3,
        "D": 1.0,
        "F": 0.0,
    }
    return scale.get(normalized)
