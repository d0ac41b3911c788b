import re

from app.services.catalog_client import CatalogRecord
from app.services.plans import PlanEntry
from app.services.prerequisites import course_text

PACE_CREDIT_LIMITS = {"accelerated": 23, "normal": 18, "relaxed": 12}
DEFAULT_CREDIT_LIMIT = 18
FULL_TIME_CREDITS = 12
FULL_TIME_BOOST_LIMIT = 14  # relaxed pace may stretch to this to reach full time

STANDINGS = ("freshman", "sophomore", "junior", "senior")

_NOT_SUMMER_CUES = ("not offered summer", "not summer", "fall/spring")
_JUNIOR_RE = re.compile(r"\bjunior\b")
_SENIOR_RE = re.compile(r"\bsenior\b")


def _availability_text(entry: PlanEntry) -> str:
    course = entry.course
    parts = []
    for value in (course.attributes, course.footnotes):
        if isinstance(value, list):
            parts.append(" ".join(str(v) for v in value))
        elif value:
            parts.append(str(value))
    return " ".join(parts).lower()


def allowed_in_term(entry: PlanEntry, term: str, include_summer: bool = True) -> bool:
    if entry.offered_terms:
        return term in entry.offered_terms

    text = _availability_text(entry)
    if any(cue in text for cue in _NOT_SUMMER_CUES):
        return term != "summer"
    if "summer only" in text:
        return term == "summer"

    if not include_summer and term == "summer":
        return False
    return True


def is_summer_only(entry: PlanEntry) -> bool:
    return entry.offered_terms == ["summer"]


def credit_ceiling(pace: str) -> int:
    return PACE_CREDIT_LIMITS.get(pace, DEFAULT_CREDIT_LIMIT)


def fits(current_credits: int, course_credits: int, pace: str, ensure_full_time: bool) -> bool:
    new_total = current_credits + course_credits
    if new_total <= credit_ceiling(pace):
        return True
    if ensure_full_time and pace == "relaxed":
        return current_credits < FULL_TIME_CREDITS and new_total <= FULL_TIME_BOOST_LIMIT
    return False


def standing_from_credits(credits: int) -> str:
    if credits >= 90:
        return "senior"
    if credits >= 60:
        return "junior"
    if credits >= 30:
        return "sophomore"
    return "freshman"


def level_requirement(entry: PlanEntry, meta: CatalogRecord | None) -> str | None:
    text = course_text(entry.course, include_name=False)
    if meta is not None and meta.notes:
        text = f"{text} {meta.notes}"
    text = text.lower()
    if _JUNIOR_RE.search(text):
        return "junior"
    if _SENIOR_RE.search(text):
        return "senior"
    return None


def meets_standing(standing: str, required: str | None) -> bool:
    if required is None:
        return True
    return STANDINGS.index(standing) >= STANDINGS.index(required)


def allows_concurrent(entry: PlanEntry, meta: CatalogRecord | None) -> bool:
    if entry.course.allow_concurrent:
        return True
    if meta is not None and meta.allow_concurrent:
        return True
    return "concurrent" in course_text(entry.course, include_name=False).lower()
