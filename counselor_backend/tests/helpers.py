from app.schemas.plan import PlanCourse, PlanYear, TermBucket, YearDescriptor


def course(code: str, credits: int = 3, status: str = "not-taken", **fields) -> PlanCourse:
    prefix, _, number = code.partition(" ")
    return PlanCourse(
        id=code,
        name=code,
        prefix=prefix if number else None,
        number=number or None,
        credits=credits,
        status=status,
        **fields,
    )


def taken(code: str, credits: int = 3, grade: str = "A", **fields) -> PlanCourse:
    return course(code, credits=credits, status="taken", grade=grade, **fields)


def make_plan(layout: dict[int, dict[str, list[PlanCourse]]], year_count: int = 0) -> dict[int, PlanYear]:
    year_ids = set(layout) | set(range(1, year_count + 1))
    plan = {}
    for year_id in sorted(year_ids):
        terms = layout.get(year_id, {})
        plan[year_id] = PlanYear(
            fall=TermBucket(courses=terms.get("fall", [])),
            spring=TermBucket(courses=terms.get("spring", [])),
            summer=TermBucket(courses=terms.get("summer", [])),
        )
    return plan


def make_years(count: int) -> list[YearDescriptor]:
    return [YearDescriptor(id=i, name=f"Year {i}") for i in range(1, count + 1)]


def placements(plan: dict[int, PlanYear]) -> dict[str, tuple[int, str]]:
    found = {}
    for year_id, year in plan.items():
        for term in ("fall", "spring", "summer"):
            for item in getattr(year, term).courses:
                found[item.name] = (year_id, term)
    return found


def names(plan: dict[int, PlanYear], year_id: int, term: str) -> list[str]:
    return [item.name for item in getattr(plan[year_id], term).courses]


def term_credits(plan: dict[int, PlanYear], year_id: int, term: str) -> int:
    return sum(item.credits for item in getattr(plan[year_id], term).courses)
