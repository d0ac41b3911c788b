import logging
from dataclasses import dataclass, field

from app.schemas.plan import PlanCourse, PlanYear, TermBucket, YearDescriptor
from app.services.catalog_client import CatalogRecord
from app.services.constraints import (
    allowed_in_term,
    allows_concurrent,
    fits,
    is_summer_only,
    level_requirement,
    meets_standing,
    standing_from_credits,
)
from app.services.plans import TERM_ORDER, TERMS, PlanEntry

logger = logging.getLogger(__name__)

# Slot advances allowed per course in the fallback pass before it is forced
SAFETY_SLOT_LIMIT = 500


@dataclass(frozen=True)
class TermSlot:
    year_id: int
    term: str


@dataclass
class SchedulingOptions:
    pace: str = "normal"
    include_summer: bool = True
    ensure_full_time: bool = True
    prereqs: dict[str, list[list[str]]] = field(default_factory=dict)
    catalog: dict[str, CatalogRecord] = field(default_factory=dict)


@dataclass
class SchedulerState:
    years: list[YearDescriptor]
    slots: list[TermSlot]
    buckets: dict[int, dict[str, list[PlanCourse]]]
    # Credits per slot: everything in the bucket vs. only what the optimizer placed
    term_credits: dict[TermSlot, int]
    placed_credits: dict[TermSlot, int]
    scheduled: set[str]
    remaining: dict[int, PlanEntry]
    baseline_credits: int = 0
    warnings: list[str] = field(default_factory=list)

    def credits_before(self, index: int) -> int:
        return self.baseline_credits + sum(
            self.placed_credits[slot] for slot in self.slots[:index]
        )

    def place(self, slot: TermSlot, position: int, entry: PlanEntry) -> None:
        update = {}
        if entry.offered_terms != entry.course.offered_terms:
            update["offered_terms"] = list(entry.offered_terms or [])
        course = entry.course.model_copy(update=update, deep=True)
        self.buckets[slot.year_id][slot.term].append(course)
        self.term_credits[slot] += entry.credits
        self.placed_credits[slot] += entry.credits
        self.scheduled.add(entry.key)
        del self.remaining[position]

    def add_year(self) -> TermSlot:
        ids = [y.id for y in self.years] + list(self.buckets.keys())
        new_id = max(ids) + 1 if ids else 1
        self.years.append(YearDescriptor(id=new_id, name=f"Year {new_id}"))
        self.buckets[new_id] = {term: [] for term in TERMS}
        new_slots = [TermSlot(new_id, term) for term in TERMS]
        for slot in new_slots:
            self.slots.append(slot)
            self.term_credits[slot] = 0
            self.placed_credits[slot] = 0
        logger.info("fallback_year_added year_id=%s", new_id)
        return new_slots[0]

    def to_plan(self) -> dict[int, PlanYear]:
        return {
            year_id: PlanYear(
                fall=TermBucket(courses=terms["fall"]),
                spring=TermBucket(courses=terms["spring"]),
                summer=TermBucket(courses=terms["summer"]),
            )
            for year_id, terms in self.buckets.items()
        }


def build_state(
    plan: dict[int, PlanYear],
    years: list[YearDescriptor],
    taken: set[str],
    unscheduled: list[PlanEntry],
    baseline_credits: int = 0,
) -> SchedulerState:
    """Seed scheduler state with the courses that stay where they are.

    Taken and unnamed courses keep their original bucket; everything in
    ``unscheduled`` is waiting to be placed.
    """
    year_list = [YearDescriptor(id=y.id, name=y.name) for y in years]
    buckets: dict[int, dict[str, list[PlanCourse]]] = {
        y.id: {term: [] for term in TERMS} for y in year_list
    }
    for year_id in plan:
        buckets.setdefault(int(year_id), {term: [] for term in TERMS})

    slots = [TermSlot(y.id, term) for y in year_list for term in TERMS]
    term_credits = {slot: 0 for slot in slots}
    for year_id, year in plan.items():
        for term in TERMS:
            for course in getattr(year, term).courses:
                if course.name and course.status != "taken":
                    continue
                buckets[int(year_id)][term].append(course.model_copy(deep=True))
                slot = TermSlot(int(year_id), term)
                if slot in term_credits:
                    term_credits[slot] += course.credits or 0

    return SchedulerState(
        years=year_list,
        slots=slots,
        buckets=buckets,
        term_credits=term_credits,
        placed_credits={slot: 0 for slot in slots},
        scheduled=set(taken),
        remaining=dict(enumerate(unscheduled)),
        baseline_credits=baseline_credits,
    )


def prereqs_satisfied(
    entry: PlanEntry,
    standing: str,
    state: SchedulerState,
    options: SchedulingOptions,
) -> bool:
    alternatives = entry.course.alternatives
    if alternatives:
        # Eligible only when no listed alternative carries prerequisites
        return not any(
            options.prereqs.get(" ".join(str(alt).split()).upper())
            for alt in alternatives
        )

    meta = options.catalog.get(entry.key.upper())
    if not meets_standing(standing, level_requirement(entry, meta)):
        return False

    concurrent = None
    for group in options.prereqs.get(entry.key, []):
        if any(code in state.scheduled for code in group):
            continue
        if concurrent is None:
            concurrent = allows_concurrent(entry, meta)
        if not concurrent:
            return False
    return True


def _candidate_order(entry: PlanEntry, slot: TermSlot) -> tuple[int, int, int]:
    # Summer-only courses never pass allowed_in_term outside summer, so the
    # last element only orders callers that skip the availability filter
    summer_only_late = 1 if slot.term != "summer" and is_summer_only(entry) else 0
    return (entry.original_year, TERM_ORDER[entry.original_term], summer_only_late)


def greedy_pass(state: SchedulerState, options: SchedulingOptions) -> SchedulerState:
    for index, slot in enumerate(list(state.slots)):
        if not state.remaining:
            break
        standing = standing_from_credits(state.credits_before(index))
        candidates = [
            (position, entry)
            for position, entry in state.remaining.items()
            if allowed_in_term(entry, slot.term, options.include_summer)
            and prereqs_satisfied(entry, standing, state, options)
        ]
        candidates.sort(key=lambda item: _candidate_order(item[1], slot))

        for position, entry in candidates:
            if fits(state.term_credits[slot], entry.credits, options.pace, options.ensure_full_time):
                state.place(slot, position, entry)

    logger.debug("greedy_pass_done remaining=%s", len(state.remaining))
    return state


def fallback_pass(state: SchedulerState, options: SchedulingOptions) -> SchedulerState:
    """Place leftovers ignoring prerequisites, growing the plan by whole years."""
    leftovers = sorted(
        state.remaining.items(),
        key=lambda item: (item[1].original_year, TERM_ORDER[item[1].original_term]),
    )
    if leftovers:
        logger.info("fallback_pass_start courses=%s", len(leftovers))

    for position, entry in leftovers:
        index = 0
        while True:
            if index >= len(state.slots):
                state.add_year()
            slot = state.slots[index]
            if allowed_in_term(entry, slot.term, options.include_summer) and fits(
                state.term_credits[slot], entry.credits, options.pace, options.ensure_full_time
            ):
                state.place(slot, position, entry)
                break
            index += 1
            if index > SAFETY_SLOT_LIMIT:
                last = state.slots[-1]
                state.place(last, position, entry)
                message = f"Could not place {entry.key}; forced into year {last.year_id} {last.term}"
                state.warnings.append(message)
                logger.warning("fallback_forced course=%s year_id=%s term=%s", entry.key, last.year_id, last.term)
                break
    return state
