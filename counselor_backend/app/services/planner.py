import logging
from dataclasses import dataclass, field
from typing import Callable

from app.schemas.plan import PlanYear, YearDescriptor
from app.services.calculations import calculate_credits_achieved
from app.services.catalog_client import CatalogRecord, load_catalog
from app.services.plans import flatten_plan
from app.services.prerequisites import build_prereq_map
from app.services.scheduler import (
    SchedulingOptions,
    build_state,
    fallback_pass,
    greedy_pass,
)

logger = logging.getLogger(__name__)

CatalogLoader = Callable[[str], dict[str, CatalogRecord]]


@dataclass
class OptimizeResult:
    plan: dict[int, PlanYear]
    years: list[YearDescriptor]
    warnings: list[str] = field(default_factory=list)


def optimize(
    plan: dict[int, PlanYear],
    selected_catalog_year: str | None,
    years: list[YearDescriptor],
    pace: str = "normal",
    include_summer: bool = True,
    ensure_full_time: bool = True,
    catalog_loader: CatalogLoader | None = None,
) -> OptimizeResult:
    """Reschedule every not-yet-taken course in ``plan`` into future terms.

    Taken courses stay in place. Unscheduled courses are placed greedily term
    by term honouring prerequisites, standing, availability and the pace's
    credit ceiling; anything left over is placed by a permissive fallback
    pass that may append new years. The input plan is not modified.
    """
    flat = flatten_plan(plan)

    catalog: dict[str, CatalogRecord] = {}
    if selected_catalog_year:
        loader = catalog_loader or load_catalog
        catalog = loader(selected_catalog_year)

    options = SchedulingOptions(
        pace=pace,
        include_summer=include_summer,
        ensure_full_time=ensure_full_time,
        prereqs=build_prereq_map(flat.unscheduled, catalog),
        catalog=catalog,
    )
    state = build_state(
        plan,
        years,
        taken=flat.taken,
        unscheduled=flat.unscheduled,
        baseline_credits=calculate_credits_achieved(plan),
    )

    state = greedy_pass(state, options)
    deferred = len(state.remaining)
    state = fallback_pass(state, options)

    logger.info(
        "optimize_done courses=%s deferred=%s years=%s warnings=%s",
        len(flat.unscheduled),
        deferred,
        len(state.years),
        len(state.warnings),
    )
    return OptimizeResult(plan=state.to_plan(), years=state.years, warnings=state.warnings)
