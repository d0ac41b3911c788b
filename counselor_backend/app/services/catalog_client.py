import logging
from dataclasses import dataclass, field

import requests

from app.core.config import settings

logger = logging.getLogger(__name__)


@dataclass
class CatalogRecord:
    code: str
    credits: int | None = None
    offered_terms: list[str] = field(default_factory=list)
    prerequisite_codes: list[str] = field(default_factory=list)
    notes: str | None = None
    allow_concurrent: bool = False


def _as_list(value) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(item).strip() for item in value if str(item).strip()]


def record_from_row(row: dict) -> CatalogRecord:
    return CatalogRecord(
        code=str(row["code"]).upper(),
        credits=row.get("credits"),
        offered_terms=[term.lower() for term in _as_list(row.get("offered_terms"))],
        prerequisite_codes=[code.upper() for code in _as_list(row.get("prerequisite_codes"))],
        notes=row.get("notes") or row.get("footnotes"),
        allow_concurrent=bool(row.get("allow_concurrent") or row.get("concurrent")),
    )


def load_catalog(catalog_year: str, base_url: str | None = None) -> dict[str, CatalogRecord]:
    """Fetch catalog metadata for ``catalog_year`` keyed by upper-cased course code.

    Any transport error, non-success status or malformed payload is logged and
    yields an empty mapping so scheduling can continue on text-mined data.
    """
    url = f"{(base_url or settings.catalog_api_url).rstrip('/')}/api/catalog/courses"
    try:
        resp = requests.get(
            url,
            params={"year": catalog_year, "limit": settings.catalog_fetch_limit},
            timeout=settings.catalog_timeout_seconds,
        )
        resp.raise_for_status()
        payload = resp.json()
    except (requests.RequestException, ValueError) as exc:
        logger.warning("catalog_load_failed year=%s err=%s", catalog_year, exc)
        return {}

    catalog: dict[str, CatalogRecord] = {}
    rows = payload.get("courses") if isinstance(payload, dict) else None
    for row in rows or []:
        if not isinstance(row, dict) or not row.get("code"):
            continue
        record = record_from_row(row)
        catalog[record.code] = record
    logger.info("catalog_loaded year=%s records=%s", catalog_year, len(catalog))
    return catalog
