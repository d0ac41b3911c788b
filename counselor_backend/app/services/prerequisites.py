import re
from dataclasses import dataclass

from app.schemas.plan import PlanCourse
from app.services.catalog_client import CatalogRecord
from app.services.plans import PlanEntry

# "CPTS 121", "Math 171", "CptS.360" or a bare "132" after a prefixed code
_TOKEN_RE = re.compile(r"(?<![A-Za-z])([A-Za-z]{2,6})\s*\.?\s*(\d{3})(?!\d)|\b(\d{3})\b")
_INHERIT_CUE_RE = re.compile(r"\bor\b|[,;/]|\band\b")
_OR_CUE_RE = re.compile(r"\bor\b|/")
_MAX_INHERIT_GAP = 80
# Connectors the token pattern would otherwise read as a subject prefix ("or 131")
_CONNECTOR_WORDS = {"or", "and"}


@dataclass
class _Token:
    prefix: str | None
    number: str
    start: int
    end: int

    @property
    def code(self) -> str:
        return f"{self.prefix} {self.number}" if self.prefix else self.number


def _as_text(value: list[str] | str | None) -> str:
    if not value:
        return ""
    if isinstance(value, list):
        return " ".join(str(v) for v in value)
    return str(value)


def course_text(course: PlanCourse, include_name: bool = True) -> str:
    """Free text attached to a course: footnotes, attributes, raw and name."""
    parts = [_as_text(course.footnotes), _as_text(course.attributes), course.raw or ""]
    if include_name:
        parts.append(course.name or "")
    return " ".join(p for p in parts if p)


def canonical_code(code: str) -> str:
    return " ".join(str(code or "").split()).upper()


def _tokenize(text: str) -> list[_Token]:
    tokens = []
    for match in _TOKEN_RE.finditer(text):
        if match.group(1) and match.group(1).lower() in _CONNECTOR_WORDS:
            tokens.append(_Token(None, match.group(2), match.start(2), match.end()))
        elif match.group(1):
            tokens.append(
                _Token(match.group(1).upper(), match.group(2), match.start(), match.end())
            )
        else:
            tokens.append(_Token(None, match.group(3), match.start(), match.end()))
    return tokens


def _inherit_prefixes(text: str, tokens: list[_Token]) -> None:
    for i, token in enumerate(tokens):
        if token.prefix:
            continue
        for j in range(i - 1, -1, -1):
            between = text[tokens[j].end:token.start].lower()
            if len(between) > _MAX_INHERIT_GAP:
                break
            if _INHERIT_CUE_RE.search(between):
                token.prefix = tokens[j].prefix
                break


def extract_prereq_groups(text: str) -> list[list[str]]:
    """Mine prerequisite groups from free text.

    Each group lists alternative codes (any one satisfies it); every group
    must be satisfied. ``"CPTS 121 or 131, MATH 171"`` yields
    ``[["CPTS 121", "CPTS 131"], ["MATH 171"]]``.
    """
    if not text:
        return []
    tokens = _tokenize(text)
    if not tokens:
        return []
    _inherit_prefixes(text, tokens)

    groups: list[list[str]] = []
    current = [canonical_code(tokens[0].code)]
    for prev, token in zip(tokens, tokens[1:]):
        between = text[prev.end:token.start].lower()
        if _OR_CUE_RE.search(between):
            current.append(canonical_code(token.code))
        else:
            groups.append(list(dict.fromkeys(current)))
            current = [canonical_code(token.code)]
    groups.append(list(dict.fromkeys(current)))
    return groups


def _own_codes(entry: PlanEntry) -> set[str]:
    codes = {canonical_code(entry.key)}
    leading = _TOKEN_RE.match(entry.course.name or "")
    if leading and leading.group(1):
        codes.add(f"{leading.group(1).upper()} {leading.group(2)}")
    return codes


def _clean_groups(groups: list[list[str]], own_codes: set[str]) -> list[list[str]]:
    # A course never lists itself as a prerequisite
    cleaned = []
    for group in groups:
        codes = [canonical_code(code) for code in group]
        codes = [code for code in dict.fromkeys(codes) if code and code not in own_codes]
        if codes:
            cleaned.append(codes)
    return cleaned


def build_prereq_map(
    entries: list[PlanEntry],
    catalog: dict[str, CatalogRecord],
) -> dict[str, list[list[str]]]:
    """Prerequisite groups per course key, mined from text with catalog fallback.

    Entries without explicit offered terms pick up the catalog's offered terms.
    """
    prereqs: dict[str, list[list[str]]] = {}
    for entry in entries:
        own_codes = _own_codes(entry)
        groups = _clean_groups(extract_prereq_groups(course_text(entry.course)), own_codes)
        meta = catalog.get(entry.key.upper())
        if meta is not None:
            if not entry.offered_terms and meta.offered_terms:
                entry.offered_terms = list(meta.offered_terms)
            if not groups and meta.prerequisite_codes:
                groups = _clean_groups([[code] for code in meta.prerequisite_codes], own_codes)
        prereqs[entry.key] = groups
    return prereqs
