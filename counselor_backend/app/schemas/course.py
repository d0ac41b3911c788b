from pydantic import BaseModel


class CatalogCourseCreate(BaseModel):
    catalog_year: str
    code: str
    prefix: str | None = None
    number: str | None = None
    title: str | None = None
    description: str | None = None
    credits: int | None = None
    credits_phrase: str | None = None
    ucore: str | None = None
    prerequisite_raw: str | None = None
    prerequisite_codes: list[str] = []
    offered_terms: list[str] = []
    footnotes: str | None = None
    attributes: str | None = None
    notes: str | None = None
    allow_concurrent: bool = False


class CatalogCourseCreateRequest(BaseModel):
    courses: list[CatalogCourseCreate]


class CatalogCourseResponse(CatalogCourseCreate):
    id: int


class CatalogCourseListResponse(BaseModel):
    year: str
    total: int
    courses: list[CatalogCourseResponse] = []
