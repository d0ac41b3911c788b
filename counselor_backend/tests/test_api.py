import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import get_db
from app.main import app
from app.models.base import Base


@pytest.fixture
def client():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _catalog_rows():
    return {
        "courses": [
            {
                "catalog_year": "2024",
                "code": "CPTS 121",
                "prefix": "CPTS",
                "number": "121",
                "title": "Program Design",
                "credits": 4,
                "offered_terms": ["fall", "spring"],
            },
            {
                "catalog_year": "2025",
                "code": "CPTS 360",
                "prefix": "CPTS",
                "number": "360",
                "title": "Systems Programming",
                "credits": 4,
                "prerequisite_codes": ["CPTS 260"],
                "offered_terms": ["spring"],
            },
            {
                "catalog_year": "2025",
                "code": "MATH 171",
                "prefix": "MATH",
                "number": "171",
                "title": "Calculus I",
                "credits": 4,
                "offered_terms": ["fall", "spring", "summer"],
            },
        ]
    }


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_catalog_round_trip(client):
    created = client.post("/api/catalog/courses", json=_catalog_rows())
    assert created.status_code == 200
    assert len(created.json()) == 3

    latest = client.get("/api/catalog/courses").json()
    assert latest["year"] == "2025"
    assert latest["total"] == 2
    by_code = {c["code"]: c for c in latest["courses"]}
    assert by_code["CPTS 360"]["prerequisite_codes"] == ["CPTS 260"]

    summer = client.get("/api/catalog/courses", params={"year": "2025", "term": "summer"}).json()
    assert [c["code"] for c in summer["courses"]] == ["MATH 171"]

    assert client.get("/api/catalog/years").json() == ["2025", "2024"]


def test_catalog_without_years_is_bad_request(client):
    assert client.get("/api/catalog/courses").status_code == 400


def _plan_payload():
    return {
        "1": {
            "fall": {"courses": [{"name": "CPTS 121", "prefix": "CPTS", "number": "121", "credits": 4, "status": "taken", "grade": "A"}]},
            "spring": {"courses": []},
            "summer": {"courses": []},
        },
        "2": {
            "fall": {
                "courses": [
                    {"name": "CPTS 132", "prefix": "CPTS", "number": 132, "credits": 4, "footnotes": "Prerequisite: CPTS 121"}
                ]
            }
        },
    }


def test_optimize_endpoint(client):
    resp = client.post(
        "/api/plans/optimize",
        json={
            "plan": _plan_payload(),
            "years": [{"id": 1, "name": "Year 1"}, {"id": 2, "name": "Year 2"}],
            "pace": "normal",
        },
    )

    assert resp.status_code == 200
    body = resp.json()
    assert [c["name"] for c in body["plan"]["1"]["fall"]["courses"]] == ["CPTS 121", "CPTS 132"]
    assert body["plan"]["2"]["fall"]["courses"] == []
    assert body["warnings"] == []


def test_optimize_rejects_unknown_pace(client):
    resp = client.post(
        "/api/plans/optimize",
        json={"plan": {}, "years": [], "pace": "leisurely"},
    )
    assert resp.status_code == 422


def test_stats_endpoint(client):
    body = client.post("/api/plans/stats", json={"plan": _plan_payload()}).json()
    assert body["credits_achieved"] == 4
    assert body["credits_planned"] == 8
    assert body["gpa"] == 4.0
    assert body["completed_courses"] == ["CPTS 121"]


def test_term_update_endpoint(client):
    resp = client.put(
        "/api/plans/terms",
        json={
            "plan": _plan_payload(),
            "year_id": 1,
            "term": "summer",
            "courses": [{"name": "HIST 105", "credits": 3}],
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert [c["name"] for c in body["1"]["summer"]["courses"]] == ["HIST 105"]
    assert [c["name"] for c in body["2"]["fall"]["courses"]] == ["CPTS 132"]


def test_catalog_filters_by_ucore_and_credit_range(client):
    rows = [
        {"catalog_year": "2025", "code": "HIST 105", "prefix": "HIST", "number": "105", "credits": 3, "ucore": "ROOT"},
        {"catalog_year": "2025", "code": "MATH 171", "prefix": "MATH", "number": "171", "credits": 4, "ucore": "QUAN"},
        {
            "catalog_year": "2025",
            "code": "CPTS 499",
            "prefix": "CPTS",
            "number": "499",
            "credits": 1,
            "credits_phrase": "1-4",
        },
    ]
    client.post("/api/catalog/courses", json={"courses": rows})

    quan = client.get("/api/catalog/courses", params={"ucore": "quan"}).json()
    assert [c["code"] for c in quan["courses"]] == ["MATH 171"]
    assert quan["courses"][0]["ucore"] == "QUAN"

    ranged = client.get("/api/catalog/courses", params={"min_credits": 2, "max_credits": 3}).json()
    assert [c["code"] for c in ranged["courses"]] == ["HIST 105"]

    small = client.get("/api/catalog/courses", params={"max_credits": 1}).json()
    assert small["courses"][0]["credits_phrase"] == "1-4"
    assert client.get("/api/catalog/courses", params={"min_credits": -1}).status_code == 422
