import logging

import pytest
import requests

from app.services import catalog_client
from app.services.catalog_client import load_catalog, record_from_row


class _FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture
def calls(monkeypatch):
    recorded = []

    def install(response):
        def fake_get(url, params=None, timeout=None):
            recorded.append((url, params, timeout))
            if isinstance(response, Exception):
                raise response
            return response

        monkeypatch.setattr(catalog_client.requests, "get", fake_get)
        return recorded

    return install


def test_load_catalog_parses_courses(calls):
    recorded = calls(
        _FakeResponse(
            {
                "year": "2025",
                "courses": [
                    {
                        "code": "cpts 360",
                        "credits": 4,
                        "offered_terms": ["Fall", "Spring"],
                        "prerequisite_codes": ["cpts 260"],
                        "footnotes": "Junior standing",
                    },
                    {"code": None, "credits": 3},
                ],
            }
        )
    )

    catalog = load_catalog("2025", base_url="http://catalog.test/")

    assert list(catalog) == ["CPTS 360"]
    record = catalog["CPTS 360"]
    assert record.offered_terms == ["fall", "spring"]
    assert record.prerequisite_codes == ["CPTS 260"]
    assert record.notes == "Junior standing"
    url, params, _ = recorded[0]
    assert url == "http://catalog.test/api/catalog/courses"
    assert params["year"] == "2025"


def test_load_catalog_swallows_connection_errors(calls, caplog):
    calls(requests.ConnectionError("refused"))

    with caplog.at_level(logging.WARNING):
        assert load_catalog("2025") == {}
    assert "catalog_load_failed" in caplog.text


def test_load_catalog_treats_error_status_as_unavailable(calls):
    calls(_FakeResponse({"error": "boom"}, status_code=500))
    assert load_catalog("2025") == {}


def test_load_catalog_rejects_malformed_json(calls):
    calls(_FakeResponse(ValueError("not json")))
    assert load_catalog("2025") == {}


def test_record_from_row_accepts_comma_separated_fields():
    record = record_from_row(
        {"code": "MATH 172", "offered_terms": "fall, spring", "prerequisite_codes": "math 171", "concurrent": True}
    )
    assert record.offered_terms == ["fall", "spring"]
    assert record.prerequisite_codes == ["MATH 171"]
    assert record.allow_concurrent
