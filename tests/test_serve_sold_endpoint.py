from __future__ import annotations

import pytest

import serve
from soldcomps.cache import ResultCache
from soldcomps.config import Settings
from soldcomps.models import Listing, SearchOutcome
from soldcomps.pipeline import SoldCompsService


class FakeProvider:
    def __init__(self, prices: list[float], error: Exception | None = None) -> None:
        self.prices = prices
        self.error = error

    def search(self, query: str) -> SearchOutcome:
        if self.error is not None:
            raise self.error
        return SearchOutcome(listings=[Listing(title=query, price=price) for price in self.prices])


@pytest.fixture
def install_service(monkeypatch):
    def _install(primary: FakeProvider, fallback: FakeProvider) -> SoldCompsService:
        service = SoldCompsService(
            Settings(serpapi_api_key="k"),
            primary=primary,
            fallback=fallback,
            cache=ResultCache(3600),
        )
        monkeypatch.setattr(serve, "_SERVICE", service)
        return service

    return _install


def _assert_cors(response) -> None:  # noqa: ANN001
    assert response.headers["Access-Control-Allow-Origin"] == "*"
    assert response.headers["Access-Control-Allow-Headers"] == "*"
    assert response.headers["Access-Control-Allow-Methods"] == "*"


def test_missing_query_is_bad_request(install_service) -> None:  # noqa: ANN001
    install_service(FakeProvider([1.0, 2.0, 3.0]), FakeProvider([]))
    client = serve.app.test_client()
    for url in ("/api/sold", "/api/sold?q=%20%20"):
        response = client.get(url)
        assert response.status_code == 400
        assert response.get_json() == {"error": "Missing query parameter q"}
        _assert_cors(response)


def test_success_payload_and_cache_flag(install_service) -> None:  # noqa: ANN001
    install_service(FakeProvider([10.0, 20.0, 30.0]), FakeProvider([]))
    client = serve.app.test_client()

    first = client.get("/api/sold?q=nintendo+switch")
    second = client.get("/.netlify/functions/ebaySales?q=nintendo+switch")

    assert first.status_code == 200
    body = first.get_json()
    assert body["query"] == "nintendo switch"
    assert body["source"] == "primary"
    assert body["cached"] is False
    assert body["stats"]["count"] == 3
    assert body["items"][0] == {"title": "nintendo switch", "price": 10.0}
    assert second.get_json()["cached"] is True
    _assert_cors(first)


def test_upstream_failure_is_internal_error(install_service) -> None:  # noqa: ANN001
    install_service(FakeProvider([], error=RuntimeError("SerpAPI ERROR 503")), FakeProvider([]))
    client = serve.app.test_client()

    response = client.get("/api/sold?q=camera")

    assert response.status_code == 500
    assert response.get_json() == {"error": "Internal Server Error", "message": "SerpAPI ERROR 503"}
    _assert_cors(response)


def test_preflight_short_circuits(install_service) -> None:  # noqa: ANN001
    install_service(FakeProvider([], error=AssertionError("should not be called")), FakeProvider([]))
    client = serve.app.test_client()

    response = client.options("/api/sold")

    assert response.status_code == 200
    assert response.get_data(as_text=True) == "Preflight check successful"
    _assert_cors(response)


def test_health(install_service) -> None:  # noqa: ANN001
    install_service(FakeProvider([1.0, 2.0, 3.0]), FakeProvider([]))
    client = serve.app.test_client()
    client.get("/api/sold?q=x")
    body = client.get("/api/health").get_json()
    assert body == {"status": "ok", "cache_entries": 1, "fallback_configured": True}
