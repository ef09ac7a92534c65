from __future__ import annotations

import pytest
from fastapi import FastAPI
from starlette.testclient import TestClient

from moodlog.app.metrics import REQUEST_COUNT, REQUEST_ERRORS
from moodlog.app.middleware import RequestLoggingMiddleware


def _metric_value(counter, **labels) -> float:
    for family in counter.collect():
        for sample in family.samples:
            if sample.name.endswith("_total") and all(
                sample.labels.get(key) == value for key, value in labels.items()
            ):
                return sample.value
    return 0.0


def _app_with_middleware() -> FastAPI:
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)
    return app


def test_request_logging_uses_route_template() -> None:
    app = _app_with_middleware()

    @app.get("/api/weather/{city}")
    async def weather(city: str) -> dict[str, str]:  # pragma: no cover - executed via client
        return {"city": city}

    labels = {"method": "GET", "path": "/api/weather/{city}", "status": "200"}
    before = _metric_value(REQUEST_COUNT, **labels)
    with TestClient(app) as client:
        response = client.get("/api/weather/Oslo")
    after = _metric_value(REQUEST_COUNT, **labels)

    assert response.status_code == 200
    assert response.headers.get("X-Request-ID")
    assert after == pytest.approx(before + 1.0)


def test_request_id_header_is_propagated() -> None:
    app = _app_with_middleware()

    @app.get("/ping")
    async def ping() -> dict[str, str]:  # pragma: no cover - executed via client
        return {"pong": "ok"}

    with TestClient(app) as client:
        response = client.get("/ping", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"


def test_request_logging_failure_logs_error(caplog: pytest.LogCaptureFixture) -> None:
    app = _app_with_middleware()

    @app.get("/boom")
    async def boom() -> dict[str, str]:  # pragma: no cover - executed via client
        raise RuntimeError("boom")

    labels = {"method": "GET", "path": "/boom", "status": "500"}
    before_count = _metric_value(REQUEST_COUNT, **labels)
    before_errors = _metric_value(REQUEST_ERRORS, **labels)

    with TestClient(app) as client:
        with pytest.raises(RuntimeError):
            client.get("/boom")

    assert _metric_value(REQUEST_COUNT, **labels) == pytest.approx(before_count + 1.0)
    assert _metric_value(REQUEST_ERRORS, **labels) == pytest.approx(before_errors + 1.0)
    assert any(record.message == "request failed" for record in caplog.records)
