from __future__ import annotations

from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from booking_relay.api.app import create_app
from booking_relay.config.settings import Settings
from booking_relay.services import build_fetcher

SUITE_HTML = """
<div class="room">
  <div class="room-header-name"><h2>Suite Vista Mar</h2></div>
  <div class="rates">
    <div class="line" data-amount="4000.00"></div>
    <div class="remaining_rooms"><span>3 disponibles</span></div>
  </div>
</div>
"""


def _client(handler: Callable[[httpx.Request], httpx.Response], **overrides) -> TestClient:
    values = {"scrapingbee_api_key": None, "scrapingbee_endpoint": "https://scraper.example/api/v1/"}
    values.update(overrides)
    settings = Settings(**values)
    fetcher = build_fetcher(settings, transport=httpx.MockTransport(handler))
    return TestClient(create_app(settings, fetcher))


def _html(body: str) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=body, headers={"content-type": "text/html"})

    return handler


def _unreachable(request: httpx.Request) -> httpx.Response:
    pytest.fail(f"Unexpected upstream call to {request.url}")


def _content(response) -> str:
    payload = response.json()
    assert list(payload) == ["messages"]
    assert payload["messages"][0]["type"] == "to_user"
    return payload["messages"][0]["content"]


def test_health_reports_fetch_mode():
    direct = _client(_unreachable).get("/health")
    assert direct.json() == {"ok": True, "useScraper": False, "endpoint": "https://scraper.example/api/v1/"}

    proxied = _client(_unreachable, scrapingbee_api_key="secret").get("/health")
    assert proxied.json()["useScraper"] is True


def test_consultar_formats_available_rooms():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text=SUITE_HTML)

    response = _client(handler).get(
        "/consultar",
        params={"check_in": "2025-09-23", "check_out": "2025-09-25", "adultos": "2", "ninos": "0"},
    )

    assert response.status_code == 200
    assert _content(response) == (
        "Productos:\n1. Suite Vista Mar | 3 disp. | Total: $4,000.00 | Por noche: $2,000.00"
    )
    params = seen[0].url.params
    assert params["date_from"] == "2025-09-23"
    assert params["allocations"] == '[{"ad":2,"ch":0,"ages":[30,30]}]'


def test_consultar_without_rooms_reports_no_availability():
    response = _client(_html("<html><body></body></html>")).get(
        "/consultar", params={"check_in": "2025-09-23", "check_out": "2025-09-25"}
    )
    assert response.status_code == 200
    assert _content(response) == "Productos:\nNo hay disponibilidad para las fechas seleccionadas."


def test_consultar_rejects_reversed_dates_in_envelope():
    response = _client(_unreachable).get(
        "/consultar", params={"check_in": "2025-09-25", "check_out": "2025-09-23"}
    )
    assert response.status_code == 400
    assert "La fecha de salida debe ser posterior" in _content(response)


def test_consultar_rejects_missing_dates_in_envelope():
    response = _client(_unreachable).get("/consultar", params={"check_in": "2025-09-25"})
    assert response.status_code == 400
    assert "check_in y check_out" in _content(response)


def test_consultar_wraps_fetch_failures_with_mode_hint():
    failing = lambda request: httpx.Response(200, json={"status": 401, "error": "Invalid api key"})  # noqa: E731
    response = _client(failing, scrapingbee_api_key="secret").get(
        "/consultar", params={"check_in": "2025-09-23", "check_out": "2025-09-25"}
    )
    assert response.status_code == 502
    content = _content(response)
    assert "Scraper error 401: Invalid api key" in content
    assert "SCRAPINGBEE_API_KEY" in content


def test_consultar_wraps_direct_timeouts():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("slow", request=request)

    response = _client(handler).get(
        "/consultar", params={"check_in": "2025-09-23", "check_out": "2025-09-25"}
    )
    assert response.status_code == 502
    assert "Sin API de scraper" in _content(response)


def test_consultar_detalle_returns_offers_and_booking_link():
    response = _client(_html(SUITE_HTML)).get(
        "/consultar/detalle",
        params={"check_in": "2025-09-23", "check_out": "2025-09-25", "ninos": "1", "edades_ninos": "7"},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["habitaciones"] == [
        {"habitacion": "Suite Vista Mar", "precio_total": 4000, "precio_por_noche": 2000, "disponibles": "3"}
    ]
    assert payload["link_busqueda"].endswith("date_from=2025-09-23&date_to=2025-09-25&ad=2&ch=1&ages=30,30,7")


def test_consultar_detalle_reports_parameter_errors():
    response = _client(_unreachable).get(
        "/consultar/detalle", params={"check_in": "2025-09-23", "check_out": "2025-09-23"}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "La fecha de salida debe ser posterior a la fecha de entrada"}


def test_debug_uses_default_dates_and_previews_html():
    seen: list[httpx.Request] = []
    body = SUITE_HTML + "<!--" + "z" * 1000 + "-->"

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text=body)

    response = _client(handler).get("/debug")
    assert response.status_code == 200
    payload = response.json()
    assert payload["useScraper"] is False
    assert payload["rooms_found"] == 1
    assert payload["preview"] == body[:600]
    assert seen[0].url.params["date_from"] == "2025-09-23"
    assert seen[0].url.params["date_to"] == "2025-09-25"


def test_debug_reports_upstream_failure_details():
    response = _client(lambda request: httpx.Response(503, text="maintenance")).get("/debug")
    assert response.status_code == 500
    payload = response.json()
    assert payload["status"] == 503
    assert payload["body"] == "maintenance"
    assert "HTTP 503" in payload["error"]


def _broken(request: httpx.Request) -> httpx.Response:
    raise RuntimeError("parser exploded")


def test_consultar_wraps_unexpected_failures_in_envelope():
    response = _client(_broken).get(
        "/consultar", params={"check_in": "2025-09-23", "check_out": "2025-09-25"}
    )
    assert response.status_code == 502
    assert response.headers["content-type"].startswith("application/json")
    assert "parser exploded" in _content(response)


def test_consultar_with_invalid_search_url_still_returns_envelope():
    response = _client(_unreachable, search_url="http://[bad/").get(
        "/consultar", params={"check_in": "2025-09-23", "check_out": "2025-09-25"}
    )
    assert response.status_code == 502
    assert "No fue posible consultar la disponibilidad" in _content(response)


def test_consultar_detalle_reports_unexpected_failures():
    response = _client(_broken).get(
        "/consultar/detalle", params={"check_in": "2025-09-23", "check_out": "2025-09-25"}
    )
    assert response.status_code == 502
    payload = response.json()
    assert payload["error"] == "parser exploded"
    assert "Sin API de scraper" in payload["hint"]


def test_debug_reports_unexpected_failures_as_json():
    response = _client(_broken).get("/debug")
    assert response.status_code == 500
    assert response.json() == {"error": "parser exploded", "status": None, "body": None}
