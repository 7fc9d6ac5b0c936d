"""Fetchers that retrieve the booking engine's search HTML."""
from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from urllib.parse import urlsplit

import httpx

from booking_relay.config.settings import Settings

logger = logging.getLogger(__name__)

BODY_SNIPPET_LIMIT = 500
SERVICE_MESSAGE_LIMIT = 300

PROXIED_HINT = "Revisa SCRAPINGBEE_API_KEY y saldo/plan en ScrapingBee."
DIRECT_HINT = "Sin API de scraper: el sitio puede bloquear o devolver vacío desde servidores en la nube."


class FetchError(RuntimeError):
    """Base error for a failed search fetch."""

    @staticmethod
    def hint(proxied: bool) -> str:
        return PROXIED_HINT if proxied else DIRECT_HINT


class FetchTransportError(FetchError):
    """Raised on connection failures and non-success HTTP responses."""

    def __init__(self, message: str, *, status: Optional[int] = None, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class FetchTimeoutError(FetchTransportError):
    """Raised when the upstream call exceeds the configured timeout."""


class ScraperServiceError(FetchError):
    """Raised when the scraping service reports a failure inside its response body."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"Scraper error {status}: {message}")
        self.status = status
        self.message = message


def _snippet(text: str, limit: int = BODY_SNIPPET_LIMIT) -> str:
    return text[:limit]


class HtmlFetcher(ABC):
    """Retrieves raw response text for a search URL."""

    mode: str = ""

    def __init__(
        self,
        *,
        headers: Dict[str, str],
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.headers = dict(headers)
        self.timeout = timeout
        self._transport = transport

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """URL actually contacted by this fetcher."""

    @property
    def proxied(self) -> bool:
        return False

    @abstractmethod
    async def fetch(self, url: str) -> str:
        """Return the response body for ``url`` or raise :class:`FetchError`."""

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def _get(self, url: str, *, params: Optional[Dict[str, str]] = None) -> httpx.Response:
        # httpx timeouts apply per connect/read step; wait_for bounds the whole exchange.
        try:
            async with self._client() as client:
                return await asyncio.wait_for(
                    client.get(url, params=params, headers=self.headers),
                    self.timeout,
                )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise FetchTimeoutError(f"Timed out after {self.timeout:g}s contacting {urlsplit(url).netloc}") from exc
        except httpx.HTTPError as exc:
            raise FetchTransportError(f"Request to {urlsplit(url).netloc} failed: {exc}") from exc
        except httpx.InvalidURL as exc:
            raise FetchTransportError(f"Invalid upstream URL: {exc}") from exc


class DirectFetcher(HtmlFetcher):
    """Requests the search endpoint directly with browser-like headers."""

    mode = "direct"

    def __init__(self, *, search_url: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._search_url = search_url

    @property
    def endpoint(self) -> str:
        return self._search_url

    async def fetch(self, url: str) -> str:
        logger.info("Fetching search results directly from %s", urlsplit(url).netloc)
        response = await self._get(url)
        if not response.is_success:
            raise FetchTransportError(
                f"HTTP {response.status_code}: {_snippet(response.text)}",
                status=response.status_code,
                body=_snippet(response.text),
            )
        return response.text


class ProxiedFetcher(HtmlFetcher):
    """Relays the search request through the scraping service."""

    mode = "proxied"

    def __init__(self, *, api_key: str, service_url: str, **kwargs: Any) -> None:
        if not api_key:
            raise ValueError("Scraping service API key must be provided")
        super().__init__(**kwargs)
        self._api_key = api_key
        self._service_url = service_url

    @property
    def endpoint(self) -> str:
        return self._service_url

    @property
    def proxied(self) -> bool:
        return True

    def _service_params(self, url: str) -> Dict[str, str]:
        return {
            "api_key": self._api_key,
            "url": url,
            "render_js": "false",
            "premium_proxy": "true",
            "forward_headers": "true",
        }

    async def fetch(self, url: str) -> str:
        logger.info("Fetching search results for %s via scraping service", urlsplit(url).netloc)
        response = await self._get(self._service_url, params=self._service_params(url))

        payload = _json_payload(response)
        if isinstance(payload, dict) and (payload.get("status") or payload.get("error")):
            status = payload.get("status") or 500
            message = payload.get("error") or payload.get("message") or json.dumps(payload)[:SERVICE_MESSAGE_LIMIT]
            logger.warning("Scraping service reported failure %s: %s", status, message)
            raise ScraperServiceError(status, str(message))

        if not response.is_success:
            raise FetchTransportError(
                f"Scraper HTTP {response.status_code}: {_snippet(response.text)}",
                status=response.status_code,
                body=_snippet(response.text),
            )
        return response.text


def _json_payload(response: httpx.Response) -> Any:
    content_type = response.headers.get("content-type", "")
    if "json" not in content_type.lower():
        return None
    try:
        return response.json()
    except ValueError:
        logger.debug("Scraping service response declared JSON but did not parse")
        return None


def build_fetcher(settings: Settings, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> HtmlFetcher:
    """Select the fetch strategy once from configuration."""
    common: Dict[str, Any] = {
        "headers": settings.request_headers(),
        "timeout": settings.request_timeout_s,
        "transport": transport,
    }
    if settings.use_scraper:
        return ProxiedFetcher(
            api_key=settings.scrapingbee_api_key or "",
            service_url=settings.scrapingbee_endpoint,
            **common,
        )
    return DirectFetcher(search_url=settings.search_url, **common)
