"""Fetch strategies for the booking engine search endpoint."""

from .fetchers import (
    DirectFetcher,
    FetchError,
    FetchTimeoutError,
    FetchTransportError,
    HtmlFetcher,
    ProxiedFetcher,
    ScraperServiceError,
    build_fetcher,
)

__all__ = [
    "DirectFetcher",
    "FetchError",
    "FetchTimeoutError",
    "FetchTransportError",
    "HtmlFetcher",
    "ProxiedFetcher",
    "ScraperServiceError",
    "build_fetcher",
]
