"""Runtime configuration for the relay.

Relies on pydantic-settings so that environment variables (prefixed with ``RELAY_``)
can override defaults. The scraping-service key and the listen port are also read
from the bare ``SCRAPINGBEE_API_KEY`` and ``PORT`` variables used by hosting
platforms. See `.env.example` for common values.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Captures runtime configuration for the relay."""

    scrapingbee_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SCRAPINGBEE_API_KEY", "RELAY_SCRAPINGBEE_API_KEY"),
        description="Scraping service API key; leave unset to fetch the booking site directly",
    )
    scrapingbee_endpoint: str = Field(
        default="https://app.scrapingbee.com/api/v1/",
        description="Scraping service endpoint used in proxied mode",
    )

    host: str = Field(default="0.0.0.0")
    port: int = Field(
        default=8000,
        validation_alias=AliasChoices("PORT", "RELAY_PORT"),
        description="Listen port for the HTTP server",
    )
    log_level: str = Field(default="INFO")
    log_dir: Optional[Path] = Field(
        default=None, description="Directory for relay.log; stream logging only when unset"
    )
    request_timeout_s: float = Field(
        default=30.0, description="Wall-clock ceiling for a whole upstream fetch, body included"
    )

    landing_url: str = Field(
        default="https://binniguendahuatulco.bookinweb.es/es/booking/",
        description="Booking landing page, sent as the Referer header",
    )
    search_url: str = Field(
        default="https://binniguendahuatulco.bookinweb.es/es/booking/ajax/search/",
        description="AJAX search endpoint that returns the room list HTML",
    )
    booking_url: str = Field(
        default="https://binniguendahuatulco.bookinweb.es/es/booking/process/room",
        description="Public room selection page linked back to the guest",
    )
    hotel_code: str = Field(default="HBH", description="Hotel identifier understood by the booking engine")
    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    accept_language: str = Field(default="es-ES,es;q=0.9,en;q=0.8")
    currency_symbol: str = Field(default="$", description="Prefix for rendered MXN amounts")

    model_config = SettingsConfigDict(
        env_prefix="RELAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("scrapingbee_api_key", mode="before")
    def _blank_key_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        stripped = str(value).strip()
        return stripped or None

    @field_validator("log_dir", mode="before")
    def _expand_log_dir(cls, value: str | Path | None) -> Optional[Path]:
        if value in (None, ""):
            return None
        return Path(value).expanduser()

    @field_validator("request_timeout_s")
    def _validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("request_timeout_s must be positive")
        return value

    @property
    def use_scraper(self) -> bool:
        return self.scrapingbee_api_key is not None

    def request_headers(self) -> dict[str, str]:
        """Return the browser-like header set sent with every search request."""
        return {
            "User-Agent": self.user_agent,
            "Accept-Language": self.accept_language,
            "X-Requested-With": "XMLHttpRequest",
            "Referer": self.landing_url,
        }

    def describe(self) -> str:
        mode = "proxied" if self.use_scraper else "direct"
        return f"{mode} fetch, timeout {self.request_timeout_s:g}s, listening on {self.host}:{self.port}"
