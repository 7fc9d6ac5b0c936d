"""Entry point for running the relay HTTP server."""
from __future__ import annotations

import argparse
import logging

import uvicorn

from booking_relay.api.app import create_app
from booking_relay.config.settings import Settings
from booking_relay.core.logging import configure_logging


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve room availability as chat-ready JSON")
    parser.add_argument("--host", help="Bind address (defaults to RELAY_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Listen port (defaults to PORT or 8000)")
    parser.add_argument("--log-level", help="Logging level (defaults to RELAY_LOG_LEVEL or INFO)")
    args = parser.parse_args()

    overrides = {
        key: value
        for key, value in (("host", args.host), ("port", args.port), ("log_level", args.log_level))
        if value is not None
    }
    settings = Settings(**overrides)
    configure_logging(settings.log_level, settings.log_dir)
    logging.info("Server on http://%s:%s (useScraper=%s)", settings.host, settings.port, settings.use_scraper)

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()
