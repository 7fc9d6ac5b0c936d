"""Logging helpers."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional


def configure_logging(level: str, log_dir: Optional[Path] = None) -> None:
    """Configure basic logging for the server and CLI scripts."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / "relay.log"))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=handlers,
        force=True,
    )
    # httpx logs request URLs at INFO; proxied URLs carry the scraping service key.
    logging.getLogger("httpx").setLevel(max(logging.WARNING, logging.getLogger().level))
