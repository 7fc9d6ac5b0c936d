"""FastAPI application exposing the room availability relay."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from booking_relay.config.settings import Settings
from booking_relay.hotels import RoomOffer, build_envelope, build_offers_envelope, extract_room_offers
from booking_relay.services import (
    FetchError,
    FetchTransportError,
    HtmlFetcher,
    ScraperServiceError,
    build_fetcher,
)
from booking_relay.tasks.query_params import (
    ParameterError,
    nights_between,
    normalize_search_parameters,
    require_valid_stay,
)
from booking_relay.tasks.search_payloads import SearchParameters, build_booking_link, build_target_url

logger = logging.getLogger(__name__)

DEBUG_CHECK_IN = "2025-09-23"
DEBUG_CHECK_OUT = "2025-09-25"
PREVIEW_LIMIT = 600


def _error_status_body(exc: FetchError) -> Tuple[Optional[int], Optional[str]]:
    if isinstance(exc, FetchTransportError):
        return exc.status, exc.body
    if isinstance(exc, ScraperServiceError):
        return exc.status, exc.message
    return None, None


def create_app(settings: Optional[Settings] = None, fetcher: Optional[HtmlFetcher] = None) -> FastAPI:
    settings = settings or Settings()
    fetcher = fetcher or build_fetcher(settings)

    app = FastAPI(title="Booking Relay", version="0.1.0")
    app.state.settings = settings
    app.state.fetcher = fetcher

    def target_url(params: SearchParameters) -> str:
        return build_target_url(params, search_url=settings.search_url, hotel_code=settings.hotel_code)

    async def search(params: SearchParameters) -> List[RoomOffer]:
        nights = require_valid_stay(params)
        html = await fetcher.fetch(target_url(params))
        return extract_room_offers(html, nights)

    def fetch_failure_text(exc: Exception) -> str:
        return f"No fue posible consultar la disponibilidad: {exc}. {FetchError.hint(fetcher.proxied)}"

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        return {"ok": True, "useScraper": fetcher.proxied, "endpoint": settings.scrapingbee_endpoint}

    @app.get("/consultar")
    async def consultar(
        check_in: Optional[str] = None,
        check_out: Optional[str] = None,
        adultos: Optional[str] = None,
        ninos: Optional[str] = None,
        edades_ninos: Optional[str] = None,
    ) -> JSONResponse:
        params = normalize_search_parameters(check_in, check_out, adultos, ninos, edades_ninos)
        try:
            offers = await search(params)
        except ParameterError as exc:
            return JSONResponse(status_code=400, content=build_envelope(str(exc)))
        except FetchError as exc:
            logger.warning("Search fetch failed (%s mode): %s", fetcher.mode, exc)
            return JSONResponse(status_code=502, content=build_envelope(fetch_failure_text(exc)))
        except Exception as exc:
            logger.exception("Unexpected failure while searching %s → %s", params.check_in_raw, params.check_out_raw)
            return JSONResponse(status_code=502, content=build_envelope(fetch_failure_text(exc)))
        return JSONResponse(content=build_offers_envelope(offers, settings.currency_symbol))

    @app.get("/consultar/detalle")
    async def consultar_detalle(
        check_in: Optional[str] = None,
        check_out: Optional[str] = None,
        adultos: Optional[str] = None,
        ninos: Optional[str] = None,
        edades_ninos: Optional[str] = None,
    ) -> JSONResponse:
        params = normalize_search_parameters(check_in, check_out, adultos, ninos, edades_ninos)
        try:
            offers = await search(params)
        except ParameterError as exc:
            return JSONResponse(status_code=400, content={"error": str(exc)})
        except FetchError as exc:
            logger.warning("Search fetch failed (%s mode): %s", fetcher.mode, exc)
            return JSONResponse(
                status_code=502,
                content={"error": str(exc), "hint": exc.hint(fetcher.proxied)},
            )
        except Exception as exc:
            logger.exception("Unexpected failure while searching %s → %s", params.check_in_raw, params.check_out_raw)
            return JSONResponse(
                status_code=502,
                content={"error": str(exc), "hint": FetchError.hint(fetcher.proxied)},
            )
        return JSONResponse(
            content={
                "habitaciones": RoomOffer.from_iterable(offers),
                "link_busqueda": build_booking_link(params, booking_url=settings.booking_url),
            }
        )

    @app.get("/debug")
    async def debug(
        check_in: Optional[str] = None,
        check_out: Optional[str] = None,
        adultos: Optional[str] = None,
        ninos: Optional[str] = None,
    ) -> JSONResponse:
        params = normalize_search_parameters(
            check_in or DEBUG_CHECK_IN,
            check_out or DEBUG_CHECK_OUT,
            adultos,
            ninos,
        )
        try:
            html = await fetcher.fetch(target_url(params))
            offers = extract_room_offers(html, nights_between(params.check_in, params.check_out))
        except FetchError as exc:
            status, body = _error_status_body(exc)
            return JSONResponse(status_code=500, content={"error": str(exc), "status": status, "body": body})
        except Exception as exc:
            logger.exception("Debug search failed")
            return JSONResponse(status_code=500, content={"error": str(exc), "status": None, "body": None})
        return JSONResponse(
            content={
                "useScraper": fetcher.proxied,
                "endpoint": settings.scrapingbee_endpoint,
                "rooms_found": len(offers),
                "preview": html[:PREVIEW_LIMIT],
            }
        )

    logger.info("Relay ready (%s)", settings.describe())
    return app
