"""Normalisation of inbound search query parameters."""
from __future__ import annotations

import logging
import re
from datetime import date
from typing import List, Optional

from .search_payloads import SearchParameters

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")
_DIGIT_RUNS = re.compile(r"\d+")

MISSING_DATES_MESSAGE = "Parámetros requeridos: check_in y check_out (YYYY-MM-DD)"
NON_POSITIVE_STAY_MESSAGE = "La fecha de salida debe ser posterior a la fecha de entrada"


class ParameterError(ValueError):
    """Raised when a search request is missing dates or describes an empty stay."""


def parse_int_safe(value: object, default: int = 0) -> int:
    """Parse an integer after stripping every non-digit character.

    ``"2 adultos"`` becomes ``2`` and ``"-1"`` becomes ``1``; missing or digit-free
    input falls back to ``default``.
    """
    digits = _NON_DIGITS.sub("", str(value if value is not None else ""))
    if not digits:
        return default
    return int(digits)


def parse_child_ages(raw: Optional[str]) -> List[int]:
    if not raw:
        return []
    return [int(match) for match in _DIGIT_RUNS.findall(raw)]


def parse_stay_date(raw: Optional[str]) -> Optional[date]:
    if not raw:
        return None
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        logger.debug("Unable to parse stay date %r", raw)
        return None


def nights_between(check_in: Optional[date], check_out: Optional[date]) -> int:
    if check_in is None or check_out is None:
        return 0
    return (check_out - check_in).days


def normalize_search_parameters(
    check_in: Optional[str],
    check_out: Optional[str],
    adultos: Optional[str] = None,
    ninos: Optional[str] = None,
    edades_ninos: Optional[str] = None,
) -> SearchParameters:
    """Build best-effort search parameters from raw query strings; never raises."""
    check_in_raw = str(check_in or "")
    check_out_raw = str(check_out or "")
    return SearchParameters(
        check_in_raw=check_in_raw,
        check_out_raw=check_out_raw,
        check_in=parse_stay_date(check_in_raw),
        check_out=parse_stay_date(check_out_raw),
        adults=parse_int_safe(adultos, 2),
        children=parse_int_safe(ninos, 0),
        child_ages=parse_child_ages(edades_ninos),
    )


def require_valid_stay(params: SearchParameters) -> int:
    """Return the night count, or raise :class:`ParameterError` for an unusable stay."""
    if not params.check_in_raw or not params.check_out_raw:
        raise ParameterError(MISSING_DATES_MESSAGE)
    nights = nights_between(params.check_in, params.check_out)
    if nights <= 0:
        logger.info(
            "Rejecting stay %s → %s (%s nights)",
            params.check_in_raw,
            params.check_out_raw,
            nights,
        )
        raise ParameterError(NON_POSITIVE_STAY_MESSAGE)
    return nights
