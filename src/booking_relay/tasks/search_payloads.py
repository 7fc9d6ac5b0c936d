"""Utilities for building booking engine search requests."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional
from urllib.parse import urlencode

# The search endpoint expects one age per guest; adults are sent with a fixed age.
ADULT_FILLER_AGE = 30


@dataclass
class SearchParameters:
    check_in_raw: str
    check_out_raw: str
    check_in: Optional[date]
    check_out: Optional[date]
    adults: int = 2
    children: int = 0
    child_ages: List[int] = field(default_factory=list)

    @property
    def guest_ages(self) -> List[int]:
        return [ADULT_FILLER_AGE] * self.adults + list(self.child_ages)


@dataclass(frozen=True)
class OccupancyAllocation:
    adults: int
    children: int
    ages: tuple[int, ...]

    def to_dict(self) -> dict[str, object]:
        return {"ad": self.adults, "ch": self.children, "ages": list(self.ages)}


def build_allocations(params: SearchParameters) -> List[OccupancyAllocation]:
    """Return the single-room allocation list expected by the search endpoint."""
    return [
        OccupancyAllocation(
            adults=params.adults,
            children=params.children,
            ages=tuple(params.guest_ages),
        )
    ]


def _date_param(parsed: Optional[date], raw: str) -> str:
    return parsed.isoformat() if parsed is not None else raw


def build_target_url(params: SearchParameters, *, search_url: str, hotel_code: str) -> str:
    allocations = [allocation.to_dict() for allocation in build_allocations(params)]
    query = {
        "destination_id": "",
        "hotel_codes": hotel_code,
        "date_from": _date_param(params.check_in, params.check_in_raw),
        "date_to": _date_param(params.check_out, params.check_out_raw),
        "allocations": json.dumps(allocations, separators=(",", ":")),
        "sorting": "PRICE_ASC",
        "reset": "false",
        "force_room": "",
        "promo_code": "",
        "get_standard_rates": "1",
    }
    return f"{search_url}?{urlencode(query)}"


def build_booking_link(params: SearchParameters, *, booking_url: str) -> str:
    """Deep link to the public room selection page for the same stay."""
    ages = ",".join(str(age) for age in params.guest_ages)
    return (
        f"{booking_url}?date_from={_date_param(params.check_in, params.check_in_raw)}"
        f"&date_to={_date_param(params.check_out, params.check_out_raw)}"
        f"&ad={params.adults}&ch={params.children}&ages={ages}"
    )
