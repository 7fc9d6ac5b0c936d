"""Dataclasses for extracted room offers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

UNAVAILABLE_TEXT = "N/A"


@dataclass(frozen=True, slots=True)
class Price:
    """A price that is either a numeric amount or unavailable."""

    amount: Optional[float] = None

    @property
    def available(self) -> bool:
        return self.amount is not None

    def per_night(self, nights: int) -> "Price":
        if self.amount is None or nights <= 0:
            return UNAVAILABLE
        return Price(round(self.amount / nights, 2))

    def to_json(self) -> Union[float, str]:
        return self.amount if self.amount is not None else UNAVAILABLE_TEXT


UNAVAILABLE = Price()


@dataclass(slots=True)
class RoomOffer:
    """One room / rate plan with pricing and remaining units."""

    name: str
    total: Price
    nightly: Price
    available: int
    rate_label: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {"habitacion": self.name}
        if self.rate_label:
            payload["tipo"] = self.rate_label
        payload.update(
            {
                "precio_total": self.total.to_json(),
                "precio_por_noche": self.nightly.to_json(),
                "disponibles": str(self.available),
            }
        )
        return payload

    @classmethod
    def from_iterable(cls, offers: Iterable["RoomOffer"]) -> List[dict[str, object]]:
        return [offer.to_dict() for offer in offers]
