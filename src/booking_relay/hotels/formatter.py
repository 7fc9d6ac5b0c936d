"""Rendering of room offers into the chat message envelope."""
from __future__ import annotations

from typing import Iterable, Sequence

from .models import Price, RoomOffer, UNAVAILABLE_TEXT

PRODUCTS_HEADER = "Productos:"
NO_AVAILABILITY_LINE = "No hay disponibilidad para las fechas seleccionadas."
MESSAGE_TYPE = "to_user"


def format_currency(price: Price, symbol: str = "$") -> str:
    """Render an MXN amount the way es-MX prints it, e.g. ``$4,000.00``."""
    if price.amount is None:
        return UNAVAILABLE_TEXT
    sign = "-" if price.amount < 0 else ""
    return f"{sign}{symbol}{abs(price.amount):,.2f}"


def format_offer_line(index: int, offer: RoomOffer, symbol: str = "$") -> str:
    parts = [f"{index}. {offer.name}"]
    if offer.rate_label:
        parts.append(f"Tipo: {offer.rate_label}")
    parts.append(f"{offer.available} disp.")
    parts.append(f"Total: {format_currency(offer.total, symbol)}")
    parts.append(f"Por noche: {format_currency(offer.nightly, symbol)}")
    return " | ".join(parts)


def format_offers(offers: Sequence[RoomOffer], symbol: str = "$") -> str:
    if not offers:
        return f"{PRODUCTS_HEADER}\n{NO_AVAILABILITY_LINE}"
    lines = [format_offer_line(index, offer, symbol) for index, offer in enumerate(offers, start=1)]
    return "\n".join([PRODUCTS_HEADER, *lines])


def build_envelope(content: str) -> dict[str, object]:
    return {"messages": [{"type": MESSAGE_TYPE, "content": content}]}


def build_offers_envelope(offers: Iterable[RoomOffer], symbol: str = "$") -> dict[str, object]:
    return build_envelope(format_offers(list(offers), symbol))
