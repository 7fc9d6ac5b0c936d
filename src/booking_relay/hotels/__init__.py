"""Room offer models, HTML extraction and response formatting."""

from .extractor import extract_room_offers
from .formatter import build_envelope, build_offers_envelope, format_currency, format_offers
from .models import UNAVAILABLE, Price, RoomOffer

__all__ = [
    "Price",
    "RoomOffer",
    "UNAVAILABLE",
    "build_envelope",
    "build_offers_envelope",
    "extract_room_offers",
    "format_currency",
    "format_offers",
]
