"""Utilities to transform search result HTML into room offers."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from bs4 import BeautifulSoup
from bs4.element import Tag

from booking_relay.selectors.search_page import RoomSelectors

from .models import UNAVAILABLE, Price, RoomOffer, UNAVAILABLE_TEXT

logger = logging.getLogger(__name__)

_LEADING_NUMBER = re.compile(r"\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)")
_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True)
class FieldRule:
    """Reads text (or ``attribute``) from the first element matching ``selector``."""

    selector: str
    attribute: Optional[str] = None

    def apply(self, block: Tag) -> Optional[str]:
        element = block.select_one(self.selector)
        if element is None:
            return None
        if self.attribute is not None:
            value = element.get(self.attribute)
            if isinstance(value, list):
                value = " ".join(value)
            return value or None
        text = element.get_text().strip()
        return text or None


def text_rules(selectors: Iterable[str]) -> tuple[FieldRule, ...]:
    return tuple(FieldRule(selector) for selector in selectors)


def attribute_rules(selectors: Iterable[str], attribute: str) -> tuple[FieldRule, ...]:
    return tuple(FieldRule(selector, attribute) for selector in selectors)


NAME_RULES = text_rules(RoomSelectors.name)
RATE_LABEL_RULES = text_rules(RoomSelectors.rate_label)
PRICE_RULES = attribute_rules(RoomSelectors.price, RoomSelectors.price_attribute)
REMAINING_RULES = text_rules(RoomSelectors.remaining)


def first_match(block: Tag, rules: Sequence[FieldRule]) -> Optional[str]:
    """Return the first non-empty value produced by ``rules``, in order."""
    for rule in rules:
        value = rule.apply(block)
        if value:
            return value
    return None


def parse_amount(raw: Optional[str]) -> Optional[float]:
    """Parse the leading number of an amount attribute, accepting a decimal comma."""
    if not raw:
        return None
    match = _LEADING_NUMBER.match(raw.replace(",", ".", 1))
    if not match:
        return None
    return float(match.group(1))


def parse_remaining(raw: Optional[str]) -> Optional[int]:
    digits = _NON_DIGITS.sub("", raw or "")
    if not digits:
        return None
    return int(digits)


def _extract_offer(block: Tag, nights: int) -> Optional[RoomOffer]:
    remaining = parse_remaining(first_match(block, REMAINING_RULES) or "0")
    if remaining is None or remaining <= 0:
        return None

    amount = parse_amount(first_match(block, PRICE_RULES))
    total = Price(amount) if amount is not None and nights > 0 else UNAVAILABLE

    return RoomOffer(
        name=first_match(block, NAME_RULES) or UNAVAILABLE_TEXT,
        rate_label=first_match(block, RATE_LABEL_RULES),
        total=total,
        nightly=total.per_night(nights),
        available=remaining,
    )


def extract_room_offers(html: str, nights: int) -> List[RoomOffer]:
    """Extract bookable offers in document order, dropping rooms with nothing left."""
    soup = BeautifulSoup(html or "", "html.parser")
    blocks = soup.select(RoomSelectors.room_block)
    offers: List[RoomOffer] = []
    for block in blocks:
        offer = _extract_offer(block, nights)
        if offer is not None:
            offers.append(offer)
    logger.info("Extracted %s bookable offers from %s room blocks", len(offers), len(blocks))
    return offers
