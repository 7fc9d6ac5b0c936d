"""Centralised selectors for the search results markup.

Each field lists alternative locations in priority order; the booking engine
renders several template variants of the same room block.
"""
from __future__ import annotations


class RoomSelectors:
    room_block = ".room"
    name = (".room-header-name h2", ".room-header-name h3")
    rate_label = (
        ".rates .rate-name",
        ".rates .name",
        ".rate-name",
        ".board-name",
        ".rate-title",
    )
    price = (".rates .line[data-amount]", "[data-amount]")
    price_attribute = "data-amount"
    remaining = (
        ".rates .remaining_rooms span",
        ".remaining_rooms span",
        ".availability .remaining span",
    )
