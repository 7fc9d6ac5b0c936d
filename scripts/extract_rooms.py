"""Replay room extraction against a saved search results page."""
from __future__ import annotations

import argparse
import json
from pathlib import Path

from booking_relay.core.logging import configure_logging
from booking_relay.hotels import RoomOffer, extract_room_offers, format_offers


def main() -> None:
    parser = argparse.ArgumentParser(description="Extract room offers from captured search HTML")
    parser.add_argument("html", type=Path, help="Path to the saved search response body")
    parser.add_argument("--nights", type=int, default=1, help="Nights in the captured stay")
    parser.add_argument("--json", action="store_true", help="Print offer dicts instead of the chat text")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    configure_logging(args.log_level)
    offers = extract_room_offers(args.html.read_text(encoding="utf-8"), args.nights)
    if args.json:
        print(json.dumps(RoomOffer.from_iterable(offers), indent=2, ensure_ascii=False))
    else:
        print(format_offers(offers))


if __name__ == "__main__":
    main()
