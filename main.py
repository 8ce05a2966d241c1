"""Render one locker view from a JSON snapshot of fetched records."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Dict, List

from locker_app.app import LockerCatalog
from locker_app.config import LockerConfig
from locker_app.logging_config import configure_logging, operation_context
from models.mixed import MixedItem


def _summarise(item: Any) -> Dict[str, Any]:
    if isinstance(item, MixedItem):
        return {"kind": item.kind.value, "id": item.item_id, "name": item.name}
    return {"id": getattr(item, "piece_id", None) or getattr(item, "outfit_id", None), "name": item.name}


def render(catalog: LockerCatalog, view: str, order: str | None, mode: str | None, shelf: str | None) -> List[Dict[str, Any]]:
    if view == "pieces":
        return [_summarise(piece) for piece in catalog.pieces_view(order, mode)]
    if view == "outfits":
        return [
            {**_summarise(card.outfit), "layout": card.layout.value, "pieces": [p.piece_id for p in card.classification.occupied]}
            for card in catalog.outfit_cards(order)
        ]
    if view == "shelf":
        return [_summarise(item) for item in catalog.shelf_view(shelf or "", order, mode)]
    return [
        {
            "id": preview.shelf.shelf_id,
            "name": preview.shelf.name,
            "items": [_summarise(item) for item in preview.visible],
            "extra_count": preview.extra_count,
        }
        for preview in catalog.shelf_previews(order)
    ]


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Render a locker view from a JSON snapshot")
    parser.add_argument("snapshot", help="Path to a JSON file with pieces, outfits and shelves arrays.")
    parser.add_argument("--view", choices=["pieces", "outfits", "shelves", "shelf"], default="pieces")
    parser.add_argument("--order", default=None, help="newest, oldest, az or za")
    parser.add_argument("--filter", dest="mode", default=None, help="all, owned, want, pieces or outfits")
    parser.add_argument("--shelf", default=None, help="Shelf id or slug for the shelf view.")
    args = parser.parse_args(argv)

    config = LockerConfig.from_env()
    configure_logging(config.log_level)
    snapshot = json.loads(Path(args.snapshot).read_text())
    catalog = LockerCatalog.from_records(
        pieces=snapshot.get("pieces", []),
        outfits=snapshot.get("outfits", []),
        shelves=snapshot.get("shelves", []),
        config=config,
    )
    with operation_context("render_view", view=args.view):
        rows = render(catalog, args.view, args.order, args.mode, args.shelf)
    print(json.dumps(rows, indent=2))


if __name__ == "__main__":
    main()
