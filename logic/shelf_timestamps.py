"""Effective "added to shelf" timestamps for shelf entries."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Union

from logic.ordering import SortKey, sort_items
from logic.resolver import guard_for_kind, resolve
from logic.timestamps import EPOCH_ZERO, to_timestamp
from models.outfit import Outfit
from models.piece import Piece
from models.shelf import ShelfEntry
from models.taxonomy import ItemKind, SortOrder


def resolve_entry(
    entry: ShelfEntry,
    piece_map: Mapping[str, Piece],
    outfit_map: Mapping[str, Outfit],
) -> Optional[Union[Piece, Outfit]]:
    """Resolve the entity a shelf entry points at, using the map for its kind."""

    if entry.item_type is ItemKind.PIECE:
        return resolve(entry.item, piece_map, guard_for_kind(ItemKind.PIECE))
    if entry.item_type is ItemKind.OUTFIT:
        return resolve(entry.item, outfit_map, guard_for_kind(ItemKind.OUTFIT))
    return None


def effective_timestamp(
    entry: ShelfEntry,
    piece_map: Mapping[str, Piece],
    outfit_map: Mapping[str, Outfit],
) -> int:
    """Epoch milliseconds at which ``entry`` counts as added to its shelf.

    The membership date wins when it parses; otherwise the referenced
    entity's creation date; otherwise epoch zero.
    """

    added = to_timestamp(entry.item_added_date)
    if added != EPOCH_ZERO:
        return added
    entity = resolve_entry(entry, piece_map, outfit_map)
    if entity is None:
        return EPOCH_ZERO
    return to_timestamp(getattr(entity, "created_date", None))


def shelf_entry_key(
    entry: ShelfEntry,
    piece_map: Mapping[str, Piece],
    outfit_map: Mapping[str, Outfit],
) -> SortKey:
    entity: Any = resolve_entry(entry, piece_map, outfit_map)
    return SortKey(
        name=getattr(entity, "name", None) or "",
        timestamp=effective_timestamp(entry, piece_map, outfit_map),
    )


def sort_shelf_entries(
    entries: Iterable[ShelfEntry],
    piece_map: Mapping[str, Piece],
    outfit_map: Mapping[str, Outfit],
    order: Union[str, SortOrder, None] = SortOrder.NEWEST,
) -> List[ShelfEntry]:
    """Order shelf entries; the default is most recently added first."""

    return sort_items(entries, order, key=lambda entry: shelf_entry_key(entry, piece_map, outfit_map))


__all__ = ["resolve_entry", "effective_timestamp", "shelf_entry_key", "sort_shelf_entries"]
