"""Shelf contents, previews and slugs built on the resolver and the shared sort."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Tuple, Union

from logic.ordering import coerce_filter, filter_mixed, sort_entities, sort_items
from logic.shelf_timestamps import resolve_entry, shelf_entry_key
from models.mixed import MixedItem
from models.outfit import Outfit
from models.piece import Piece
from models.shelf import Shelf, ShelfEntry
from models.taxonomy import FilterMode, ItemKind, SortOrder

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_LIMIT = 7

_QUOTES = re.compile(r"['\"]")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class ShelfContents:
    """Resolved members of a shelf, in entry order."""

    pieces: List[Piece] = field(default_factory=list)
    outfits: List[Outfit] = field(default_factory=list)

    def mixed(self) -> List[MixedItem]:
        return [MixedItem.piece(piece) for piece in self.pieces] + [
            MixedItem.outfit(outfit) for outfit in self.outfits
        ]

    def __len__(self) -> int:
        return len(self.pieces) + len(self.outfits)


@dataclass(frozen=True)
class ShelfPreview:
    """What a shelf card shows: the newest few items and a count of the rest."""

    shelf: Shelf
    visible: List[MixedItem]
    extra_count: int
    total: int


def _wrap(entry: ShelfEntry, entity: Union[Piece, Outfit]) -> MixedItem:
    if entry.item_type is ItemKind.PIECE:
        return MixedItem.piece(entity)
    return MixedItem.outfit(entity)


def resolved_entries(
    shelf: Shelf,
    piece_map: Mapping[str, Piece],
    outfit_map: Mapping[str, Outfit],
) -> List[Tuple[ShelfEntry, MixedItem]]:
    """Pair each resolvable entry with its mixed item; unresolvable entries are dropped."""

    pairs: List[Tuple[ShelfEntry, MixedItem]] = []
    for entry in shelf.items:
        entity = resolve_entry(entry, piece_map, outfit_map)
        if entity is None:
            continue
        pairs.append((entry, _wrap(entry, entity)))
    dropped = len(shelf.items) - len(pairs)
    if dropped:
        logger.debug("Shelf %s has %s unresolved entries", shelf.shelf_id, dropped)
    return pairs


def resolve_shelf_contents(
    shelf: Shelf,
    piece_map: Mapping[str, Piece],
    outfit_map: Mapping[str, Outfit],
) -> ShelfContents:
    pieces: List[Piece] = []
    outfits: List[Outfit] = []
    for _, item in resolved_entries(shelf, piece_map, outfit_map):
        if item.kind is ItemKind.PIECE:
            pieces.append(item.value)
        else:
            outfits.append(item.value)
    return ShelfContents(pieces=pieces, outfits=outfits)


def shelf_items(
    shelf: Shelf,
    piece_map: Mapping[str, Piece],
    outfit_map: Mapping[str, Outfit],
    order: Union[str, SortOrder, None] = SortOrder.NEWEST,
    mode: Union[str, FilterMode, None] = None,
) -> List[MixedItem]:
    """Resolved, filtered and sorted items of one shelf.

    Timestamp orders use the effective "added" timestamp of each entry.
    """

    pairs = resolved_entries(shelf, piece_map, outfit_map)
    kept_items = filter_mixed([item for _, item in pairs], coerce_filter(mode))
    kept_ids = {id(item) for item in kept_items}
    kept_pairs = [pair for pair in pairs if id(pair[1]) in kept_ids]
    ordered = sort_items(kept_pairs, order, key=lambda pair: shelf_entry_key(pair[0], piece_map, outfit_map))
    return [item for _, item in ordered]


def shelf_preview(
    shelf: Shelf,
    piece_map: Mapping[str, Piece],
    outfit_map: Mapping[str, Outfit],
    limit: int = DEFAULT_PREVIEW_LIMIT,
) -> ShelfPreview:
    items = shelf_items(shelf, piece_map, outfit_map, order=SortOrder.NEWEST)
    limit = max(0, limit)
    return ShelfPreview(
        shelf=shelf,
        visible=items[:limit],
        extra_count=max(0, len(items) - limit),
        total=len(items),
    )


def sort_shelves(shelves: Iterable[Shelf], order: Union[str, SortOrder, None] = SortOrder.NEWEST) -> List[Shelf]:
    """Order shelves by creation date (or name) with the shared sort."""

    return sort_entities(shelves, order)


def slugify_shelf_name(name: Optional[str]) -> str:
    """URL slug for a shelf name: lowercase, quotes dropped, other runs of symbols as dashes."""

    slug = _QUOTES.sub("", (name or "").lower().strip())
    slug = _NON_ALNUM.sub("-", slug)
    return slug.strip("-")


def find_shelf_by_slug(shelves: Iterable[Shelf], slug: str) -> Optional[Shelf]:
    """First shelf whose name slugifies to ``slug``."""

    wanted = slugify_shelf_name(slug)
    if not wanted:
        return None
    for shelf in shelves:
        if slugify_shelf_name(shelf.name) == wanted:
            return shelf
    return None


__all__ = [
    "DEFAULT_PREVIEW_LIMIT",
    "ShelfContents",
    "ShelfPreview",
    "resolved_entries",
    "resolve_shelf_contents",
    "shelf_items",
    "shelf_preview",
    "sort_shelves",
    "slugify_shelf_name",
    "find_shelf_by_slug",
]
