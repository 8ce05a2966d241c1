"""Shelf and shelf entry data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, Union

from models.outfit import Outfit
from models.piece import Piece
from models.taxonomy import ItemKind, normalize_item_kind

ItemReference = Union[str, Piece, Outfit]


@dataclass(frozen=True)
class ShelfEntry:
    """One membership of a piece or outfit in a shelf.

    ``item_added_date`` is the raw "added to this shelf" value and may be
    missing or malformed.
    """

    item: Any
    item_type: Optional[ItemKind]
    item_added_date: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "item_type", normalize_item_kind(self.item_type))


@dataclass(frozen=True)
class Shelf:
    shelf_id: str
    name: Optional[str] = None
    created_date: Any = None
    items: Tuple[ShelfEntry, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items or ()))


__all__ = ["ItemReference", "Shelf", "ShelfEntry"]
