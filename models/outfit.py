"""Outfit data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, Union

from models.piece import ItemTags, Piece

# A piece reference is either a bare piece id or an inlined piece.
PieceReference = Union[str, Piece]


@dataclass(frozen=True)
class Outfit:
    """A named composition referencing up to one piece per slot type."""

    outfit_id: str
    name: Optional[str] = None
    created_date: Any = None
    pieces: Tuple[Any, ...] = field(default_factory=tuple)
    tags: Optional[ItemTags] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "pieces", tuple(self.pieces or ()))


__all__ = ["Outfit", "PieceReference"]
