"""Tagged wrapper letting pieces and outfits share one list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from models.outfit import Outfit
from models.piece import Piece
from models.taxonomy import ItemKind


@dataclass(frozen=True)
class MixedItem:
    kind: ItemKind
    value: Union[Piece, Outfit]

    @classmethod
    def piece(cls, piece: Piece) -> "MixedItem":
        return cls(kind=ItemKind.PIECE, value=piece)

    @classmethod
    def outfit(cls, outfit: Outfit) -> "MixedItem":
        return cls(kind=ItemKind.OUTFIT, value=outfit)

    @property
    def item_id(self) -> Optional[str]:
        if self.kind is ItemKind.PIECE:
            return getattr(self.value, "piece_id", None)
        return getattr(self.value, "outfit_id", None)

    @property
    def name(self) -> Optional[str]:
        return getattr(self.value, "name", None)


__all__ = ["MixedItem"]
