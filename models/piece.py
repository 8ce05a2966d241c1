"""Piece (garment) data model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from models.taxonomy import COMFORT_TAG_KEYS, SEASON_TAG_KEYS, SlotType, normalize_slot_type


def _flag_tuple(values: Optional[Mapping[str, Any]], allowed: Iterable[str]) -> Tuple[str, ...]:
    """Keep the names of the truthy flags, in canonical order."""

    if not values:
        return ()
    return tuple(key for key in allowed if values.get(key))


@dataclass(frozen=True)
class ItemTags:
    """Comfort and season flags shared by pieces and outfits."""

    comfort: Tuple[str, ...] = ()
    season: Tuple[str, ...] = ()

    @classmethod
    def from_flags(cls, raw: Optional[Mapping[str, Any]]) -> "ItemTags":
        raw = raw or {}
        return cls(
            comfort=_flag_tuple(raw.get("comfort"), COMFORT_TAG_KEYS),
            season=_flag_tuple(raw.get("season"), SEASON_TAG_KEYS),
        )

    def as_flags(self) -> Dict[str, Dict[str, bool]]:
        return {
            "comfort": {key: key in self.comfort for key in COMFORT_TAG_KEYS},
            "season": {key: key in self.season for key in SEASON_TAG_KEYS},
        }


@dataclass(frozen=True)
class Piece:
    """A single garment as fetched from the wardrobe backend.

    ``owned`` is tri-state: ``None`` means the flag was absent on the wire,
    which ownership filters treat as "want". ``created_date`` keeps the raw
    fetched value; it is normalised only when compared.
    """

    piece_id: str
    name: Optional[str] = None
    type: Optional[SlotType] = None
    owned: Optional[bool] = None
    created_date: Any = None
    primary_img: Optional[str] = None
    secondary_imgs: Tuple[str, ...] = field(default_factory=tuple)
    notes: Optional[str] = None
    subtype: Optional[str] = None
    colors: Tuple[str, ...] = field(default_factory=tuple)
    brand: Optional[str] = None
    size: Optional[str] = None
    price: Optional[str] = None
    product_link: Optional[str] = None
    tags: Optional[ItemTags] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", normalize_slot_type(self.type))
        object.__setattr__(self, "secondary_imgs", tuple(self.secondary_imgs or ()))
        object.__setattr__(self, "colors", tuple(self.colors or ()))

    @property
    def slot_type(self) -> Optional[SlotType]:
        return self.type


__all__ = ["ItemTags", "Piece"]
