"""Canonical taxonomy definitions for the locker.

This module centralises the enumerated values shared by the data model, the
resolver and the ordering helpers: slot types, item kinds, sort orders,
filter modes and outfit layout tags. Helper functions keep parsing consistent
across records, logic modules and the catalog facade.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Union


class SlotType(str, Enum):
    """Body-region slot a piece occupies inside an outfit."""

    HEADWEAR = "Headwear"
    TOP = "Top"
    OUTERWEAR = "Outerwear"
    BOTTOM = "Bottom"
    FOOTWEAR = "Footwear"


class ItemKind(str, Enum):
    PIECE = "Piece"
    OUTFIT = "Outfit"


class SortOrder(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    AZ = "az"
    ZA = "za"


class OwnershipFilter(str, Enum):
    ALL = "all"
    OWNED = "owned"
    WANT = "want"


class KindFilter(str, Enum):
    ALL = "all"
    PIECES = "pieces"
    OUTFITS = "outfits"


class LayoutTag(str, Enum):
    """Presentation layout derived from which outfit rows are occupied."""

    HEADWEAR_ONLY = "headwear-only"
    HEADWEAR_PLUS_UPPER = "headwear-plus-upper"
    HEADWEAR_PLUS_LOWER = "headwear-plus-lower"
    UPPER_ONLY = "upper-only"
    LOWER_ONLY = "lower-only"
    FULL_NO_HEADWEAR = "full-no-headwear"
    ALL_ROWS = "all-rows"
    EMPTY = "empty"

    @property
    def css_class(self) -> str:
        """Class name the card and modal renderers attach to the image grid."""

        return LAYOUT_CSS_CLASSES[self]


# Rendering order of the slots: headwear row, upper row, lower row.
SLOT_TYPES: List[SlotType] = [
    SlotType.HEADWEAR,
    SlotType.TOP,
    SlotType.OUTERWEAR,
    SlotType.BOTTOM,
    SlotType.FOOTWEAR,
]
UPPER_SLOTS = (SlotType.TOP, SlotType.OUTERWEAR)
LOWER_SLOTS = (SlotType.BOTTOM, SlotType.FOOTWEAR)

LAYOUT_CSS_CLASSES: Dict[LayoutTag, str] = {
    LayoutTag.HEADWEAR_ONLY: "headwear-only",
    LayoutTag.HEADWEAR_PLUS_UPPER: "headwear-plus-row-upper",
    LayoutTag.HEADWEAR_PLUS_LOWER: "headwear-plus-row-lower",
    LayoutTag.UPPER_ONLY: "row-upper-only",
    LayoutTag.LOWER_ONLY: "row-lower-only",
    LayoutTag.FULL_NO_HEADWEAR: "no-headwear",
    LayoutTag.ALL_ROWS: "all-rows",
    LayoutTag.EMPTY: "",
}

COMFORT_TAG_KEYS = ["comfy", "casual", "classy"]
SEASON_TAG_KEYS = ["fall", "winter", "spring", "summer"]

# Filter values accepted by mixed (shelf) views: ownership modes plus kind modes.
MIXED_FILTER_VALUES = [mode.value for mode in OwnershipFilter] + [
    mode.value for mode in KindFilter if mode is not KindFilter.ALL
]

FilterMode = Union[OwnershipFilter, KindFilter]


def _normalize_key(value: object) -> str:
    """Normalise a free-form value into a lookup key."""

    return str(value).strip().lower()


_SLOT_LOOKUP = {_normalize_key(slot.value): slot for slot in SlotType}
_KIND_LOOKUP = {_normalize_key(kind.value): kind for kind in ItemKind}


def normalize_slot_type(value: object) -> Optional[SlotType]:
    """Map a raw type label onto a :class:`SlotType`, or ``None`` when unknown."""

    if isinstance(value, SlotType):
        return value
    if value is None:
        return None
    return _SLOT_LOOKUP.get(_normalize_key(value))


def normalize_item_kind(value: object) -> Optional[ItemKind]:
    """Map a raw ``item_type`` label onto an :class:`ItemKind`."""

    if isinstance(value, ItemKind):
        return value
    if value is None:
        return None
    return _KIND_LOOKUP.get(_normalize_key(value))


def validate_sort_order(value: Union[str, SortOrder]) -> SortOrder:
    """Validate a sort order value.

    Raises a :class:`ValueError` if the value is not one of the four orders.
    """

    try:
        return SortOrder(_normalize_key(value.value if isinstance(value, Enum) else value))
    except ValueError:
        raise ValueError(
            f"Unsupported sort order '{value}'. Allowed: {[order.value for order in SortOrder]}"
        ) from None


def validate_filter(value: Union[str, OwnershipFilter, KindFilter]) -> FilterMode:
    """Validate a list filter value, returning the ownership or kind mode it names."""

    key = _normalize_key(value.value if isinstance(value, Enum) else value)
    if key in {mode.value for mode in OwnershipFilter}:
        return OwnershipFilter(key)
    if key in {mode.value for mode in KindFilter}:
        return KindFilter(key)
    raise ValueError(f"Unsupported filter '{value}'. Allowed: {MIXED_FILTER_VALUES}")


__all__ = [
    "SlotType",
    "ItemKind",
    "SortOrder",
    "OwnershipFilter",
    "KindFilter",
    "LayoutTag",
    "FilterMode",
    "SLOT_TYPES",
    "UPPER_SLOTS",
    "LOWER_SLOTS",
    "LAYOUT_CSS_CLASSES",
    "COMFORT_TAG_KEYS",
    "SEASON_TAG_KEYS",
    "MIXED_FILTER_VALUES",
    "normalize_slot_type",
    "normalize_item_kind",
    "validate_sort_order",
    "validate_filter",
]
