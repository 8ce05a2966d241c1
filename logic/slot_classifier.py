"""Outfit slot assignment and layout classification."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from logic.ordering import search_by_name, sort_entities
from logic.resolver import resolve_outfit_pieces
from models.outfit import Outfit
from models.piece import Piece
from models.taxonomy import (
    LOWER_SLOTS,
    SLOT_TYPES,
    UPPER_SLOTS,
    LayoutTag,
    SlotType,
    SortOrder,
    normalize_slot_type,
)

logger = logging.getLogger(__name__)

# (has_headwear, has_upper, has_lower) -> layout
_LAYOUT_TABLE: Dict[Tuple[bool, bool, bool], LayoutTag] = {
    (True, False, False): LayoutTag.HEADWEAR_ONLY,
    (True, True, False): LayoutTag.HEADWEAR_PLUS_UPPER,
    (True, False, True): LayoutTag.HEADWEAR_PLUS_LOWER,
    (False, True, False): LayoutTag.UPPER_ONLY,
    (False, False, True): LayoutTag.LOWER_ONLY,
    (False, True, True): LayoutTag.FULL_NO_HEADWEAR,
    (True, True, True): LayoutTag.ALL_ROWS,
    (False, False, False): LayoutTag.EMPTY,
}


@dataclass(frozen=True)
class OutfitClassification:
    """Slot assignment of an outfit plus the layout it renders with."""

    slots: Mapping[SlotType, Optional[Piece]]
    layout: LayoutTag
    has_headwear: bool
    has_upper: bool
    has_lower: bool

    def piece_in(self, slot_type: Union[SlotType, str]) -> Optional[Piece]:
        slot = normalize_slot_type(slot_type)
        return self.slots.get(slot) if slot else None

    @property
    def occupied(self) -> List[Piece]:
        """Assigned pieces in rendering order."""

        return [piece for piece in (self.slots[slot] for slot in SLOT_TYPES) if piece is not None]


def assign_slots(resolved_pieces: Iterable[Piece]) -> Mapping[SlotType, Optional[Piece]]:
    """First piece of each slot type wins; later pieces of that type are masked."""

    slots: Dict[SlotType, Optional[Piece]] = {slot: None for slot in SLOT_TYPES}
    for piece in resolved_pieces:
        slot = piece.type
        if slot is None or slots[slot] is not None:
            continue
        slots[slot] = piece
    return MappingProxyType(slots)


def layout_for(has_headwear: bool, has_upper: bool, has_lower: bool) -> LayoutTag:
    return _LAYOUT_TABLE[(bool(has_headwear), bool(has_upper), bool(has_lower))]


def classify(resolved_pieces: Iterable[Piece]) -> OutfitClassification:
    """Assign pieces to the five slots and derive the layout tag.

    Pure and total: every combination of occupied rows maps to a tag. The
    headwear, upper and lower rows all occupied maps to ``all-rows``.
    """

    slots = assign_slots(resolved_pieces)
    has_headwear = slots[SlotType.HEADWEAR] is not None
    has_upper = any(slots[slot] is not None for slot in UPPER_SLOTS)
    has_lower = any(slots[slot] is not None for slot in LOWER_SLOTS)
    return OutfitClassification(
        slots=slots,
        layout=layout_for(has_headwear, has_upper, has_lower),
        has_headwear=has_headwear,
        has_upper=has_upper,
        has_lower=has_lower,
    )


def classify_outfit(outfit: Optional[Outfit], piece_map: Mapping[str, Piece]) -> OutfitClassification:
    return classify(resolve_outfit_pieces(outfit, piece_map))


def masked_pieces(resolved_pieces: Iterable[Piece]) -> List[Piece]:
    """Pieces that lost their slot to an earlier piece of the same type, or carry no slot type."""

    taken = set()
    masked: List[Piece] = []
    for piece in resolved_pieces:
        if piece.type is None or piece.type in taken:
            masked.append(piece)
            continue
        taken.add(piece.type)
    if masked:
        logger.debug("Masked %s pieces sharing a slot", len(masked))
    return masked


def slot_piece_ids(slots: Mapping[SlotType, Optional[Piece]]) -> List[str]:
    """Ids of the occupied slots in canonical slot order, as the outfit editor saves them."""

    return [slots[slot].piece_id for slot in SLOT_TYPES if slots.get(slot) is not None]


def pieces_for_slot(
    pieces: Iterable[Piece],
    slot_type: Union[SlotType, str],
    query: str = "",
    order: Union[str, SortOrder, None] = SortOrder.NEWEST,
) -> List[Piece]:
    """Candidates offered by the outfit editor for one slot."""

    slot = normalize_slot_type(slot_type)
    if slot is None:
        return []
    candidates = [piece for piece in pieces if piece.type is slot]
    return sort_entities(search_by_name(candidates, query), order)


__all__ = [
    "OutfitClassification",
    "assign_slots",
    "layout_for",
    "classify",
    "classify_outfit",
    "masked_pieces",
    "slot_piece_ids",
    "pieces_for_slot",
]
