"""Sorting and filtering shared by piece, outfit and mixed collections.

There is a single sort routine, :func:`sort_items`. Every list flavour
(pieces page, outfits page, shelf contents, pickers) is a choice of key
extraction passed to it. Broken records never raise here: a missing name
compares as ``""`` and a missing or malformed date as epoch zero.
"""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Tuple, TypeVar, Union

from logic.timestamps import EPOCH_ZERO, to_timestamp
from models.mixed import MixedItem
from models.outfit import Outfit
from models.piece import Piece
from models.taxonomy import (
    FilterMode,
    ItemKind,
    KindFilter,
    OwnershipFilter,
    SortOrder,
    validate_filter,
    validate_sort_order,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SortKey:
    """Comparison values extracted from one list element."""

    name: str
    timestamp: int


def entity_key(entity: Any) -> SortKey:
    """Key of a bare piece, outfit or shelf."""

    return SortKey(
        name=getattr(entity, "name", None) or "",
        timestamp=to_timestamp(getattr(entity, "created_date", None)),
    )


def mixed_key(item: MixedItem) -> SortKey:
    """Key of a :class:`MixedItem`, read from whichever entity it wraps."""

    return entity_key(item.value)


def name_collation_key(name: str) -> Tuple[str, str]:
    """Case-insensitive collation key; accents only break ties between equal base letters."""

    folded = name.casefold()
    base = "".join(ch for ch in unicodedata.normalize("NFKD", folded) if not unicodedata.combining(ch))
    return base, unicodedata.normalize("NFC", folded)


def _timestamp_key(key: SortKey) -> Tuple[bool, int]:
    # Undated records sort last under "newest" and first under "oldest".
    return key.timestamp != EPOCH_ZERO, key.timestamp


def coerce_sort_order(value: Union[str, SortOrder, None], default: Optional[SortOrder] = SortOrder.NEWEST) -> Optional[SortOrder]:
    """Parse a requested sort order, falling back to ``default`` for unknown values."""

    if value is None:
        return default
    try:
        return validate_sort_order(value)
    except ValueError:
        logger.warning("Unknown sort order %r, using %s", value, default.value if default else None)
        return default


def coerce_filter(value: Union[str, FilterMode, None], default: FilterMode = OwnershipFilter.ALL) -> FilterMode:
    """Parse a requested filter mode, falling back to ``default`` for unknown values."""

    if value is None:
        return default
    try:
        return validate_filter(value)
    except ValueError:
        logger.warning("Unknown filter %r, using %s", value, default.value)
        return default


def sort_items(
    items: Iterable[T],
    order: Union[str, SortOrder, None],
    key: Callable[[T], SortKey] = mixed_key,
) -> List[T]:
    """Return a new list of ``items`` ordered by ``order``.

    ``newest``/``oldest`` compare timestamps, ``az``/``za`` compare names with
    :func:`name_collation_key`. The sort is stable in every order: elements
    with equal keys keep their input order. An unknown order returns a copy in
    input order.
    """

    materialised = list(items)
    resolved_order = coerce_sort_order(order, default=None)
    if resolved_order is None:
        return materialised

    keys = [key(item) for item in materialised]
    if resolved_order in (SortOrder.NEWEST, SortOrder.OLDEST):
        compare: Callable[[int], Any] = lambda index: _timestamp_key(keys[index])
    else:
        compare = lambda index: name_collation_key(keys[index].name)
    reverse = resolved_order in (SortOrder.NEWEST, SortOrder.ZA)
    indices = sorted(range(len(materialised)), key=compare, reverse=reverse)
    return [materialised[index] for index in indices]


def sort_entities(entities: Iterable[T], order: Union[str, SortOrder, None]) -> List[T]:
    """Sort a pure piece or pure outfit list."""

    return sort_items(entities, order, key=entity_key)


def sort_mixed(items: Iterable[MixedItem], order: Union[str, SortOrder, None]) -> List[MixedItem]:
    return sort_items(items, order, key=mixed_key)


def _is_owned(piece: Piece) -> bool:
    return piece.owned is True


def _is_wanted(piece: Piece) -> bool:
    return piece.owned is False or piece.owned is None


def filter_by_ownership(pieces: Iterable[Piece], mode: Union[str, FilterMode, None]) -> List[Piece]:
    """Filter pieces by ownership.

    ``owned`` keeps pieces whose flag is strictly true, ``want`` keeps pieces
    whose flag is false or absent. ``all`` and the kind modes leave the list
    unchanged.
    """

    resolved = coerce_filter(mode)
    if resolved is OwnershipFilter.OWNED:
        return [piece for piece in pieces if _is_owned(piece)]
    if resolved is OwnershipFilter.WANT:
        return [piece for piece in pieces if _is_wanted(piece)]
    return list(pieces)


def filter_by_kind(items: Iterable[MixedItem], mode: Union[str, FilterMode, None]) -> List[MixedItem]:
    resolved = coerce_filter(mode)
    if resolved is KindFilter.PIECES:
        return [item for item in items if item.kind is ItemKind.PIECE]
    if resolved is KindFilter.OUTFITS:
        return [item for item in items if item.kind is ItemKind.OUTFIT]
    return list(items)


def filter_mixed(items: Iterable[MixedItem], mode: Union[str, FilterMode, None]) -> List[MixedItem]:
    """Apply any list filter to a mixed list.

    Kind modes partition by kind. Ownership modes act on piece items only;
    outfits have no ownership and always pass through.
    """

    resolved = coerce_filter(mode)
    if isinstance(resolved, KindFilter):
        return filter_by_kind(items, resolved)
    if resolved is OwnershipFilter.ALL:
        return list(items)
    keep = _is_owned if resolved is OwnershipFilter.OWNED else _is_wanted
    return [item for item in items if item.kind is ItemKind.OUTFIT or keep(item.value)]


def to_mixed(pieces: Iterable[Piece] = (), outfits: Iterable[Outfit] = ()) -> List[MixedItem]:
    """Wrap pieces then outfits into one mixed list."""

    return [MixedItem.piece(piece) for piece in pieces] + [MixedItem.outfit(outfit) for outfit in outfits]


def search_by_name(items: Iterable[T], query: Optional[str], key: Callable[[T], SortKey] = entity_key) -> List[T]:
    """Case-insensitive substring match on names, as used by the pickers."""

    needle = (query or "").strip().casefold()
    if not needle:
        return list(items)
    return [item for item in items if needle in key(item).name.casefold()]


__all__ = [
    "SortKey",
    "entity_key",
    "mixed_key",
    "name_collation_key",
    "coerce_sort_order",
    "coerce_filter",
    "sort_items",
    "sort_entities",
    "sort_mixed",
    "filter_by_ownership",
    "filter_by_kind",
    "filter_mixed",
    "to_mixed",
    "search_by_name",
]
