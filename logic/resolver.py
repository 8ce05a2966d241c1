"""Resolution of piece and outfit references that arrive as ids or inlined objects."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, TypeVar

from models.outfit import Outfit
from models.piece import Piece
from models.taxonomy import ItemKind

logger = logging.getLogger(__name__)

T = TypeVar("T")
ShapeGuard = Callable[[Any], bool]


def has_image_field(value: Any) -> bool:
    """Shape guard for pieces: an object carrying a ``primary_img`` field."""

    return not isinstance(value, str) and value is not None and hasattr(value, "primary_img")


def has_name_field(value: Any) -> bool:
    """Shape guard for outfits: an object carrying a ``name`` field."""

    return not isinstance(value, str) and value is not None and hasattr(value, "name")


_GUARDS: Dict[ItemKind, ShapeGuard] = {
    ItemKind.PIECE: has_image_field,
    ItemKind.OUTFIT: has_name_field,
}


def guard_for_kind(kind: ItemKind) -> ShapeGuard:
    return _GUARDS[kind]


def resolve(reference: Any, entity_map: Mapping[str, T], shape_guard: ShapeGuard) -> Optional[T]:
    """Turn an id or an inlined object into an entity.

    An object that already satisfies ``shape_guard`` is returned unchanged. A
    string is looked up in ``entity_map``. Anything else resolves to ``None``;
    unresolved references are expected (stale ids, entities not fetched yet)
    and are never raised.
    """

    if shape_guard(reference):
        return reference
    if isinstance(reference, str):
        return entity_map.get(reference)
    return None


def resolve_all(references: Iterable[Any], entity_map: Mapping[str, T], shape_guard: ShapeGuard) -> List[T]:
    """Resolve every reference, omitting those that cannot be resolved."""

    resolved: List[T] = []
    dropped = 0
    for reference in references or ():
        entity = resolve(reference, entity_map, shape_guard)
        if entity is None:
            dropped += 1
            continue
        resolved.append(entity)
    if dropped:
        logger.debug("Dropped %s unresolved references out of %s", dropped, dropped + len(resolved))
    return resolved


def reference_id(reference: Any) -> Optional[str]:
    """Identifier carried by a reference, whether bare or inlined."""

    if isinstance(reference, str):
        return reference
    if isinstance(reference, Piece):
        return reference.piece_id
    if isinstance(reference, Outfit):
        return reference.outfit_id
    return None


def _build_map(entities: Iterable[T], id_of: Callable[[T], Optional[str]]) -> Mapping[str, T]:
    entity_map: Dict[str, T] = {}
    for entity in entities or ():
        entity_id = id_of(entity)
        if not entity_id:
            continue
        # First occurrence wins when the fetch returned duplicates.
        entity_map.setdefault(entity_id, entity)
    return MappingProxyType(entity_map)


def build_piece_map(pieces: Iterable[Piece]) -> Mapping[str, Piece]:
    """Read-only id -> piece map for one render cycle."""

    return _build_map(pieces, lambda piece: piece.piece_id)


def build_outfit_map(outfits: Iterable[Outfit]) -> Mapping[str, Outfit]:
    return _build_map(outfits, lambda outfit: outfit.outfit_id)


def resolve_outfit_pieces(outfit: Optional[Outfit], piece_map: Mapping[str, Piece]) -> List[Piece]:
    """Resolved pieces of ``outfit`` in reference order."""

    if outfit is None:
        return []
    return resolve_all(outfit.pieces, piece_map, has_image_field)


__all__ = [
    "ShapeGuard",
    "has_image_field",
    "has_name_field",
    "guard_for_kind",
    "resolve",
    "resolve_all",
    "reference_id",
    "build_piece_map",
    "build_outfit_map",
    "resolve_outfit_pieces",
]
