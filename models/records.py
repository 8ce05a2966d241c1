"""Pydantic schemas for the raw records handed over by the data-fetch layer."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from models.outfit import Outfit
from models.piece import ItemTags, Piece
from models.shelf import Shelf, ShelfEntry
from models.taxonomy import ItemKind, SlotType, SortOrder, normalize_item_kind, normalize_slot_type

logger = logging.getLogger(__name__)


def _coerce_id(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("id", mode="before", check_fields=False)
    @classmethod
    def normalise_id(cls, value: Any) -> Any:
        return _coerce_id(value)


class PieceRecord(_Record):
    """Wire shape of a piece document."""

    id: str = Field(validation_alias=AliasChoices("_id", "id", "piece_id"), min_length=1)
    primary_img: str = Field(min_length=1)
    name: Optional[str] = None
    type: Optional[str] = None
    owned: Optional[bool] = None
    created_date: Any = None
    secondary_imgs: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    subtype: Optional[str] = None
    colors: List[str] = Field(default_factory=list)
    brand: Optional[str] = None
    size: Optional[str] = None
    price: Optional[str] = None
    product_link: Optional[str] = None
    tags: Optional[Dict[str, Dict[str, Any]]] = None

    @field_validator("secondary_imgs", "colors", mode="before")
    @classmethod
    def none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_domain(self) -> Piece:
        return Piece(
            piece_id=self.id,
            name=self.name,
            type=self.type,
            owned=self.owned,
            created_date=self.created_date,
            primary_img=self.primary_img,
            secondary_imgs=tuple(self.secondary_imgs),
            notes=self.notes,
            subtype=self.subtype,
            colors=tuple(self.colors),
            brand=self.brand,
            size=self.size,
            price=self.price,
            product_link=self.product_link,
            tags=ItemTags.from_flags(self.tags) if self.tags is not None else None,
        )


class OutfitRecord(_Record):
    """Wire shape of an outfit document; ``pieces`` may be ids or inlined pieces."""

    id: str = Field(validation_alias=AliasChoices("_id", "id", "outfit_id"), min_length=1)
    name: Optional[str] = None
    created_date: Any = None
    pieces: List[Any] = Field(default_factory=list)
    tags: Optional[Dict[str, Dict[str, Any]]] = None

    @field_validator("pieces", mode="before")
    @classmethod
    def none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_domain(self) -> Outfit:
        return Outfit(
            outfit_id=self.id,
            name=self.name,
            created_date=self.created_date,
            pieces=tuple(_piece_reference(raw) for raw in self.pieces),
            tags=ItemTags.from_flags(self.tags) if self.tags is not None else None,
        )


class ShelfEntryRecord(_Record):
    item_id: Any = None
    item_type: Optional[str] = None
    item_added_date: Any = None

    def to_domain(self) -> ShelfEntry:
        kind = normalize_item_kind(self.item_type)
        return ShelfEntry(
            item=_item_reference(self.item_id, kind),
            item_type=kind,
            item_added_date=self.item_added_date,
        )


class ShelfRecord(_Record):
    id: str = Field(validation_alias=AliasChoices("_id", "id", "shelf_id"), min_length=1)
    name: Optional[str] = None
    created_date: Any = None
    created_at: Any = Field(default=None, validation_alias=AliasChoices("createdAt", "created_at"))
    items: List[Any] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def none_to_list(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_domain(self) -> Shelf:
        entries: List[ShelfEntry] = []
        for raw in self.items:
            if isinstance(raw, ShelfEntry):
                entries.append(raw)
                continue
            try:
                entries.append(ShelfEntryRecord.model_validate(raw).to_domain())
            except ValidationError as exc:
                logger.warning("Skipping shelf entry on shelf %s due to validation error: %s", self.id, exc)
        return Shelf(
            shelf_id=self.id,
            name=self.name,
            # Older shelves only carry the ORM-managed createdAt stamp.
            created_date=self.created_date or self.created_at,
            items=tuple(entries),
        )


class PickerRequest(BaseModel):
    """Keyword arguments accepted by the shelf picker."""

    query: str = ""
    order: Optional[SortOrder] = None


class SlotPickerRequest(PickerRequest):
    """Keyword arguments accepted by the outfit editor slot picker."""

    slot_type: SlotType

    @field_validator("slot_type", mode="before")
    @classmethod
    def normalise_slot(cls, value: Any) -> Any:
        return normalize_slot_type(value) or value


def _piece_reference(raw: Any) -> Any:
    """Convert one outfit piece reference, keeping unrecognised shapes untouched."""

    if isinstance(raw, (str, Piece)):
        return raw
    if isinstance(raw, Mapping) and "primary_img" in raw:
        try:
            return PieceRecord.model_validate(raw).to_domain()
        except ValidationError as exc:
            logger.warning("Keeping unparsable inlined piece unresolved: %s", exc)
    return raw


def _item_reference(raw: Any, kind: Optional[ItemKind]) -> Any:
    if isinstance(raw, (str, Piece, Outfit)):
        return raw
    if not isinstance(raw, Mapping):
        return raw
    try:
        if kind is ItemKind.PIECE and "primary_img" in raw:
            return PieceRecord.model_validate(raw).to_domain()
        if kind is ItemKind.OUTFIT and "name" in raw:
            return OutfitRecord.model_validate(raw).to_domain()
    except ValidationError as exc:
        logger.warning("Keeping unparsable inlined %s unresolved: %s", kind.value if kind else "item", exc)
    return raw


def _load(raw_records: Iterable[Any], record_type: type[_Record], domain_type: type) -> List[Any]:
    loaded = []
    for raw in raw_records or []:
        if isinstance(raw, domain_type):
            loaded.append(raw)
            continue
        try:
            loaded.append(record_type.model_validate(raw).to_domain())
        except ValidationError as exc:
            logger.warning("Skipping %s record due to validation error: %s", domain_type.__name__, exc)
    return loaded


def load_pieces(raw_records: Iterable[Any]) -> List[Piece]:
    """Build pieces from fetched documents, skipping records that fail validation."""

    return _load(raw_records, PieceRecord, Piece)


def load_outfits(raw_records: Iterable[Any]) -> List[Outfit]:
    return _load(raw_records, OutfitRecord, Outfit)


def load_shelves(raw_records: Iterable[Any]) -> List[Shelf]:
    return _load(raw_records, ShelfRecord, Shelf)


__all__ = [
    "PieceRecord",
    "OutfitRecord",
    "ShelfEntryRecord",
    "ShelfRecord",
    "PickerRequest",
    "SlotPickerRequest",
    "load_pieces",
    "load_outfits",
    "load_shelves",
]
