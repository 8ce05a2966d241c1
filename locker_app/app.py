"""Catalog facade answering the locker views from one fetched snapshot."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Union

from locker_app.config import LockerConfig
from locker_app.logging_config import get_logger, log_event
from locker_app.observability import instrument_operation
from logic.ordering import (
    coerce_filter,
    coerce_sort_order,
    filter_by_ownership,
    filter_mixed,
    mixed_key,
    search_by_name,
    sort_entities,
    sort_mixed,
    to_mixed,
)
from logic.resolver import build_outfit_map, build_piece_map, resolve_outfit_pieces
from logic.shelves import (
    ShelfContents,
    ShelfPreview,
    find_shelf_by_slug,
    resolve_shelf_contents,
    shelf_items,
    shelf_preview,
    sort_shelves,
)
from logic.slot_classifier import OutfitClassification, classify, pieces_for_slot
from models.mixed import MixedItem
from models.outfit import Outfit
from models.piece import Piece
from models.records import PickerRequest, SlotPickerRequest, load_outfits, load_pieces, load_shelves
from models.shelf import Shelf
from models.taxonomy import FilterMode, LayoutTag, SlotType, SortOrder

LOGGER = get_logger(__name__)

OrderArg = Union[str, SortOrder, None]
FilterArg = Union[str, FilterMode, None]


@dataclass(frozen=True)
class OutfitCard:
    """Everything a renderer needs for one outfit card or modal."""

    outfit: Outfit
    pieces: List[Piece]
    classification: OutfitClassification

    @property
    def layout(self) -> LayoutTag:
        return self.classification.layout

    @property
    def css_class(self) -> str:
        return self.classification.layout.css_class


class LockerCatalog:
    """Resolved, sorted and classified views over pieces, outfits and shelves.

    The snapshot is fixed at construction: entity maps are built once and
    every view returns new lists without touching the inputs.
    """

    def __init__(
        self,
        pieces: Iterable[Piece] = (),
        outfits: Iterable[Outfit] = (),
        shelves: Iterable[Shelf] = (),
        config: LockerConfig | None = None,
    ) -> None:
        self.config = config or LockerConfig.from_env()
        self.pieces = tuple(pieces)
        self.outfits = tuple(outfits)
        self.shelves = tuple(shelves)
        self.piece_map = build_piece_map(self.pieces)
        self.outfit_map = build_outfit_map(self.outfits)
        log_event(
            LOGGER,
            logging.INFO,
            "catalog_snapshot_loaded",
            piece_count=len(self.pieces),
            outfit_count=len(self.outfits),
            shelf_count=len(self.shelves),
            default_order=self.config.default_sort_order,
            default_filter=self.config.default_filter,
        )

    @classmethod
    def from_records(
        cls,
        pieces: Iterable[Any] = (),
        outfits: Iterable[Any] = (),
        shelves: Iterable[Any] = (),
        config: LockerConfig | None = None,
    ) -> "LockerCatalog":
        """Build a catalog from raw fetched documents, skipping invalid ones."""

        return cls(
            pieces=load_pieces(pieces),
            outfits=load_outfits(outfits),
            shelves=load_shelves(shelves),
            config=config,
        )

    def _order(self, order: OrderArg) -> SortOrder:
        return coerce_sort_order(order, default=self.config.default_sort_order)

    def _filter(self, mode: FilterArg) -> FilterMode:
        return coerce_filter(mode, default=self.config.default_filter)

    @instrument_operation("pieces_view")
    def pieces_view(self, order: OrderArg = None, mode: FilterArg = None) -> List[Piece]:
        """Pieces page: ownership filter then sort."""

        return sort_entities(filter_by_ownership(self.pieces, self._filter(mode)), self._order(order))

    @instrument_operation("outfits_view")
    def outfits_view(self, order: OrderArg = None) -> List[Outfit]:
        return sort_entities(self.outfits, self._order(order))

    def outfit_card(self, outfit: Outfit) -> OutfitCard:
        pieces = resolve_outfit_pieces(outfit, self.piece_map)
        return OutfitCard(outfit=outfit, pieces=pieces, classification=classify(pieces))

    @instrument_operation("outfit_cards")
    def outfit_cards(self, order: OrderArg = None) -> List[OutfitCard]:
        return [self.outfit_card(outfit) for outfit in self.outfits_view(order)]

    @instrument_operation("mixed_view")
    def mixed_view(self, order: OrderArg = None, mode: FilterArg = None) -> List[MixedItem]:
        """Every piece and outfit in one list."""

        items = filter_mixed(to_mixed(self.pieces, self.outfits), self._filter(mode))
        return sort_mixed(items, self._order(order))

    def find_shelf(self, slug: str) -> Optional[Shelf]:
        return find_shelf_by_slug(self.shelves, slug)

    def _shelf(self, shelf: Union[Shelf, str]) -> Optional[Shelf]:
        if isinstance(shelf, Shelf):
            return shelf
        for candidate in self.shelves:
            if candidate.shelf_id == shelf:
                return candidate
        return self.find_shelf(shelf)

    def shelf_contents(self, shelf: Union[Shelf, str]) -> ShelfContents:
        found = self._shelf(shelf)
        if found is None:
            return ShelfContents()
        return resolve_shelf_contents(found, self.piece_map, self.outfit_map)

    @instrument_operation("shelf_view")
    def shelf_view(self, shelf: Union[Shelf, str], order: OrderArg = None, mode: FilterArg = None) -> List[MixedItem]:
        """Shelf page: members resolved, filtered and ordered by when they were added."""

        found = self._shelf(shelf)
        if found is None:
            log_event(LOGGER, logging.INFO, "shelf_not_found", shelf=shelf)
            return []
        return shelf_items(found, self.piece_map, self.outfit_map, order=self._order(order), mode=self._filter(mode))

    @instrument_operation("shelf_previews")
    def shelf_previews(self, order: OrderArg = None) -> List[ShelfPreview]:
        """Shelf carousel: shelves newest first, each with its newest few items."""

        return [
            shelf_preview(shelf, self.piece_map, self.outfit_map, limit=self.config.shelf_preview_limit)
            for shelf in sort_shelves(self.shelves, self._order(order))
        ]

    @instrument_operation("shelf_picker", input_model=PickerRequest)
    def shelf_picker(self, *, query: str = "", order: OrderArg = None) -> List[MixedItem]:
        """Candidates offered when adding items to a shelf."""

        items = search_by_name(to_mixed(self.pieces, self.outfits), query, key=mixed_key)
        return sort_mixed(items, self._order(order))

    @instrument_operation("slot_picker", input_model=SlotPickerRequest)
    def slot_picker(self, *, slot_type: SlotType, query: str = "", order: OrderArg = None) -> List[Piece]:
        return pieces_for_slot(self.pieces, slot_type, query=query, order=self._order(order))


__all__ = ["LockerCatalog", "OutfitCard"]
