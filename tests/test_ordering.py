"""Sorting, filtering and timestamp normalisation tests."""

from __future__ import annotations

import sys
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from logic.ordering import (
    coerce_filter,
    coerce_sort_order,
    entity_key,
    filter_by_kind,
    filter_by_ownership,
    filter_mixed,
    mixed_key,
    search_by_name,
    sort_entities,
    sort_items,
    sort_mixed,
    to_mixed,
)
from logic.timestamps import to_timestamp
from models.mixed import MixedItem
from models.outfit import Outfit
from models.piece import Piece
from models.taxonomy import ItemKind, KindFilter, OwnershipFilter, SortOrder

JAN_1_2024_MS = 1704067200000


def _piece(piece_id: str, name: str | None, created: object, owned: bool | None = None, slot: str = "Top") -> Piece:
    return Piece(
        piece_id=piece_id,
        name=name,
        type=slot,
        owned=owned,
        created_date=created,
        primary_img=f"https://img.example.com/{piece_id}.jpg",
    )


def _ids(items) -> list:
    return [getattr(item, "piece_id", None) or getattr(item, "outfit_id", None) or item.item_id for item in items]


@pytest.fixture()
def tee_and_jeans():
    return [
        _piece("A", "Blue Tee", "2024-01-01", slot="Top"),
        _piece("B", "Jeans", "2024-02-01", slot="Bottom"),
    ]


def test_newest_and_az_on_two_pieces(tee_and_jeans) -> None:
    assert _ids(sort_entities(tee_and_jeans, "newest")) == ["B", "A"]
    assert _ids(sort_entities(tee_and_jeans, "az")) == ["A", "B"]
    assert _ids(sort_entities(tee_and_jeans, SortOrder.OLDEST)) == ["A", "B"]
    assert _ids(sort_entities(tee_and_jeans, SortOrder.ZA)) == ["B", "A"]


def test_newest_reversed_equals_oldest_for_distinct_timestamps() -> None:
    pieces = [
        _piece("p1", "x", "2024-05-01"),
        _piece("p2", "x", "2023-01-01"),
        _piece("p3", "x", "2024-01-15T10:00:00Z"),
        _piece("p4", "x", "2022-07-30"),
    ]

    newest = sort_entities(pieces, "newest")
    oldest = sort_entities(pieces, "oldest")

    assert list(reversed(newest)) == oldest


def test_sort_is_stable_for_equal_timestamps() -> None:
    pieces = [
        _piece("first", "a", "2024-01-01"),
        _piece("later", "b", "2024-06-01"),
        _piece("second", "c", "2024-01-01"),
        _piece("third", "d", "2024-01-01T00:00:00+00:00"),
    ]

    assert _ids(sort_entities(pieces, "newest")) == ["later", "first", "second", "third"]
    assert _ids(sort_entities(pieces, "oldest")) == ["first", "second", "third", "later"]


def test_sort_is_stable_for_equal_names() -> None:
    pieces = [
        _piece("upper", "Jeans", "2024-01-01"),
        _piece("coat", "Anorak", "2024-01-01"),
        _piece("lower", "jeans", "2024-02-01"),
    ]

    assert _ids(sort_entities(pieces, "az")) == ["coat", "upper", "lower"]
    assert _ids(sort_entities(pieces, "za")) == ["upper", "lower", "coat"]


def test_undated_and_unnamed_records_sort_deterministically() -> None:
    pieces = [
        _piece("broken", None, "not a date"),
        _piece("dated", "Tee", "2024-01-01"),
        _piece("missing", "Hat", None),
    ]

    assert _ids(sort_entities(pieces, "newest")) == ["dated", "broken", "missing"]
    assert _ids(sort_entities(pieces, "oldest")) == ["broken", "missing", "dated"]
    assert _ids(sort_entities(pieces, "az")) == ["broken", "missing", "dated"]
    assert entity_key(pieces[0]).name == ""
    assert entity_key(pieces[0]).timestamp == 0


def test_names_compare_case_and_accent_insensitively() -> None:
    pieces = [
        _piece("z", "zip hoodie", "2024-01-01"),
        _piece("e", "Écharpe", "2024-01-01"),
        _piece("b", "Beanie", "2024-01-01"),
        _piece("d", "denim", "2024-01-01"),
    ]

    assert _ids(sort_entities(pieces, "az")) == ["b", "d", "e", "z"]


def test_sorting_returns_new_list_and_leaves_input_untouched(tee_and_jeans) -> None:
    snapshot = list(tee_and_jeans)
    result = sort_entities(tee_and_jeans, "newest")

    assert result is not tee_and_jeans
    assert tee_and_jeans == snapshot


def test_unknown_sort_order_keeps_input_order(tee_and_jeans) -> None:
    result = sort_items(tee_and_jeans, "popularity", key=entity_key)

    assert result == tee_and_jeans
    assert result is not tee_and_jeans
    assert coerce_sort_order("popularity") is SortOrder.NEWEST
    assert coerce_sort_order("AZ") is SortOrder.AZ


def test_mixed_items_share_the_same_ordering(tee_and_jeans) -> None:
    outfit = Outfit(outfit_id="O", name="Casual Friday", created_date="2024-01-15")
    items = to_mixed(tee_and_jeans, [outfit])

    assert [item.kind for item in items] == [ItemKind.PIECE, ItemKind.PIECE, ItemKind.OUTFIT]
    assert [item.item_id for item in sort_mixed(items, "newest")] == ["B", "O", "A"]
    assert [item.item_id for item in sort_mixed(items, "az")] == ["A", "O", "B"]
    assert mixed_key(items[2]).timestamp == to_timestamp("2024-01-15")


def test_ownership_filter_partitions_pieces() -> None:
    pieces = [
        _piece("own1", "a", "2024-01-01", owned=True),
        _piece("want1", "b", "2024-01-01", owned=False),
        _piece("own2", "c", "2024-01-01", owned=True),
        _piece("want2", "d", "2024-01-01", owned=False),
    ]

    owned = filter_by_ownership(pieces, "owned")
    wanted = filter_by_ownership(pieces, OwnershipFilter.WANT)

    assert _ids(owned) == ["own1", "own2"]
    assert _ids(wanted) == ["want1", "want2"]
    assert sorted(_ids(owned + wanted)) == sorted(_ids(pieces))
    assert filter_by_ownership(pieces, "all") == pieces


def test_missing_ownership_counts_as_want() -> None:
    unknown = _piece("unknown", "a", "2024-01-01", owned=None)

    assert filter_by_ownership([unknown], "want") == [unknown]
    assert filter_by_ownership([unknown], "owned") == []
    assert filter_by_ownership([unknown], "pieces") == [unknown]


def test_kind_filter_and_mixed_filter(tee_and_jeans) -> None:
    owned_tee = _piece("owned-tee", "Tee", "2024-01-01", owned=True)
    outfit = Outfit(outfit_id="O", name="Look")
    items = to_mixed([owned_tee, *tee_and_jeans], [outfit])

    assert [item.item_id for item in filter_by_kind(items, "pieces")] == ["owned-tee", "A", "B"]
    assert [item.item_id for item in filter_by_kind(items, KindFilter.OUTFITS)] == ["O"]
    assert filter_by_kind(items, "all") == items
    assert [item.item_id for item in filter_mixed(items, "owned")] == ["owned-tee", "O"]
    assert [item.item_id for item in filter_mixed(items, "want")] == ["A", "B", "O"]
    assert coerce_filter("bogus") is OwnershipFilter.ALL


def test_search_by_name_is_case_insensitive(tee_and_jeans) -> None:
    assert _ids(search_by_name(tee_and_jeans, "  blue ")) == ["A"]
    assert search_by_name(tee_and_jeans, "") == tee_and_jeans
    items = to_mixed(tee_and_jeans)
    assert [item.item_id for item in search_by_name(items, "JEA", key=mixed_key)] == ["B"]


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, 0),
        ("", 0),
        ("garbage", 0),
        (True, 0),
        (float("nan"), 0),
        ("2024-01-01", JAN_1_2024_MS),
        ("2024-01-01T00:00:00Z", JAN_1_2024_MS),
        ("2024-01-01T01:00:00+01:00", JAN_1_2024_MS),
        (datetime(2024, 1, 1), JAN_1_2024_MS),
        (datetime(2024, 1, 1, tzinfo=timezone.utc), JAN_1_2024_MS),
        (date(2024, 1, 1), JAN_1_2024_MS),
        (JAN_1_2024_MS, JAN_1_2024_MS),
    ],
)
def test_to_timestamp_never_raises(value, expected) -> None:
    assert to_timestamp(value) == expected


def test_mixed_item_constructors() -> None:
    piece = _piece("A", "Tee", "2024-01-01")
    outfit = Outfit(outfit_id="O", name="Look")

    assert MixedItem.piece(piece).kind is ItemKind.PIECE
    assert MixedItem.outfit(outfit).item_id == "O"
    assert MixedItem.outfit(outfit).name == "Look"
