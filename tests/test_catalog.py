"""Catalog facade, configuration and logging helper tests."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

sys.path.append(str(Path(__file__).resolve().parents[1]))

from locker_app.app import LockerCatalog
from locker_app.config import LockerConfig
from locker_app.logging_config import JsonFormatter, correlation_context, redact_for_log
from models.mixed import MixedItem
from models.piece import Piece
from models.shelf import Shelf, ShelfEntry
from models.taxonomy import KindFilter, LayoutTag, OwnershipFilter, SortOrder

_ENV_KEYS = (
    "APP_ENV",
    "APP_CONFIG_PATH",
    "LOCKER_DEFAULT_SORT_ORDER",
    "LOCKER_DEFAULT_FILTER",
    "LOCKER_SHELF_PREVIEW_LIMIT",
    "LOG_LEVEL",
)


@pytest.fixture()
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def _raw_piece(piece_id: str, name: str, slot: str, created: str, owned=True):
    return {
        "_id": piece_id,
        "name": name,
        "type": slot,
        "owned": owned,
        "created_date": created,
        "primary_img": f"https://img.example.com/{piece_id}.jpg",
    }


@pytest.fixture()
def catalog() -> LockerCatalog:
    pieces = [
        _raw_piece("cap", "Bucket Hat", "Headwear", "2024-01-01"),
        _raw_piece("tee", "Blue Tee", "Top", "2024-02-01"),
        _raw_piece("jeans", "Jeans", "Bottom", "2024-03-01", owned=False),
        _raw_piece("boots", "Chelsea Boots", "Footwear", "2024-04-01"),
        _raw_piece("shirt", "Linen Shirt", "top", "2024-05-01"),
        {"_id": "broken", "name": "No image"},
    ]
    outfits = [
        {"_id": "o1", "name": "Weekend", "created_date": "2024-02-15", "pieces": ["cap", "jeans", "missing"]},
        {"_id": "o2", "name": "Office", "created_date": "2024-06-01", "pieces": ["tee", "shirt", "boots"]},
    ]
    shelves = [
        {
            "_id": "s1",
            "name": "Go-To Looks",
            "created_date": "2024-01-10",
            "items": [
                {"item_id": "o1", "item_type": "outfit", "item_added_date": "2024-07-01"},
                {"item_id": "tee", "item_type": "piece", "item_added_date": "2024-06-15"},
                {"item_id": "jeans", "item_type": "piece"},
            ],
        },
        {"_id": "s2", "name": "Empty", "createdAt": "2024-08-01", "items": []},
    ]
    return LockerCatalog.from_records(pieces, outfits, shelves, config=LockerConfig(shelf_preview_limit=2))


def test_config_defaults(clean_env) -> None:
    config = LockerConfig.from_env()

    assert config.default_sort_order is SortOrder.NEWEST
    assert config.default_filter is OwnershipFilter.ALL
    assert config.shelf_preview_limit == 7
    assert config.log_level == "INFO"
    assert config.environment is None


def test_config_env_overrides_file(clean_env, tmp_path) -> None:
    config_file = tmp_path / "staging.yaml"
    config_file.write_text(
        "# staging defaults\n"
        "default_sort_order: az\n"
        "default_filter: 'owned'\n"
        "shelf_preview_limit: 4\n"
        "log_level: debug\n"
    )
    clean_env.setenv("APP_CONFIG_PATH", str(config_file))
    clean_env.setenv("LOCKER_DEFAULT_FILTER", "outfits")

    config = LockerConfig.from_env()

    assert config.default_sort_order is SortOrder.AZ
    assert config.default_filter is KindFilter.OUTFITS
    assert config.shelf_preview_limit == 4
    assert config.log_level == "DEBUG"


def test_config_reads_environment_file_by_name(clean_env, tmp_path) -> None:
    (tmp_path / "prod.yaml").write_text("default_sort_order: oldest\n")
    clean_env.setenv("LOCKER_CONFIG_DIR", str(tmp_path))
    clean_env.setenv("APP_ENV", "prod")

    config = LockerConfig.from_env()

    assert config.default_sort_order is SortOrder.OLDEST
    assert config.environment == "prod"


@pytest.mark.parametrize(
    "key, value",
    [
        ("LOCKER_DEFAULT_SORT_ORDER", "popularity"),
        ("LOCKER_DEFAULT_FILTER", "borrowed"),
        ("LOCKER_SHELF_PREVIEW_LIMIT", "many"),
        ("LOCKER_SHELF_PREVIEW_LIMIT", "-1"),
    ],
)
def test_invalid_config_values_raise(clean_env, key, value) -> None:
    clean_env.setenv(key, value)

    with pytest.raises(ValueError):
        LockerConfig.from_env()


def test_pieces_view_filters_and_sorts(catalog) -> None:
    assert [piece.piece_id for piece in catalog.pieces_view()] == ["shirt", "boots", "jeans", "tee", "cap"]
    assert [piece.piece_id for piece in catalog.pieces_view("az", "want")] == ["jeans"]
    assert [piece.piece_id for piece in catalog.pieces_view("oldest", "owned")] == ["cap", "tee", "boots", "shirt"]
    assert len(catalog.pieces_view("bogus", "bogus")) == 5


def test_config_defaults_apply_to_views(catalog) -> None:
    az_catalog = LockerCatalog(catalog.pieces, catalog.outfits, catalog.shelves, config=LockerConfig(default_sort_order="az"))

    assert [outfit.outfit_id for outfit in az_catalog.outfits_view()] == ["o2", "o1"]
    assert [outfit.name for outfit in az_catalog.outfits_view("az")] == ["Office", "Weekend"]
    assert [outfit.outfit_id for outfit in catalog.outfits_view()] == ["o2", "o1"]
    assert [outfit.outfit_id for outfit in catalog.outfits_view("oldest")] == ["o1", "o2"]


def test_outfit_cards_carry_layouts(catalog) -> None:
    cards = {card.outfit.outfit_id: card for card in catalog.outfit_cards()}

    weekend = cards["o1"]
    assert [piece.piece_id for piece in weekend.pieces] == ["cap", "jeans"]
    assert weekend.layout is LayoutTag.HEADWEAR_PLUS_LOWER
    assert weekend.css_class == "headwear-plus-row-lower"

    office = cards["o2"]
    assert office.layout is LayoutTag.FULL_NO_HEADWEAR
    assert [piece.piece_id for piece in office.classification.occupied] == ["tee", "boots"]


def test_mixed_view_combines_pieces_and_outfits(catalog) -> None:
    newest = catalog.mixed_view()
    assert [item.item_id for item in newest][:3] == ["o2", "shirt", "boots"]
    assert [item.item_id for item in catalog.mixed_view(mode="outfits")] == ["o2", "o1"]
    assert [item.item_id for item in catalog.mixed_view("oldest", "want")] == ["o1", "jeans", "o2"]


def test_shelf_views(catalog) -> None:
    assert catalog.find_shelf("go-to-looks").shelf_id == "s1"
    assert [item.item_id for item in catalog.shelf_view("go-to-looks")] == ["o1", "tee", "jeans"]
    assert [item.item_id for item in catalog.shelf_view("s1", "az")] == ["tee", "jeans", "o1"]
    assert [item.item_id for item in catalog.shelf_view("s1", mode="pieces")] == ["tee", "jeans"]
    assert catalog.shelf_view("nowhere") == []
    assert len(catalog.shelf_contents("s1")) == 3
    assert len(catalog.shelf_contents("nowhere")) == 0


def test_shelf_previews_respect_configured_limit(catalog) -> None:
    previews = catalog.shelf_previews()

    assert [preview.shelf.shelf_id for preview in previews] == ["s2", "s1"]
    go_to = previews[1]
    assert [item.item_id for item in go_to.visible] == ["o1", "tee"]
    assert go_to.extra_count == 1
    assert previews[0].visible == []
    assert previews[0].extra_count == 0


def test_shelf_picker_searches_pieces_and_outfits(catalog) -> None:
    results = catalog.shelf_picker(query="e", order="az")

    assert [item.name for item in results] == [
        "Blue Tee",
        "Bucket Hat",
        "Chelsea Boots",
        "Jeans",
        "Linen Shirt",
        "Office",
        "Weekend",
    ]
    assert [item.item_id for item in catalog.shelf_picker(query="WEEK")] == ["o1"]


def test_slot_picker_normalises_slot_and_validates(catalog) -> None:
    tops = catalog.slot_picker(slot_type="top")
    assert [piece.piece_id for piece in tops] == ["shirt", "tee"]
    assert [piece.piece_id for piece in catalog.slot_picker(slot_type="Top", query="blue")] == ["tee"]

    with pytest.raises(ValidationError):
        catalog.slot_picker(slot_type="Dress")


def test_redact_for_log_scrubs_images_and_links() -> None:
    payload = {
        "piece_id": "p1",
        "primary_img": "https://img.example.com/p1.jpg",
        "nested": [{"product_link": "https://shop.example.com"}, "owner@example.com", "https://cdn"],
        "count": 3,
    }

    scrubbed = redact_for_log(payload)

    assert scrubbed["piece_id"] == "p1"
    assert scrubbed["primary_img"] == "[redacted]"
    assert scrubbed["nested"] == [{"product_link": "[redacted]"}, "[redacted-email]", "[redacted-url]"]
    assert scrubbed["count"] == 3


def test_json_formatter_includes_correlation_and_extra_fields() -> None:
    record = logging.LogRecord("locker", logging.INFO, __file__, 1, "catalog_snapshot_loaded", None, None)
    record.event = "catalog_snapshot_loaded"
    record.piece_count = 5
    record.image = "https://img.example.com/p1.jpg"

    with correlation_context("req-123"):
        payload = json.loads(JsonFormatter().format(record))

    assert payload["correlation_id"] == "req-123"
    assert payload["event"] == "catalog_snapshot_loaded"
    assert payload["piece_count"] == 5
    assert payload["image"] == "[redacted-url]"
    assert "msg" not in payload


def test_redact_for_log_flattens_locker_entities() -> None:
    piece = Piece(
        piece_id="p1",
        name="Tee",
        type="top",
        primary_img="https://img.example.com/p1.jpg",
        secondary_imgs=("https://img.example.com/p1-back.jpg",),
        product_link="https://shop.example.com/tee",
    )

    scrubbed = redact_for_log({"piece": piece, "order": SortOrder.AZ, "item": MixedItem.piece(piece)})

    assert scrubbed["order"] == "az"
    assert scrubbed["piece"]["piece_id"] == "p1"
    assert scrubbed["piece"]["type"] == "Top"
    assert scrubbed["piece"]["primary_img"] == "[redacted]"
    assert scrubbed["piece"]["secondary_imgs"] == "[redacted]"
    assert scrubbed["piece"]["product_link"] == "[redacted]"
    assert scrubbed["item"]["kind"] == "Piece"
    assert scrubbed["item"]["value"]["primary_img"] == "[redacted]"


def test_json_formatter_serialises_shelf_and_enum_fields() -> None:
    shelf = Shelf(shelf_id="s1", name="Capsule", items=(ShelfEntry(item="p1", item_type="piece"),))
    record = logging.LogRecord("locker", logging.INFO, __file__, 1, "shelf_not_found", None, None)
    record.shelf = shelf
    record.default_order = SortOrder.NEWEST

    payload = json.loads(JsonFormatter().format(record))

    assert payload["default_order"] == "newest"
    assert payload["shelf"]["shelf_id"] == "s1"
    assert payload["shelf"]["items"] == [{"item": "p1", "item_type": "Piece", "item_added_date": None}]
