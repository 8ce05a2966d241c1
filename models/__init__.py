"""Model package exports."""

from models.taxonomy import *  # noqa: F401,F403
from models.mixed import MixedItem
from models.outfit import Outfit
from models.piece import ItemTags, Piece
from models.shelf import Shelf, ShelfEntry

__all__ = ["ItemTags", "MixedItem", "Outfit", "Piece", "Shelf", "ShelfEntry"]
