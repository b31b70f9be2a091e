# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""
Editing core for Pixconv.

Deterministic, single-threaded building blocks: color math, image
sampling, grid state, palette grouping, label catalogs and undo.
"""

from pixconv.core.color import (
    distance_squared,
    hex_to_rgb,
    nearest_index,
    normalize_hex,
    parse_hex,
    rgb_to_hex,
)
from pixconv.core.config import DEFAULT_CONFIG, EditorConfig
from pixconv.core.grid import NO_FILTER, PixelGrid, parse_key
from pixconv.core.grouping import partition, regroup
from pixconv.core.labels import ColorTypeCatalog, DataGroupCatalog, LabelCatalog
from pixconv.core.sampler import (
    ALPHA_CUTOFF,
    bitmap_from_bytes,
    sample,
    sample_majority,
    sample_nearest,
)
from pixconv.core.undo import MAX_UNDO_STACK_SIZE, UndoStack, take_snapshot

__all__ = [
    # Color math
    "hex_to_rgb",
    "rgb_to_hex",
    "parse_hex",
    "normalize_hex",
    "distance_squared",
    "nearest_index",
    # Sampling
    "ALPHA_CUTOFF",
    "bitmap_from_bytes",
    "sample",
    "sample_majority",
    "sample_nearest",
    # Grid and grouping
    "NO_FILTER",
    "PixelGrid",
    "parse_key",
    "partition",
    "regroup",
    # Labels
    "LabelCatalog",
    "DataGroupCatalog",
    "ColorTypeCatalog",
    # Undo
    "MAX_UNDO_STACK_SIZE",
    "UndoStack",
    "take_snapshot",
    # Config
    "EditorConfig",
    "DEFAULT_CONFIG",
]
