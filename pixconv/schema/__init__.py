# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""
Schema definitions for pixel art state.

Cells, catalog entries and snapshots are immutable (frozen dataclasses).
Edits produce new values; they never mutate existing ones.
"""

from pixconv.schema.pixel_art import (
    DEFAULT_PALETTE,
    NONE_GROUP,
    RESERVED_ID,
    RGB,
    Cell,
    ColorGroup,
    ColorType,
    DataGroup,
    EditMode,
    Key,
    ScaleMode,
    Snapshot,
    cell_key,
)

__all__ = [
    # Constants
    "DEFAULT_PALETTE",
    "NONE_GROUP",
    "RESERVED_ID",
    # Aliases
    "Key",
    "RGB",
    # Modes
    "ScaleMode",
    "EditMode",
    # Core types
    "Cell",
    "ColorGroup",
    "DataGroup",
    "ColorType",
    "Snapshot",
    "cell_key",
]
