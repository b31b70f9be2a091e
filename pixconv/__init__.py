# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""
Pixconv -- raster images to classifiable pixel art grids.

Samples an image into an N x N grid of color cells, groups the cells by
nearest palette color, and lets them be labeled with two independent
catalogs (data groups and color types), edited, undone and exchanged as
JSON.

Quick start::

    from pixconv import PixelEditor

    editor = PixelEditor()
    editor.set_size(64)
    editor.load_image("sprite.png")
    editor.parse_color_types()
    editor.export_json()
"""

from __future__ import annotations

__version__ = "1.0.0"

from pixconv.editor import PixelEditor
from pixconv.core import EditorConfig, regroup, sample
from pixconv.runtime import DocumentValidationError, decode, encode
from pixconv.schema import (
    Cell,
    ColorGroup,
    ColorType,
    DataGroup,
    EditMode,
    ScaleMode,
)

__all__ = [
    # Core API
    "PixelEditor",
    "EditorConfig",
    "sample",
    "regroup",
    "encode",
    "decode",
    "DocumentValidationError",
    # Types (commonly needed)
    "Cell",
    "ColorGroup",
    "DataGroup",
    "ColorType",
    "ScaleMode",
    "EditMode",
    # Version
    "__version__",
]
