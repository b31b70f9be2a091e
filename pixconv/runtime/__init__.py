# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""
I/O boundary for Pixconv.

1. Document -- the validated JSON exchange format
2. Image -- raster decode into bitmaps and PNG rendering of a grid

Nothing here edits state; it only converts to and from it.
"""

from pixconv.runtime.document import (
    DecodedDocument,
    DocumentValidationError,
    decode,
    encode,
    from_json,
    to_json,
    validate_document,
)
from pixconv.runtime.image import load_bitmap, render_bitmap, render_image, save_png

__all__ = [
    "encode",
    "decode",
    "to_json",
    "from_json",
    "validate_document",
    "DecodedDocument",
    "DocumentValidationError",
    "load_bitmap",
    "render_bitmap",
    "render_image",
    "save_png",
]
