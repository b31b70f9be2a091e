# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""
Raster image I/O.

Decodes image files into the (H, W, 4) uint8 bitmaps the sampler reads,
and renders a grid back to an RGBA image at native resolution (one image
pixel per grid cell, empty positions transparent).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Union

import numpy as np
from numpy.typing import NDArray

from pixconv.schema import Cell
from pixconv.core.sampler import as_rgba

if TYPE_CHECKING:
    from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def _pil():
    try:
        from PIL import Image
    except ImportError as e:
        raise ImportError(
            "Pillow is required for image I/O. "
            "Install with: pip install Pillow"
        ) from e
    return Image


def load_bitmap(
    image: Union[str, Path, "PILImage.Image", NDArray[np.uint8]],
) -> NDArray[np.uint8]:
    """
    Decode an image into an RGBA bitmap.

    Args:
        image: One of:
            - Path to an image file (str or Path)
            - A PIL image in any mode
            - A uint8 array of shape (H, W, 4) or (H, W, 3)

    Returns:
        (H, W, 4) uint8 array, row-major

    Raises:
        TypeError: For unsupported input types
        ValueError: For arrays of the wrong shape or dtype
    """
    if isinstance(image, np.ndarray):
        return as_rgba(image)

    Image = _pil()
    if isinstance(image, (str, Path)):
        with Image.open(image) as img:
            img.load()
            rgba = img.convert("RGBA")
    elif isinstance(image, Image.Image):
        rgba = image.convert("RGBA")
    else:
        raise TypeError(
            f"Expected file path, PIL image or numpy array, got {type(image)}"
        )

    pixels = np.array(rgba, dtype=np.uint8)
    logger.debug("loaded bitmap %dx%d", pixels.shape[1], pixels.shape[0])
    return as_rgba(pixels)


def render_bitmap(cells: Iterable[Cell], size: int) -> NDArray[np.uint8]:
    """
    Rasterize cells into a (size, size, 4) array.

    Painted positions are opaque, everything else is fully transparent.
    Cells outside the grid are skipped.
    """
    bitmap = np.zeros((size, size, 4), dtype=np.uint8)
    for cell in cells:
        if 0 <= cell.x < size and 0 <= cell.y < size:
            bitmap[cell.y, cell.x] = (cell.r, cell.g, cell.b, 255)
    return bitmap


def render_image(cells: Iterable[Cell], size: int) -> "PILImage.Image":
    """Render cells as an RGBA PIL image at native grid resolution."""
    Image = _pil()
    return Image.fromarray(render_bitmap(cells, size))


def save_png(cells: Iterable[Cell], size: int, path: Union[str, Path]) -> Path:
    """Write the grid as a PNG file and return its path."""
    path = Path(path)
    render_image(cells, size).save(path, format="PNG")
    logger.debug("saved %dx%d PNG to %s", size, size, path)
    return path
