# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""
Image to grid sampling.

Two deterministic downsampling algorithms turn an RGBA bitmap into the
sparse cell list of an N x N grid:

1. Majority vote: each target cell takes the most frequent exact color of
   its source block (ties go to the color seen first in row-major order).
2. Nearest neighbor: each target cell copies the source pixel under its
   center.

Source pixels with alpha below ALPHA_CUTOFF are transparent. They never
vote and never produce a cell on their own.
"""

from __future__ import annotations

import logging
from typing import Union

import numpy as np
from numpy.typing import NDArray

from pixconv.schema import Cell, ScaleMode

logger = logging.getLogger(__name__)

ALPHA_CUTOFF = 10


# =============================================================================
# Bitmap input
# =============================================================================


def bitmap_from_bytes(width: int, height: int, data: bytes) -> NDArray[np.uint8]:
    """
    Wrap a row-major RGBA byte buffer as an (H, W, 4) array.

    Raises:
        ValueError: If the buffer length is not width * height * 4
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Bitmap dimensions must be positive, got {width}x{height}")
    expected = width * height * 4
    buf = np.frombuffer(bytes(data), dtype=np.uint8)
    if buf.size != expected:
        raise ValueError(
            f"RGBA buffer has {buf.size} bytes, expected {expected} "
            f"for {width}x{height}"
        )
    return buf.reshape(height, width, 4)


def as_rgba(bitmap: NDArray[np.uint8]) -> NDArray[np.uint8]:
    """
    Validate a bitmap array and return it as (H, W, 4) uint8.

    An (H, W, 3) array is treated as fully opaque.
    """
    if not isinstance(bitmap, np.ndarray):
        raise TypeError(f"Expected numpy array, got {type(bitmap)}")
    if bitmap.dtype != np.uint8:
        raise ValueError(f"Expected uint8 array, got {bitmap.dtype}")
    if bitmap.ndim != 3 or bitmap.shape[2] not in (3, 4):
        raise ValueError(
            f"Expected (H, W, 4) or (H, W, 3) array, got shape {bitmap.shape}"
        )
    if bitmap.shape[0] == 0 or bitmap.shape[1] == 0:
        raise ValueError(f"Bitmap is empty: shape {bitmap.shape}")

    if bitmap.shape[2] == 3:
        alpha = np.full(bitmap.shape[:2] + (1,), 255, dtype=np.uint8)
        return np.concatenate([bitmap, alpha], axis=2)
    return bitmap


def _check_size(size: int) -> int:
    size = int(size)
    if size <= 0:
        raise ValueError(f"Target size must be positive, got {size}")
    return size


# =============================================================================
# Majority vote
# =============================================================================


def block_bounds(index: int, source_dim: int, size: int) -> tuple[int, int]:
    """[start, end) of source block ``index`` along one axis."""
    return (index * source_dim) // size, ((index + 1) * source_dim) // size


def _majority_color(block: NDArray[np.uint8]) -> tuple[int, int, int] | None:
    """
    Winning color of one source block, or None if the block emits nothing.

    The block is read in row-major order; among colors with equal counts
    the one whose first occurrence comes earliest wins.
    """
    flat = block.reshape(-1, 4)
    total = len(flat)
    if total == 0:
        return None

    opaque = flat[flat[:, 3] >= ALPHA_CUTOFF]
    transparent = total - len(opaque)
    if transparent * 2 > total or len(opaque) == 0:
        return None

    packed = (
        (opaque[:, 0].astype(np.int64) << 16)
        | (opaque[:, 1].astype(np.int64) << 8)
        | opaque[:, 2].astype(np.int64)
    )
    values, first_seen, counts = np.unique(
        packed, return_index=True, return_counts=True
    )
    tied = counts == counts.max()
    winner = int(values[tied][np.argmin(first_seen[tied])])
    return (winner >> 16) & 0xFF, (winner >> 8) & 0xFF, winner & 0xFF


def sample_majority(bitmap: NDArray[np.uint8], size: int) -> list[Cell]:
    """
    Downsample by majority vote over source blocks.

    Block edges along each axis are ``floor(i * dim / size)`` and
    ``floor((i + 1) * dim / size)``. A block emits no cell when more than
    half of its pixels are transparent or it holds no opaque pixel (which
    includes empty blocks when the source is smaller than the grid).

    Args:
        bitmap: (H, W, 4) or (H, W, 3) uint8 array
        size: Grid edge length N

    Returns:
        Cells in row-major order, coordinates in [0, N)
    """
    rgba = as_rgba(bitmap)
    size = _check_size(size)
    height, width = rgba.shape[:2]

    col_bounds = [block_bounds(i, width, size) for i in range(size)]
    row_bounds = [block_bounds(i, height, size) for i in range(size)]

    cells = []
    for ty, (y0, y1) in enumerate(row_bounds):
        for tx, (x0, x1) in enumerate(col_bounds):
            color = _majority_color(rgba[y0:y1, x0:x1])
            if color is None:
                continue
            r, g, b = color
            cells.append(Cell(x=tx, y=ty, r=r, g=g, b=b))

    logger.debug(
        "majority sampling %dx%d -> %dx%d produced %d cells",
        width, height, size, size, len(cells),
    )
    return cells


# =============================================================================
# Nearest neighbor
# =============================================================================


def sample_points(source_dim: int, size: int) -> NDArray[np.int64]:
    """Source coordinate ``floor((i + 0.5) * dim / size)`` for every i, clamped."""
    i = np.arange(size, dtype=np.int64)
    points = ((2 * i + 1) * source_dim) // (2 * size)
    return np.minimum(points, source_dim - 1)


def sample_nearest(bitmap: NDArray[np.uint8], size: int) -> list[Cell]:
    """
    Downsample by sampling the source pixel under each target center.

    Args:
        bitmap: (H, W, 4) or (H, W, 3) uint8 array
        size: Grid edge length N

    Returns:
        Cells in row-major order, coordinates in [0, N)
    """
    rgba = as_rgba(bitmap)
    size = _check_size(size)
    height, width = rgba.shape[:2]

    xs = sample_points(width, size)
    ys = sample_points(height, size)
    sampled = rgba[ys[:, None], xs[None, :]]  # (size, size, 4)

    cells = []
    for ty in range(size):
        row = sampled[ty]
        for tx in range(size):
            r, g, b, a = (int(v) for v in row[tx])
            if a < ALPHA_CUTOFF:
                continue
            cells.append(Cell(x=tx, y=ty, r=r, g=g, b=b))

    logger.debug(
        "nearest sampling %dx%d -> %dx%d produced %d cells",
        width, height, size, size, len(cells),
    )
    return cells


# =============================================================================
# Dispatch
# =============================================================================


def sample(
    bitmap: NDArray[np.uint8],
    size: int,
    mode: Union[ScaleMode, str] = ScaleMode.MAJORITY,
) -> list[Cell]:
    """
    Convert a bitmap to grid cells with the chosen algorithm.

    Args:
        bitmap: (H, W, 4) or (H, W, 3) uint8 array
        size: Grid edge length N
        mode: ScaleMode or its string value ("majority" / "nearest")

    Raises:
        ValueError: For an unknown mode or invalid bitmap
    """
    mode = ScaleMode(mode)
    if mode is ScaleMode.MAJORITY:
        return sample_majority(bitmap, size)
    return sample_nearest(bitmap, size)
