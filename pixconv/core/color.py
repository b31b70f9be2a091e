# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""
Color math in plain 8-bit sRGB.

Hex text <-> RGB conversion, squared Euclidean distance and nearest
palette lookup. Distances are deliberately not perceptual: the palette
engine compares raw channel values.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence, Union

from pixconv.schema import RGB

ColorLike = Union[str, Sequence[int]]

_HEX_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)


# =============================================================================
# Hex <-> RGB
# =============================================================================


def parse_hex(hex_color: str) -> Optional[RGB]:
    """
    Strictly parse ``#rrggbb`` / ``rrggbb`` (any case).

    Returns:
        (r, g, b) tuple, or None if the text is not six hex digits.
    """
    if not isinstance(hex_color, str):
        return None
    m = _HEX_RE.fullmatch(hex_color)
    if not m:
        return None
    return (int(m.group(1), 16), int(m.group(2), 16), int(m.group(3), 16))


def hex_to_rgb(hex_color: str) -> RGB:
    """
    Convert hex text to an (r, g, b) tuple.

    Accepts six hex digits with or without a leading ``#``, case-insensitive.
    Malformed input yields black ``(0, 0, 0)`` rather than raising.
    """
    rgb = parse_hex(hex_color)
    return rgb if rgb is not None else (0, 0, 0)


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """
    Convert channel values to lowercase ``#rrggbb``.

    Each channel is rounded to the nearest integer and clamped to [0, 255],
    so the result is always seven characters.
    """
    return "#" + "".join(f"{_channel(v):02x}" for v in (r, g, b))


def normalize_hex(hex_color: str) -> Optional[str]:
    """Canonical ``#rrggbb`` form of hex text, or None if malformed."""
    rgb = parse_hex(hex_color)
    if rgb is None:
        return None
    return rgb_to_hex(*rgb)


def _channel(value: float) -> int:
    # int(x + 0.5) matches round-half-up for the non-negative range
    v = int(float(value) + 0.5) if value >= 0 else 0
    return max(0, min(255, v))


def _as_rgb(color: ColorLike) -> RGB:
    if isinstance(color, str):
        return hex_to_rgb(color)
    r, g, b = color[:3]
    return (int(r), int(g), int(b))


# =============================================================================
# Distance
# =============================================================================


def distance_squared(c1: ColorLike, c2: ColorLike) -> int:
    """
    Squared Euclidean distance in RGB.

    Symmetric, and zero iff the colors are channel-wise identical. The
    square root is skipped because only the ordering matters.
    """
    r1, g1, b1 = _as_rgb(c1)
    r2, g2, b2 = _as_rgb(c2)
    dr, dg, db = r1 - r2, g1 - g2, b1 - b2
    return dr * dr + dg * dg + db * db


def nearest_index(color: ColorLike, palette: Sequence[ColorLike]) -> int:
    """
    Index of the palette entry closest to ``color``.

    Args:
        color: (r, g, b) or hex text
        palette: Ordered palette entries (hex text or RGB triples)

    Returns:
        Index of the nearest entry, -1 for an empty palette. Ties go to the
        lowest index: the best is only replaced on a strictly smaller
        distance.
    """
    if len(palette) == 0:
        return -1

    target = _as_rgb(color)
    best_index = 0
    best_distance: Optional[int] = None
    for i, entry in enumerate(palette):
        d = distance_squared(target, entry)
        if best_distance is None or d < best_distance:
            best_distance = d
            best_index = i
    return best_index
