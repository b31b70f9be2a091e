# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""
Palette grouping engine.

Assigns every cell to its nearest palette slot and partitions the cells
into ColorGroups. The palette is the single source of truth: groups are
always rebuilt from (cells, palette) as a whole, never patched.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Sequence

import numpy as np
from numpy.typing import NDArray

from pixconv.schema import Cell, ColorGroup
from pixconv.core.color import hex_to_rgb

logger = logging.getLogger(__name__)


def palette_array(palette: Sequence[str]) -> NDArray[np.int64]:
    """(P, 3) int64 array of palette RGB values."""
    return np.array([hex_to_rgb(c) for c in palette], dtype=np.int64).reshape(-1, 3)


def nearest_indices(
    rgb: NDArray[np.int64],
    palette: Sequence[str],
) -> NDArray[np.int64]:
    """
    Vectorized nearest palette index for an (N, 3) array of colors.

    np.argmin returns the first minimum, so ties go to the lowest palette
    index, matching core.color.nearest_index.
    """
    pal = palette_array(palette)
    dists = np.sum((rgb[:, np.newaxis, :] - pal[np.newaxis, :, :]) ** 2, axis=2)
    return np.argmin(dists, axis=1)


def partition(cells: Iterable[Cell], palette: Sequence[str]) -> list[ColorGroup]:
    """
    Build ColorGroups from the indices already stored on the cells.

    One group per distinct index present, ascending by index. Cells whose
    index does not name a palette slot (-1 before the first regroup, or a
    slot since deleted) belong to no group.
    """
    buckets: dict[int, list[Cell]] = {}
    for cell in cells:
        if 0 <= cell.color_group < len(palette):
            buckets.setdefault(cell.color_group, []).append(cell)

    return [
        ColorGroup(index=i, color=hex_to_rgb(palette[i]), cells=tuple(buckets[i]))
        for i in sorted(buckets)
    ]


def regroup(
    cells: Sequence[Cell],
    palette: Sequence[str],
) -> tuple[list[Cell], list[ColorGroup]]:
    """
    Recompute every cell's color group and rebuild the ColorGroup list.

    Args:
        cells: Current cell collection
        palette: Ordered hex colors; slot index is the group index

    Returns:
        (cells, color_groups). The cells are new values with
        ``color_group`` set to their nearest palette index; nothing else on
        them changes. Groups are ascending by index, one per index present.
        With no cells or an empty palette the group list is empty, and an
        empty palette leaves the cells' indices as they were.
    """
    cells = list(cells)
    if not cells or len(palette) == 0:
        return cells, []

    rgb = np.array([c.rgb for c in cells], dtype=np.int64)
    indices = nearest_indices(rgb, palette)

    regrouped = [
        cell if cell.color_group == int(idx) else replace(cell, color_group=int(idx))
        for cell, idx in zip(cells, indices)
    ]
    groups = partition(regrouped, palette)

    logger.debug(
        "regrouped %d cells into %d groups (palette of %d)",
        len(regrouped), len(groups), len(palette),
    )
    return regrouped, groups
