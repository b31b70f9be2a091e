# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""
Grid state: the authoritative cell collection.

Cells are kept in a dict keyed by ``(x, y)``, so positions are unique by
construction. Absence of a key means a transparent position. Every
mutation swaps frozen Cell values in or out; cells are never edited in
place.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, Iterator, Optional, Union

from pixconv.schema import Cell, Key
from pixconv.core.color import parse_hex
from pixconv.core.config import DEFAULT_CONFIG, EditorConfig

logger = logging.getLogger(__name__)

KeyLike = Union[Key, str]

NO_FILTER = -1


def parse_key(key: KeyLike) -> Optional[Key]:
    """Accept ``(x, y)`` or the ``"x,y"`` text form. None if unparseable."""
    if isinstance(key, str):
        parts = key.split(",")
        if len(parts) != 2:
            return None
        try:
            return (int(parts[0]), int(parts[1]))
        except ValueError:
            return None
    x, y = key
    return (int(x), int(y))


def _key_set(keys: Iterable[KeyLike]) -> set[Key]:
    parsed = (parse_key(k) for k in keys)
    return {k for k in parsed if k is not None}


def passes_filter(cell: Cell, color_filter: int) -> bool:
    """True when no color-group filter is active or the cell is in it."""
    return color_filter < 0 or cell.color_group == color_filter


class PixelGrid:
    """
    Square grid of sparse cells.

    Args:
        size: Edge length, clamped to the config bounds
        cells: Initial cells (a later cell at the same position wins)
        config: Size bounds
    """

    def __init__(
        self,
        size: Optional[int] = None,
        cells: Iterable[Cell] = (),
        config: EditorConfig = DEFAULT_CONFIG,
    ) -> None:
        self._config = config
        self._size = config.clamp_size(config.default_size if size is None else size)
        self._cells: dict[Key, Cell] = {}
        self.load(cells)

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    @property
    def size(self) -> int:
        return self._size

    @property
    def cells(self) -> tuple[Cell, ...]:
        return tuple(self._cells.values())

    def get(self, key: KeyLike) -> Optional[Cell]:
        parsed = parse_key(key)
        return self._cells.get(parsed) if parsed is not None else None

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(tuple(self._cells.values()))

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (tuple, str)):
            return False
        return self.get(key) is not None

    def keys_in_rect(
        self,
        x0: int,
        y0: int,
        x1: int,
        y1: int,
        color_filter: int = NO_FILTER,
    ) -> set[Key]:
        """Keys of existing cells inside the inclusive rectangle (any corner order)."""
        min_x, max_x = min(x0, x1), max(x0, x1)
        min_y, max_y = min(y0, y1), max(y0, y1)
        return {
            key
            for key, cell in self._cells.items()
            if min_x <= cell.x <= max_x
            and min_y <= cell.y <= max_y
            and passes_filter(cell, color_filter)
        }

    # -------------------------------------------------------------------------
    # Whole-collection replacement
    # -------------------------------------------------------------------------

    def load(self, cells: Iterable[Cell]) -> None:
        """Replace the whole collection."""
        self._cells = {cell.key: cell for cell in cells}

    def set_size(self, size: float) -> int:
        """Clamp and set the edge length without touching cells."""
        self._size = self._config.clamp_size(size)
        return self._size

    def resize(self, size: float) -> int:
        """
        Change the edge length and rescale the existing cells onto it.

        Every target position reads the source cell under its center,
        ``floor((i + 0.5) * old / new)`` per axis, the same rule as
        nearest-neighbor image sampling. Labels and color group travel with
        the cell. Empty source positions stay empty.

        Returns:
            The clamped new edge length
        """
        new_size = self._config.clamp_size(size)
        old_size = self._size
        if new_size == old_size:
            return new_size

        points = [
            min(((2 * i + 1) * old_size) // (2 * new_size), old_size - 1)
            for i in range(new_size)
        ]
        rescaled = []
        for ty, sy in enumerate(points):
            for tx, sx in enumerate(points):
                source = self._cells.get((sx, sy))
                if source is not None:
                    rescaled.append(replace(source, x=tx, y=ty))

        logger.debug(
            "resized grid %d -> %d (%d -> %d cells)",
            old_size, new_size, len(self._cells), len(rescaled),
        )
        self._size = new_size
        self.load(rescaled)
        return new_size

    # -------------------------------------------------------------------------
    # Edits
    # -------------------------------------------------------------------------

    def paint(
        self,
        keys: Iterable[KeyLike],
        color: str,
        color_filter: int = NO_FILTER,
    ) -> int:
        """
        Set the RGB of selected cells.

        Cells outside the color-group filter are left untouched even when
        selected. A malformed color makes the whole call a no-op.

        Returns:
            Number of cells repainted
        """
        rgb = parse_hex(color)
        if rgb is None:
            logger.debug("paint ignored: malformed color %r", color)
            return 0
        r, g, b = rgb

        changed = 0
        for key in _key_set(keys):
            cell = self._cells.get(key)
            if cell is None or not passes_filter(cell, color_filter):
                continue
            self._cells[key] = replace(cell, r=r, g=g, b=b)
            changed += 1
        return changed

    def erase(self, keys: Iterable[KeyLike], color_filter: int = NO_FILTER) -> int:
        """
        Remove selected cells (subject to the color-group filter).

        Returns:
            Number of cells removed
        """
        removed = 0
        for key in _key_set(keys):
            cell = self._cells.get(key)
            if cell is None or not passes_filter(cell, color_filter):
                continue
            del self._cells[key]
            removed += 1
        return removed

    def set_field(
        self,
        keys: Iterable[KeyLike],
        field: str,
        value: int,
        color_filter: int = NO_FILTER,
    ) -> int:
        """
        Set an integer label field on selected cells.

        Returns:
            Number of selected cells that passed the filter
        """
        touched = 0
        for key in _key_set(keys):
            cell = self._cells.get(key)
            if cell is None or not passes_filter(cell, color_filter):
                continue
            if getattr(cell, field) != value:
                self._cells[key] = replace(cell, **{field: value})
            touched += 1
        return touched

    def reassign(self, field: str, old: int, new: int) -> int:
        """
        Move every cell whose ``field`` equals ``old`` to ``new``.

        Returns:
            Number of cells reassigned
        """
        moved = 0
        for key, cell in list(self._cells.items()):
            if getattr(cell, field) == old:
                self._cells[key] = replace(cell, **{field: new})
                moved += 1
        return moved

    def count_by(self, field: str) -> dict[int, int]:
        """Number of cells per value of an integer field."""
        counts: dict[int, int] = {}
        for cell in self._cells.values():
            value = getattr(cell, field)
            counts[value] = counts.get(value, 0) + 1
        return counts
