# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""
Pixel art data model.

Design principles:
- Immutable: cells, catalog entries and snapshots are frozen dataclasses
- Sparse: a cell exists only where the grid is painted
- Derived data is recomputed, never patched

A grid position is identified by its key, the ``(x, y)`` tuple. Two label
systems sit on top of the same cells:

- DataGroups, stored in ``Cell.group_id``
- ColorTypes, stored in ``Cell.type_id``

Id 0 is reserved in both as "unassigned".
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# =============================================================================
# Constants
# =============================================================================

RESERVED_ID = 0

DEFAULT_PALETTE: tuple[str, ...] = (
    "#FF0000",  # Red
    "#00FF00",  # Green
    "#0000FF",  # Blue
    "#FFFF00",  # Yellow
    "#FF00FF",  # Magenta
    "#00FFFF",  # Cyan
    "#FFFFFF",  # White
    "#000000",  # Black
    "#808080",  # Gray
)

Key = tuple[int, int]
RGB = tuple[int, int, int]


# =============================================================================
# Modes
# =============================================================================


class ScaleMode(Enum):
    """Image-to-grid sampling algorithm."""
    MAJORITY = "majority"
    NEAREST = "nearest"


class EditMode(Enum):
    """What a committed selection does to the cells."""
    GROUP = "group"
    COLOR_TYPE = "colorType"
    PAINT = "paint"
    ERASE = "erase"


# =============================================================================
# Cells
# =============================================================================


@dataclass(frozen=True, slots=True)
class Cell:
    """
    One painted grid position.

    Attributes:
        x, y: Grid coordinates, 0 <= value < grid edge length
        r, g, b: 8-bit channel values
        color_group: Nearest palette index, -1 until the first regroup
        group_id: DataGroup label (0 = None)
        type_id: ColorType label (0 = unassigned)
    """
    x: int
    y: int
    r: int
    g: int
    b: int
    color_group: int = -1
    group_id: int = 0
    type_id: int = 0

    @property
    def key(self) -> Key:
        return (self.x, self.y)

    @property
    def rgb(self) -> RGB:
        return (self.r, self.g, self.b)

    @property
    def hex(self) -> str:
        """Lowercase ``#rrggbb``."""
        from pixconv.core.color import rgb_to_hex
        return rgb_to_hex(self.r, self.g, self.b)


def cell_key(x: int, y: int) -> Key:
    """Key for the cell at (x, y)."""
    return (x, y)


@dataclass(frozen=True, slots=True)
class ColorGroup:
    """
    Cells whose nearest palette slot is ``index``.

    Derived by the grouping engine; rebuilt wholesale, never persisted.
    """
    index: int
    color: RGB
    cells: tuple[Cell, ...]

    def __len__(self) -> int:
        return len(self.cells)


# =============================================================================
# Label catalog entries
# =============================================================================


@dataclass(frozen=True, slots=True)
class DataGroup:
    """A user-named collection of cells."""
    id: int
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> DataGroup:
        return cls(id=data["id"], name=data["name"])


@dataclass(frozen=True, slots=True)
class ColorType:
    """A user classification of cells with a display color (``#rrggbb``)."""
    id: int
    color: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "color": self.color, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> ColorType:
        return cls(id=data["id"], color=data["color"], name=data["name"])


NONE_GROUP = DataGroup(id=RESERVED_ID, name="None")


# =============================================================================
# Undo snapshot
# =============================================================================


@dataclass(frozen=True, slots=True)
class Snapshot:
    """
    Editable state at one point in time.

    Every field is a tuple of frozen values, so a snapshot is a full value
    copy: nothing the caller does to live state can reach it.
    Selection, filters and zoom are not part of a snapshot.
    """
    cells: tuple[Cell, ...]
    palette: tuple[str, ...]
    data_groups: tuple[DataGroup, ...]
    color_types: tuple[ColorType, ...]
