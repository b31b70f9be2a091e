# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""
Editing session API.

PixelEditor is the single entry point a front end talks to. It owns one
grid, its palette, both label catalogs and the undo stack, plus the view
state that is never undoable (selection, color-group filter, modes,
zoom). Every call runs to completion synchronously.

Undo discipline: gesture-level calls (``load_image``, ``commit_selection``)
save a snapshot before they change anything. The finer-grained calls do
not; callers that use them directly should call ``save_snapshot()`` first.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Union

import numpy as np
from numpy.typing import NDArray

from pixconv.schema import (
    Cell,
    ColorGroup,
    EditMode,
    Key,
    ScaleMode,
    Snapshot,
)
from pixconv.core.color import parse_hex
from pixconv.core.config import DEFAULT_CONFIG, EditorConfig
from pixconv.core.grid import NO_FILTER, KeyLike, PixelGrid, parse_key
from pixconv.core.grouping import partition, regroup
from pixconv.core.labels import ColorTypeCatalog, DataGroupCatalog
from pixconv.core.sampler import sample
from pixconv.core.undo import UndoStack, take_snapshot
from pixconv.runtime import image as image_io
from pixconv.runtime.document import DecodedDocument, decode, encode, from_json, to_json

logger = logging.getLogger(__name__)


class PixelEditor:
    """
    One pixel art editing session.

    Args:
        config: Size/zoom bounds, undo capacity and starting palette

    Example:
        >>> editor = PixelEditor()
        >>> editor.load_image("sprite.png")
        >>> editor.select_rect(0, 0, 7, 7)
        >>> editor.data_groups.create()
        >>> editor.commit_selection()       # assigns to the new group
        >>> doc = editor.export_document()
    """

    def __init__(self, config: EditorConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self.grid = PixelGrid(config.default_size, config=config)
        self.data_groups = DataGroupCatalog(self.grid)
        self.color_types = ColorTypeCatalog(self.grid)
        self.undo_stack = UndoStack(config.undo_capacity)

        self._palette: list[str] = list(config.palette)
        self._selection: set[Key] = set()

        self.scale_mode = ScaleMode.MAJORITY
        self.edit_mode = EditMode.GROUP
        self.zoom = 1.0
        self.active_color_group = NO_FILTER
        self.paint_color = "#ff0000"

    # =========================================================================
    # State access
    # =========================================================================

    @property
    def size(self) -> int:
        return self.grid.size

    @property
    def cells(self) -> tuple[Cell, ...]:
        return self.grid.cells

    @property
    def palette(self) -> tuple[str, ...]:
        return tuple(self._palette)

    @property
    def color_groups(self) -> list[ColorGroup]:
        """Current cells partitioned by their stored color group index."""
        return partition(self.grid.cells, self._palette)

    @property
    def selection(self) -> frozenset[Key]:
        return frozenset(self._selection)

    @property
    def can_undo(self) -> bool:
        return len(self.undo_stack) > 0

    # =========================================================================
    # View settings (clamped, never undoable)
    # =========================================================================

    def set_size(self, size: float) -> int:
        """Set the edge length used by the next image load (clamped)."""
        return self.grid.set_size(size)

    def resize(self, size: float) -> int:
        """Change the edge length and rescale the existing cells."""
        self._selection.clear()
        return self.grid.resize(size)

    def set_zoom(self, zoom: float) -> float:
        self.zoom = self.config.clamp_zoom(zoom)
        return self.zoom

    def set_scale_mode(self, mode: Union[ScaleMode, str]) -> None:
        self.scale_mode = ScaleMode(mode)

    def set_edit_mode(self, mode: Union[EditMode, str]) -> None:
        """Switch edit mode; the selection is cleared."""
        self.edit_mode = EditMode(mode)
        self._selection.clear()

    def set_active_color_group(self, index: int) -> None:
        """Restrict edits to one color group; -1 removes the filter."""
        self.active_color_group = index if index >= 0 else NO_FILTER

    def set_paint_color(self, color: str) -> bool:
        """Set the paint color. Malformed text is ignored."""
        if parse_hex(color) is None:
            return False
        self.paint_color = color
        return True

    # =========================================================================
    # Image loading
    # =========================================================================

    def load_image(
        self,
        image: Union[str, Path, NDArray[np.uint8], Any],
        mode: Optional[Union[ScaleMode, str]] = None,
    ) -> int:
        """
        Convert an image to cells at the current size and regroup.

        The previous state is saved for undo first.

        Args:
            image: File path, PIL image or (H, W, 4)/(H, W, 3) uint8 array
            mode: Sampling algorithm (default: the session's scale mode)

        Returns:
            Number of cells produced
        """
        bitmap = image_io.load_bitmap(image)
        cells = sample(bitmap, self.size, self.scale_mode if mode is None else mode)

        self.save_snapshot()
        self.grid.load(cells)
        self._selection.clear()
        self.regroup()
        logger.debug("loaded image into %d cells", len(cells))
        return len(cells)

    # =========================================================================
    # Palette
    # =========================================================================

    def add_palette_color(self, color: str) -> bool:
        """Append a slot. Cells keep their groups until the next regroup."""
        if parse_hex(color) is None:
            return False
        self._palette.append(color)
        return True

    def update_palette_color(self, index: int, color: str) -> bool:
        if not 0 <= index < len(self._palette) or parse_hex(color) is None:
            return False
        self._palette[index] = color
        return True

    def remove_palette_color(self, index: int) -> bool:
        if not 0 <= index < len(self._palette):
            return False
        del self._palette[index]
        return True

    def set_palette(self, palette: Iterable[str]) -> None:
        self._palette = list(palette)

    def regroup(self) -> list[ColorGroup]:
        """Reassign every cell to its nearest palette slot."""
        cells, groups = regroup(self.grid.cells, self._palette)
        self.grid.load(cells)
        return groups

    # =========================================================================
    # Selection
    # =========================================================================

    def select_rect(self, x0: int, y0: int, x1: int, y1: int) -> int:
        """
        Add existing cells inside the rectangle to the selection.

        Honors the color-group filter. Returns the selection size.
        """
        self._selection |= self.grid.keys_in_rect(x0, y0, x1, y1, self.active_color_group)
        return len(self._selection)

    def toggle_selection(self, x: int, y: int) -> bool:
        """Toggle one position; returns True if it is now selected."""
        key = (x, y)
        if key in self._selection:
            self._selection.discard(key)
            return False
        self._selection.add(key)
        return True

    def clear_selection(self) -> None:
        self._selection.clear()

    def commit_selection(self) -> int:
        """
        Apply the current edit mode to the selection, then clear it.

        - group: assign to the active data group
        - colorType: assign to the active color type
        - paint: repaint with the paint color
        - erase: remove the cells

        A snapshot is saved first. An empty selection does nothing.

        Returns:
            Number of cells affected
        """
        if not self._selection:
            return 0

        self.save_snapshot()
        keys = tuple(self._selection)
        if self.edit_mode is EditMode.GROUP:
            affected = self.assign_data_group(keys, self.data_groups.active_id)
        elif self.edit_mode is EditMode.COLOR_TYPE:
            affected = self.assign_color_type(keys, self.color_types.active_id)
        elif self.edit_mode is EditMode.PAINT:
            affected = self.paint(keys, self.paint_color)
        else:
            affected = self.erase(keys)

        self._selection.clear()
        logger.debug("%s applied to %d cells", self.edit_mode.value, affected)
        return affected

    # =========================================================================
    # Cell edits (filtered by the active color group)
    # =========================================================================

    def _keys(self, keys: Optional[Iterable[KeyLike]]) -> list[Key]:
        if keys is None:
            return list(self._selection)
        parsed = (parse_key(k) for k in keys)
        return [k for k in parsed if k is not None]

    def paint(self, keys: Optional[Iterable[KeyLike]] = None, color: Optional[str] = None) -> int:
        """Repaint cells (default: the selection, with the paint color)."""
        return self.grid.paint(
            self._keys(keys),
            self.paint_color if color is None else color,
            self.active_color_group,
        )

    def erase(self, keys: Optional[Iterable[KeyLike]] = None) -> int:
        """Remove cells (default: the selection)."""
        return self.grid.erase(self._keys(keys), self.active_color_group)

    def assign_data_group(
        self,
        keys: Optional[Iterable[KeyLike]] = None,
        group_id: Optional[int] = None,
    ) -> int:
        target = self.data_groups.active_id if group_id is None else group_id
        return self.data_groups.assign(self._keys(keys), target, self.active_color_group)

    def assign_color_type(
        self,
        keys: Optional[Iterable[KeyLike]] = None,
        type_id: Optional[int] = None,
    ) -> int:
        target = self.color_types.active_id if type_id is None else type_id
        return self.color_types.assign(self._keys(keys), target, self.active_color_group)

    def parse_color_types(self) -> int:
        """Rebuild the color types from the current color groups."""
        return len(self.color_types.parse_from_groups(self.color_groups))

    # =========================================================================
    # Undo
    # =========================================================================

    def snapshot(self) -> Snapshot:
        return take_snapshot(
            self.grid.cells,
            self._palette,
            self.data_groups.entries,
            self.color_types.entries,
        )

    def save_snapshot(self) -> None:
        """Push the current cells, palette and catalogs onto the undo stack."""
        self.undo_stack.push(self.snapshot())

    def undo(self) -> bool:
        """
        Restore the most recent snapshot.

        Returns:
            False (and changes nothing) when there is nothing to undo
        """
        snapshot = self.undo_stack.pop()
        if snapshot is None:
            return False

        active_group = self.data_groups.active_id
        active_type = self.color_types.active_id

        self.grid.load(snapshot.cells)
        self._palette = list(snapshot.palette)
        self.data_groups.replace(snapshot.data_groups)
        self.color_types.replace(snapshot.color_types)

        self.data_groups.set_active(active_group)
        self.color_types.set_active(active_type)
        self._selection.intersection_update(c.key for c in snapshot.cells)
        return True

    def clear_undo(self) -> None:
        self.undo_stack.clear()

    # =========================================================================
    # Import / export
    # =========================================================================

    def export_document(self) -> dict:
        return encode(self.grid.cells, self._palette, self.size)

    def export_json(self, indent: Optional[int] = 2) -> str:
        return to_json(self.grid.cells, self._palette, self.size, indent=indent)

    def import_document(self, data: Union[str, dict]) -> DecodedDocument:
        """
        Replace the session with a document (dict or JSON text).

        Validation happens before anything changes, so a rejected document
        leaves the session untouched. The undo stack is cleared and the
        selection, filter and active labels are reset.

        Raises:
            DocumentValidationError: If the document is malformed
        """
        doc = from_json(data) if isinstance(data, str) else decode(data)

        self.grid.set_size(doc.size)
        self.grid.load(doc.cells)
        self._palette = list(doc.palette)
        self.data_groups.replace(doc.data_groups)
        self.color_types.replace(doc.color_types)

        self._selection.clear()
        self.active_color_group = NO_FILTER
        self.undo_stack.clear()
        logger.debug("imported %d cells at size %d", len(doc.cells), doc.size)
        return doc

    def render_image(self):
        """RGBA PIL image of the grid, one pixel per cell."""
        return image_io.render_image(self.grid.cells, self.size)

    def save_png(self, path: Union[str, Path]) -> Path:
        return image_io.save_png(self.grid.cells, self.size, path)
