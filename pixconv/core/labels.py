# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""
Classification engine: user label catalogs over grid cells.

DataGroups (``Cell.group_id``) and ColorTypes (``Cell.type_id``) are two
independent catalogs with the same rules, so both are a LabelCatalog
bound to a different cell field:

- Id 0 is reserved ("unassigned"): it cannot be renamed, deleted or
  cleared, and is always a valid assignment target.
- New ids are max(existing ids) + 1.
- Deleting an entry reassigns every cell holding it to 0 in the same call.

A catalog only ever touches its own field on the cells.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Generic, Iterable, Optional, Sequence, TypeVar

from pixconv.schema import (
    DEFAULT_PALETTE,
    NONE_GROUP,
    RESERVED_ID,
    ColorGroup,
    ColorType,
    DataGroup,
)
from pixconv.core.color import normalize_hex, rgb_to_hex
from pixconv.core.grid import NO_FILTER, KeyLike, PixelGrid

logger = logging.getLogger(__name__)

Entry = TypeVar("Entry", DataGroup, ColorType)


class LabelCatalog(Generic[Entry]):
    """
    Ordered catalog of label entries bound to one integer cell field.

    Subclasses set ``field`` and decide whether the reserved entry is
    stored explicitly (DataGroups) or only implied (ColorTypes).

    Args:
        grid: Grid whose cells carry the labels
        entries: Initial entries; the reserved entry is added if required
    """

    field: str = ""
    reserved_entry: Optional[Entry] = None

    def __init__(self, grid: PixelGrid, entries: Iterable[Entry] = ()) -> None:
        self._grid = grid
        self._entries: list[Entry] = []
        self.active_id = RESERVED_ID
        self.replace(entries)

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    @property
    def entries(self) -> tuple[Entry, ...]:
        return tuple(self._entries)

    @property
    def ids(self) -> tuple[int, ...]:
        return tuple(e.id for e in self._entries)

    def get(self, label_id: int) -> Optional[Entry]:
        for entry in self._entries:
            if entry.id == label_id:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, label_id: object) -> bool:
        return label_id == RESERVED_ID or any(e.id == label_id for e in self._entries)

    def counts(self) -> dict[int, int]:
        """Cells per catalog id (including 0), zero for unused entries."""
        by_value = self._grid.count_by(self.field)
        result = {RESERVED_ID: by_value.get(RESERVED_ID, 0)}
        for entry in self._entries:
            result[entry.id] = by_value.get(entry.id, 0)
        return result

    # -------------------------------------------------------------------------
    # Catalog edits
    # -------------------------------------------------------------------------

    def replace(self, entries: Iterable[Entry]) -> None:
        """Overwrite the catalog (import, undo). Resets the active id to 0."""
        kept = [e for e in entries if e.id != RESERVED_ID]
        if self.reserved_entry is not None:
            kept.insert(0, self.reserved_entry)
        self._entries = kept
        self.active_id = RESERVED_ID

    def next_id(self) -> int:
        return max((e.id for e in self._entries), default=RESERVED_ID) + 1

    def _new_entry(self, label_id: int) -> Entry:
        """Default entry for a fresh id. Every concrete catalog provides this."""
        raise NotImplementedError

    def create(self) -> Entry:
        """Append an entry with the next id and a default name; it becomes active."""
        entry = self._new_entry(self.next_id())
        self._entries.append(entry)
        self.active_id = entry.id
        logger.debug("created %s %d", self.field, entry.id)
        return entry

    def rename(self, label_id: int, name: str) -> bool:
        """Rename an entry. Rejected for id 0 and unknown ids."""
        if label_id == RESERVED_ID:
            return False
        return self._update(label_id, name=name)

    def set_active(self, label_id: int) -> bool:
        if label_id not in self:
            return False
        self.active_id = label_id
        return True

    def _update(self, label_id: int, **changes) -> bool:
        for i, entry in enumerate(self._entries):
            if entry.id == label_id:
                self._entries[i] = replace(entry, **changes)
                return True
        return False

    # -------------------------------------------------------------------------
    # Cell edits
    # -------------------------------------------------------------------------

    def assign(
        self,
        keys: Iterable[KeyLike],
        label_id: int,
        color_filter: int = NO_FILTER,
    ) -> int:
        """
        Label the selected cells with ``label_id``.

        Only cells that exist and pass the color-group filter are labeled.
        Assigning an id absent from the catalog is a no-op.

        Returns:
            Number of cells labeled
        """
        if label_id not in self:
            logger.debug("assign ignored: unknown %s %d", self.field, label_id)
            return 0
        return self._grid.set_field(keys, self.field, label_id, color_filter)

    def delete(self, label_id: int) -> bool:
        """
        Remove an entry and move its cells to 0.

        Rejected for id 0 and unknown ids. Resets the active id to 0 when
        the active entry is deleted.
        """
        if label_id == RESERVED_ID or self.get(label_id) is None:
            return False
        self._entries = [e for e in self._entries if e.id != label_id]
        moved = self._grid.reassign(self.field, label_id, RESERVED_ID)
        if self.active_id == label_id:
            self.active_id = RESERVED_ID
        logger.debug("deleted %s %d, %d cells moved to 0", self.field, label_id, moved)
        return True

    def clear(self, label_id: int) -> int:
        """
        Move every cell holding ``label_id`` to 0, keeping the entry.

        Returns:
            Number of cells moved (0 for the reserved id)
        """
        if label_id == RESERVED_ID:
            return 0
        return self._grid.reassign(self.field, label_id, RESERVED_ID)


class DataGroupCatalog(LabelCatalog[DataGroup]):
    """DataGroups over ``Cell.group_id``; the "None" entry is always listed."""

    field = "group_id"
    reserved_entry = NONE_GROUP

    def _new_entry(self, label_id: int) -> DataGroup:
        return DataGroup(id=label_id, name=f"Group {label_id}")


class ColorTypeCatalog(LabelCatalog[ColorType]):
    """
    ColorTypes over ``Cell.type_id``.

    Id 0 is implied rather than listed: it is a valid assignment target
    but never appears among the entries.
    """

    field = "type_id"

    def _new_entry(self, label_id: int) -> ColorType:
        color = DEFAULT_PALETTE[(label_id - 1) % len(DEFAULT_PALETTE)].lower()
        return ColorType(id=label_id, color=color, name=f"Color {label_id}")

    def recolor(self, label_id: int, color: str) -> bool:
        """Change an entry's display color. Malformed colors are ignored."""
        normalized = normalize_hex(color)
        if normalized is None or label_id == RESERVED_ID:
            return False
        return self._update(label_id, color=normalized)

    def parse_from_groups(self, color_groups: Sequence[ColorGroup]) -> tuple[ColorType, ...]:
        """
        Derive one ColorType per non-empty ColorGroup.

        Groups are taken in ascending index order and numbered 1..k. Every
        cell's ``type_id`` becomes the id derived from its color group, or
        0 if its group is absent or empty. The catalog is overwritten and
        the first new id (or 0) becomes active.

        Returns:
            The new entries
        """
        non_empty = sorted((g for g in color_groups if len(g) > 0), key=lambda g: g.index)
        types = [
            ColorType(id=i, color=rgb_to_hex(*group.color), name=f"Color {i}")
            for i, group in enumerate(non_empty, start=1)
        ]
        type_of_group = {group.index: i for i, group in enumerate(non_empty, start=1)}

        self._grid.load(
            replace(cell, type_id=type_of_group.get(cell.color_group, RESERVED_ID))
            for cell in self._grid.cells
        )
        self.replace(types)
        self.active_id = types[0].id if types else RESERVED_ID

        logger.debug("parsed %d color types from %d groups", len(types), len(color_groups))
        return tuple(types)

