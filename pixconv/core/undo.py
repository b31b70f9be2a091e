# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""
Bounded linear undo stack.

Holds Snapshots of {cells, palette, data groups, color types}. Pushing past
capacity silently drops the oldest entries. Callers push *before* a
destructive edit; the stack itself enforces nothing about when.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterable, Optional

from pixconv.schema import Cell, ColorType, DataGroup, Snapshot

logger = logging.getLogger(__name__)

MAX_UNDO_STACK_SIZE = 50


def take_snapshot(
    cells: Iterable[Cell],
    palette: Iterable[str],
    data_groups: Iterable[DataGroup],
    color_types: Iterable[ColorType],
) -> Snapshot:
    """Freeze the four editable fields into a Snapshot (value copy)."""
    return Snapshot(
        cells=tuple(cells),
        palette=tuple(palette),
        data_groups=tuple(data_groups),
        color_types=tuple(color_types),
    )


class UndoStack:
    """
    Fixed-capacity LIFO of snapshots.

    Args:
        capacity: Maximum snapshots kept (default 50)
    """

    def __init__(self, capacity: int = MAX_UNDO_STACK_SIZE) -> None:
        if capacity < 1:
            raise ValueError(f"Undo capacity must be >= 1, got {capacity}")
        self._stack: deque[Snapshot] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._stack.maxlen or 0

    def __len__(self) -> int:
        return len(self._stack)

    def __bool__(self) -> bool:
        return len(self._stack) > 0

    def push(self, snapshot: Snapshot) -> None:
        """Push a snapshot, dropping the oldest when over capacity."""
        if len(self._stack) == self._stack.maxlen:
            logger.debug("undo stack full (%d), dropping oldest", self.capacity)
        self._stack.append(snapshot)

    def pop(self) -> Optional[Snapshot]:
        """Most recent snapshot, removed from the stack. None when empty."""
        if not self._stack:
            return None
        return self._stack.pop()

    def peek(self) -> Optional[Snapshot]:
        return self._stack[-1] if self._stack else None

    def clear(self) -> None:
        self._stack.clear()
