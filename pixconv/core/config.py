# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""Editor configuration."""

from __future__ import annotations

from dataclasses import dataclass

from pixconv.schema import DEFAULT_PALETTE


@dataclass(frozen=True)
class EditorConfig:
    """Bounds and defaults for an editing session."""

    # Grid edge length. Raw values from UI controls are clamped, not rejected.
    min_size: int = 8
    max_size: int = 256
    default_size: int = 32

    # View zoom (1.0 = 100%)
    min_zoom: float = 0.1
    max_zoom: float = 2.0

    # Maximum snapshots kept; the oldest are dropped beyond this
    undo_capacity: int = 50

    palette: tuple[str, ...] = DEFAULT_PALETTE

    def __post_init__(self) -> None:
        if not 0 < self.min_size <= self.default_size <= self.max_size:
            raise ValueError(
                f"Expected 0 < min_size <= default_size <= max_size, got "
                f"{self.min_size}, {self.default_size}, {self.max_size}"
            )
        if not 0.0 < self.min_zoom <= self.max_zoom:
            raise ValueError(
                f"Expected 0 < min_zoom <= max_zoom, got "
                f"{self.min_zoom}, {self.max_zoom}"
            )
        if self.undo_capacity < 1:
            raise ValueError(f"undo_capacity must be >= 1, got {self.undo_capacity}")

    def clamp_size(self, size: float) -> int:
        """Clamp a grid edge length to [min_size, max_size]."""
        return int(max(self.min_size, min(self.max_size, int(size))))

    def clamp_zoom(self, zoom: float) -> float:
        """Clamp a zoom factor to [min_zoom, max_zoom]."""
        return float(max(self.min_zoom, min(self.max_zoom, zoom)))


DEFAULT_CONFIG = EditorConfig()
