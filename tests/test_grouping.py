# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""Tests for palette grouping."""

import numpy as np

from pixconv.core.color import nearest_index
from pixconv.core.grouping import nearest_indices, partition, regroup
from pixconv.schema import DEFAULT_PALETTE, Cell


def _cells(*colors):
    return [Cell(x=i, y=0, r=r, g=g, b=b) for i, (r, g, b) in enumerate(colors)]


class TestRegroup:

    def test_assigns_nearest(self):
        cells, groups = regroup(
            _cells((250, 10, 10), (5, 5, 240), (240, 0, 0)),
            ["#FF0000", "#00FF00", "#0000FF"],
        )
        assert [c.color_group for c in cells] == [0, 2, 0]
        assert [g.index for g in groups] == [0, 2]
        assert len(groups[0]) == 2
        assert groups[0].color == (255, 0, 0)

    def test_conserves_cells(self):
        rng = np.random.default_rng(3)
        colors = [tuple(int(v) for v in rng.integers(0, 256, 3)) for _ in range(200)]
        cells, groups = regroup(_cells(*colors), DEFAULT_PALETTE)
        assert sum(len(g) for g in groups) == len(cells) == 200
        grouped = [c.key for g in groups for c in g.cells]
        assert len(set(grouped)) == 200

    def test_groups_sorted_and_non_empty(self):
        cells, groups = regroup(_cells((0, 0, 0), (255, 255, 255), (0, 0, 250)), DEFAULT_PALETTE)
        indices = [g.index for g in groups]
        assert indices == sorted(indices)
        assert all(len(g) > 0 for g in groups)

    def test_only_color_group_changes(self):
        original = Cell(x=2, y=3, r=1, g=2, b=3, color_group=-1, group_id=4, type_id=5)
        (cell,), _ = regroup([original], DEFAULT_PALETTE)
        assert cell.key == (2, 3)
        assert cell.rgb == (1, 2, 3)
        assert cell.group_id == 4 and cell.type_id == 5
        assert cell.color_group == 7  # black

    def test_empty_palette(self):
        cells = _cells((1, 2, 3))
        out, groups = regroup(cells, [])
        assert groups == []
        assert out == cells

    def test_no_cells(self):
        assert regroup([], DEFAULT_PALETTE) == ([], [])

    def test_matches_scalar_nearest(self):
        rng = np.random.default_rng(11)
        colors = [tuple(int(v) for v in rng.integers(0, 256, 3)) for _ in range(50)]
        cells, _ = regroup(_cells(*colors), DEFAULT_PALETTE)
        for cell, color in zip(cells, colors):
            assert cell.color_group == nearest_index(color, DEFAULT_PALETTE)

    def test_vectorized_tie_lowest_index(self):
        rgb = np.array([[128, 128, 0]], dtype=np.int64)
        assert nearest_indices(rgb, ["#00FF00", "#FF0000"])[0] == 0


class TestPartition:

    def test_uses_stored_indices(self):
        cells = [
            Cell(x=0, y=0, r=0, g=0, b=0, color_group=1),
            Cell(x=1, y=0, r=0, g=0, b=0, color_group=-1),
            Cell(x=2, y=0, r=0, g=0, b=0, color_group=9),
        ]
        groups = partition(cells, ["#FF0000", "#00FF00"])
        assert [g.index for g in groups] == [1]
        assert groups[0].cells == (cells[0],)
