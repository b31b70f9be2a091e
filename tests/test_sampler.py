# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""Tests for image-to-grid sampling (majority vote and nearest neighbor)."""

import numpy as np
import pytest

from pixconv.core.sampler import (
    ALPHA_CUTOFF,
    bitmap_from_bytes,
    block_bounds,
    sample,
    sample_majority,
    sample_nearest,
    sample_points,
)
from pixconv.schema import ScaleMode


def _solid(r, g, b, a=255, height=16, width=16):
    return np.full((height, width, 4), [r, g, b, a], dtype=np.uint8)


def _by_key(cells):
    return {c.key: c for c in cells}


def _assert_valid(cells, size):
    keys = [c.key for c in cells]
    assert len(keys) == len(set(keys))
    for c in cells:
        assert 0 <= c.x < size and 0 <= c.y < size


class TestBitmapInput:

    def test_from_bytes(self):
        data = bytes([255, 0, 0, 255] * 6)
        bmp = bitmap_from_bytes(3, 2, data)
        assert bmp.shape == (2, 3, 4)
        assert tuple(bmp[1, 2]) == (255, 0, 0, 255)

    def test_from_bytes_wrong_length(self):
        with pytest.raises(ValueError, match="expected 24"):
            bitmap_from_bytes(3, 2, bytes(10))

    def test_rgb_array_is_opaque(self):
        rgb = np.full((4, 4, 3), 7, dtype=np.uint8)
        cells = sample_nearest(rgb, 2)
        assert len(cells) == 4

    def test_rejects_bad_shape(self):
        with pytest.raises(ValueError, match="Expected"):
            sample_majority(np.zeros((4, 4), dtype=np.uint8), 2)

    def test_rejects_bad_dtype(self):
        with pytest.raises(ValueError, match="uint8"):
            sample_majority(np.zeros((4, 4, 4), dtype=np.float32), 2)

    def test_rejects_non_array(self):
        with pytest.raises(TypeError):
            sample_majority([[0, 0, 0, 0]], 2)


class TestMajority:

    def test_solid_fills_grid(self):
        cells = sample_majority(_solid(10, 20, 30), 8)
        assert len(cells) == 64
        assert all(c.rgb == (10, 20, 30) for c in cells)
        assert all(c.color_group == -1 and c.group_id == 0 and c.type_id == 0 for c in cells)

    def test_row_major_order(self):
        cells = sample_majority(_solid(1, 1, 1), 4)
        assert [c.key for c in cells[:5]] == [(0, 0), (1, 0), (2, 0), (3, 0), (0, 1)]

    def test_majority_wins(self):
        img = _solid(0, 0, 255, height=2, width=2)
        img[0, 0] = [255, 0, 0, 255]
        cells = sample_majority(img, 1)
        assert cells[0].rgb == (0, 0, 255)

    def test_tie_goes_to_first_seen(self):
        img = np.zeros((2, 2, 4), dtype=np.uint8)
        img[0, 0] = [0, 255, 0, 255]   # first in row-major order
        img[0, 1] = [255, 0, 0, 255]
        img[1, 0] = [255, 0, 0, 255]
        img[1, 1] = [0, 255, 0, 255]
        assert sample_majority(img, 1)[0].rgb == (0, 255, 0)

    def test_alpha_ignored_for_counting(self):
        img = np.zeros((1, 3, 4), dtype=np.uint8)
        img[0, 0] = [9, 9, 9, 200]
        img[0, 1] = [9, 9, 9, 255]
        img[0, 2] = [1, 1, 1, 255]
        assert sample_majority(img, 1)[0].rgb == (9, 9, 9)

    def test_mostly_transparent_block_skipped(self):
        img = _solid(0, 0, 0, a=0, height=2, width=2)
        img[0, 0] = [255, 255, 255, 255]
        assert sample_majority(img, 1) == []

    def test_half_transparent_block_kept(self):
        img = _solid(0, 0, 0, a=0, height=2, width=2)
        img[0, 0] = [255, 255, 255, 255]
        img[1, 1] = [255, 255, 255, 255]
        cells = sample_majority(img, 1)
        assert len(cells) == 1 and cells[0].rgb == (255, 255, 255)

    def test_alpha_cutoff_boundary(self):
        below = _solid(5, 5, 5, a=ALPHA_CUTOFF - 1, height=2, width=2)
        at = _solid(5, 5, 5, a=ALPHA_CUTOFF, height=2, width=2)
        assert sample_majority(below, 1) == []
        assert len(sample_majority(at, 1)) == 1

    def test_source_smaller_than_grid(self):
        # 3 source columns over 8 targets: some blocks are empty
        img = _solid(50, 60, 70, height=3, width=3)
        cells = sample_majority(img, 8)
        _assert_valid(cells, 8)
        assert 0 < len(cells) < 64

    def test_block_bounds(self):
        assert block_bounds(0, 10, 3) == (0, 3)
        assert block_bounds(1, 10, 3) == (3, 6)
        assert block_bounds(2, 10, 3) == (6, 10)

    def test_quadrants(self):
        img = _solid(0, 0, 0, height=8, width=8)
        img[:4, 4:] = [255, 0, 0, 255]
        cells = _by_key(sample_majority(img, 2))
        assert cells[(1, 0)].rgb == (255, 0, 0)
        assert cells[(0, 0)].rgb == (0, 0, 0)
        assert cells[(1, 1)].rgb == (0, 0, 0)


class TestNearest:

    def test_sample_points(self):
        assert list(sample_points(10, 4)) == [1, 3, 6, 8]
        assert list(sample_points(1, 4)) == [0, 0, 0, 0]

    def test_copies_center_pixel(self):
        img = _solid(0, 0, 0, height=4, width=4)
        img[1, 1] = [200, 100, 50, 255]
        cells = _by_key(sample_nearest(img, 2))
        assert cells[(0, 0)].rgb == (200, 100, 50)

    def test_transparent_sample_skipped(self):
        img = _solid(10, 10, 10, height=4, width=4)
        img[1, 1] = [10, 10, 10, 0]
        cells = _by_key(sample_nearest(img, 2))
        assert (0, 0) not in cells
        assert len(cells) == 3

    def test_upscale(self):
        img = _solid(3, 4, 5, height=2, width=2)
        cells = sample_nearest(img, 8)
        assert len(cells) == 64


class TestDispatch:

    def test_mode_enum_and_string(self):
        img = _solid(1, 2, 3)
        assert sample(img, 8, ScaleMode.NEAREST) == sample(img, 8, "nearest")
        assert sample(img, 8, "majority") == sample_majority(img, 8)

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            sample(_solid(1, 2, 3), 8, "bilinear")

    def test_does_not_mutate_input(self):
        img = _solid(1, 2, 3)
        before = img.copy()
        sample(img, 8, "majority")
        sample(img, 8, "nearest")
        np.testing.assert_array_equal(img, before)


class TestBounds:

    @pytest.mark.parametrize("size", [8, 13, 64, 256])
    @pytest.mark.parametrize("mode", ["majority", "nearest"])
    def test_cells_in_range_and_unique(self, size, mode):
        rng = np.random.default_rng(7)
        img = rng.integers(0, 256, size=(37, 53, 4), dtype=np.uint8)
        cells = sample(img, size, mode)
        _assert_valid(cells, size)
