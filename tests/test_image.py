# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""Tests for raster decode and PNG rendering."""

import numpy as np
import pytest
from PIL import Image

from pixconv.runtime.image import load_bitmap, render_bitmap, render_image, save_png
from pixconv.schema import Cell


class TestLoadBitmap:

    def test_from_array(self):
        arr = np.zeros((3, 5, 3), dtype=np.uint8)
        bmp = load_bitmap(arr)
        assert bmp.shape == (3, 5, 4)
        assert (bmp[..., 3] == 255).all()

    def test_from_pil_rgb(self):
        img = Image.new("RGB", (4, 2), (10, 20, 30))
        bmp = load_bitmap(img)
        assert bmp.shape == (2, 4, 4)
        assert tuple(bmp[0, 0]) == (10, 20, 30, 255)

    def test_from_pil_palette_mode(self):
        img = Image.new("RGB", (2, 2), (200, 0, 0)).convert("P")
        assert load_bitmap(img).shape == (2, 2, 4)

    def test_from_path(self, tmp_path):
        path = tmp_path / "in.png"
        Image.new("RGBA", (6, 6), (1, 2, 3, 4)).save(path)
        bmp = load_bitmap(str(path))
        assert tuple(bmp[5, 5]) == (1, 2, 3, 4)

    def test_unsupported_type(self):
        with pytest.raises(TypeError):
            load_bitmap(42)


class TestRender:

    def test_bitmap(self):
        cells = [Cell(x=1, y=0, r=9, g=8, b=7), Cell(x=20, y=0, r=1, g=1, b=1)]
        bmp = render_bitmap(cells, 4)
        assert bmp.shape == (4, 4, 4)
        assert tuple(bmp[0, 1]) == (9, 8, 7, 255)
        assert bmp[..., 3].sum() == 255  # out-of-range cell skipped

    def test_image_mode(self):
        img = render_image([Cell(x=0, y=0, r=1, g=2, b=3)], 8)
        assert img.mode == "RGBA"
        assert img.size == (8, 8)

    def test_save_png(self, tmp_path):
        path = save_png([Cell(x=2, y=3, r=50, g=60, b=70)], 8, tmp_path / "out.png")
        with Image.open(path) as img:
            assert img.getpixel((2, 3)) == (50, 60, 70, 255)
            assert img.getpixel((0, 0))[3] == 0
