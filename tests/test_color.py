# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""Tests for RGB color math (hex conversion, distance, nearest palette slot)."""

import pytest

from pixconv.core.color import (
    distance_squared,
    hex_to_rgb,
    nearest_index,
    normalize_hex,
    parse_hex,
    rgb_to_hex,
)


PRIMARIES = ["#FF0000", "#00FF00", "#0000FF"]


class TestHexToRgb:

    def test_with_hash(self):
        assert hex_to_rgb("#FF8000") == (255, 128, 0)

    def test_without_hash(self):
        assert hex_to_rgb("ff8000") == (255, 128, 0)

    def test_case_insensitive(self):
        assert hex_to_rgb("#aBcDeF") == hex_to_rgb("#ABCDEF") == (171, 205, 239)

    @pytest.mark.parametrize("bad", ["", "#", "#12345", "#1234567", "zzzzzz", "#12 456"])
    def test_malformed_is_black(self, bad):
        assert hex_to_rgb(bad) == (0, 0, 0)

    def test_parse_hex_strict(self):
        assert parse_hex("#00ff00") == (0, 255, 0)
        assert parse_hex("#00ff0") is None
        assert parse_hex(None) is None

    @pytest.mark.parametrize("padded", [" #ff0000", "#ff0000 ", "#ff0000\n", "\tff0000"])
    def test_surrounding_whitespace_rejected(self, padded):
        assert parse_hex(padded) is None
        assert hex_to_rgb(padded) == (0, 0, 0)


class TestRgbToHex:

    def test_lowercase_with_hash(self):
        assert rgb_to_hex(255, 0, 128) == "#ff0080"

    def test_always_seven_chars(self):
        assert len(rgb_to_hex(0, 0, 0)) == 7
        assert rgb_to_hex(1, 2, 3) == "#010203"

    def test_rounds(self):
        assert rgb_to_hex(10.4, 10.5, 10.6) == "#0a0b0b"

    def test_clamps(self):
        assert rgb_to_hex(-20, 300, 255.9) == "#00ffff"

    def test_roundtrip(self):
        for hex_color in ["#000000", "#ffffff", "#12ab9f"]:
            assert rgb_to_hex(*hex_to_rgb(hex_color)) == hex_color

    def test_normalize(self):
        assert normalize_hex("ABCDEF") == "#abcdef"
        assert normalize_hex("nope") is None


class TestDistance:

    def test_zero_for_identical(self):
        assert distance_squared((12, 34, 56), (12, 34, 56)) == 0

    def test_symmetric(self):
        a, b = (10, 20, 30), (200, 5, 90)
        assert distance_squared(a, b) == distance_squared(b, a)

    def test_sum_of_squares(self):
        assert distance_squared((0, 0, 0), (1, 2, 3)) == 14

    def test_accepts_hex(self):
        assert distance_squared("#ff0000", (255, 0, 0)) == 0


class TestNearestIndex:

    def test_empty_palette(self):
        assert nearest_index((1, 2, 3), []) == -1

    def test_near_red(self):
        assert nearest_index((250, 5, 5), PRIMARIES) == 0

    def test_near_blue(self):
        assert nearest_index((10, 20, 240), PRIMARIES) == 2

    def test_tie_goes_to_lowest_index(self):
        # (128, 128, 0) is equidistant from red and green
        assert nearest_index((128, 128, 0), ["#FF0000", "#00FF00"]) == 0
        assert nearest_index((128, 128, 0), ["#00FF00", "#FF0000"]) == 0

    def test_duplicate_palette_entries(self):
        assert nearest_index((0, 0, 255), ["#0000ff", "#0000FF"]) == 0

    def test_deterministic(self):
        results = {nearest_index((90, 140, 30), PRIMARIES) for _ in range(10)}
        assert len(results) == 1
