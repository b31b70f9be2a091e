# Copyright (c) 2026 Pixconv
# SPDX-License-Identifier: MIT

"""
Document serializer: the JSON exchange format for a pixel art session.

Shape (field names are the compatibility contract)::

    {
      "Palette": ["rrggbb", ...],
      "Artwork": {
        "Width": 32, "Height": 32,
        "PixelData": [
          {"Position": {"x": 0, "y": 0},
           "Group": 0, "ColorGroup": 2, "ColorType": 1,
           "ColorHex": "ff0000"},
          ...
        ]
      }
    }

Hex text is written without the leading ``#``. Catalogs are not stored:
on import the DataGroup and ColorType catalogs are rebuilt from the ids
found on the cells. Import either fully succeeds or raises
DocumentValidationError; nothing is repaired silently.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Iterable, Optional, Sequence

from pixconv.schema import NONE_GROUP, RESERVED_ID, Cell, ColorType, DataGroup
from pixconv.core.color import hex_to_rgb, parse_hex, rgb_to_hex

logger = logging.getLogger(__name__)


class DocumentValidationError(ValueError):
    """Raised when an imported document does not match the exchange format."""


@dataclass(frozen=True, slots=True)
class DecodedDocument:
    """Everything restored from a document."""
    cells: tuple[Cell, ...]
    palette: tuple[str, ...]
    size: int
    data_groups: tuple[DataGroup, ...]
    color_types: tuple[ColorType, ...]


# =============================================================================
# Encode
# =============================================================================


def _strip_hash(color: str) -> str:
    return color[1:] if color.startswith("#") else color


def encode(cells: Iterable[Cell], palette: Sequence[str], size: int) -> dict:
    """
    Build the exchange document for a grid.

    Args:
        cells: Grid cells
        palette: Palette hex colors (with or without ``#``)
        size: Grid edge length, written as both Width and Height

    Returns:
        JSON-ready dict
    """
    return {
        "Palette": [_strip_hash(c) for c in palette],
        "Artwork": {
            "Width": size,
            "Height": size,
            "PixelData": [
                {
                    "Position": {"x": cell.x, "y": cell.y},
                    "Group": cell.group_id,
                    "ColorGroup": cell.color_group,
                    "ColorType": cell.type_id,
                    "ColorHex": rgb_to_hex(cell.r, cell.g, cell.b)[1:],
                }
                for cell in cells
            ],
        },
    }


def to_json(
    cells: Iterable[Cell],
    palette: Sequence[str],
    size: int,
    indent: Optional[int] = 2,
) -> str:
    """Serialize a grid to JSON text."""
    return json.dumps(encode(cells, palette, size), indent=indent)


# =============================================================================
# Validate
# =============================================================================


def _is_number(value: Any) -> bool:
    # bool is an int subclass but not a number in the exchange format;
    # json.loads yields inf and nan for 1e400, Infinity and NaN
    return (
        isinstance(value, Real)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def validate_document(data: Any) -> None:
    """
    Check a parsed document against the exchange format.

    Raises:
        DocumentValidationError: Naming the first offending field
    """
    if not isinstance(data, dict):
        raise DocumentValidationError("Import data must be an object")

    palette = data.get("Palette")
    if not isinstance(palette, list):
        raise DocumentValidationError('Missing or invalid "Palette" field')
    for i, color in enumerate(palette):
        if not isinstance(color, str):
            raise DocumentValidationError(f"Palette color at index {i} must be a string")

    artwork = data.get("Artwork")
    if not isinstance(artwork, dict):
        raise DocumentValidationError('Missing or invalid "Artwork" field')

    for dim in ("Width", "Height"):
        value = artwork.get(dim)
        if not _is_number(value) or value <= 0:
            raise DocumentValidationError(f"Artwork.{dim} must be a positive number")

    pixels = artwork.get("PixelData")
    if not isinstance(pixels, list):
        raise DocumentValidationError("Artwork.PixelData must be an array")

    seen: set[tuple] = set()
    for i, pixel in enumerate(pixels):
        if not isinstance(pixel, dict):
            raise DocumentValidationError(f"Pixel at index {i} must be an object")

        position = pixel.get("Position")
        if not isinstance(position, dict):
            raise DocumentValidationError(f"Pixel at index {i} missing or invalid Position")
        x, y = position.get("x"), position.get("y")
        if not _is_number(x) or not _is_number(y):
            raise DocumentValidationError(
                f"Pixel at index {i} Position must have numeric x and y"
            )

        for name in ("Group", "ColorGroup", "ColorType"):
            if not _is_number(pixel.get(name)):
                raise DocumentValidationError(f"Pixel at index {i} {name} must be a number")

        if not isinstance(pixel.get("ColorHex"), str):
            raise DocumentValidationError(f"Pixel at index {i} ColorHex must be a string")

        if (x, y) in seen:
            raise DocumentValidationError(
                f"Pixel at index {i} duplicates position ({x}, {y})"
            )
        seen.add((x, y))


# =============================================================================
# Decode
# =============================================================================


def _data_groups_from(cells: Sequence[Cell]) -> tuple[DataGroup, ...]:
    """The "None" entry plus one generic entry per non-zero group id, ascending."""
    ids = sorted({c.group_id for c in cells if c.group_id != RESERVED_ID})
    return (NONE_GROUP,) + tuple(DataGroup(id=i, name=f"Group {i}") for i in ids)


def _color_types_from(cells: Sequence[Cell]) -> tuple[ColorType, ...]:
    """One entry per positive type id, colored by the first cell seen with it."""
    first_color: dict[int, str] = {}
    for cell in cells:
        if cell.type_id > 0 and cell.type_id not in first_color:
            first_color[cell.type_id] = cell.hex
    return tuple(
        ColorType(id=i, color=first_color[i], name=f"Color {i}")
        for i in sorted(first_color)
    )


def decode(data: Any) -> DecodedDocument:
    """
    Restore a grid from a parsed document.

    Palette entries regain their ``#``. Cell colors are parsed leniently
    (malformed hex becomes black) once the document shape is valid.

    Raises:
        DocumentValidationError: If the document is malformed
    """
    validate_document(data)

    palette = tuple(c if c.startswith("#") else f"#{c}" for c in data["Palette"])
    artwork = data["Artwork"]

    cells = []
    for pixel in artwork["PixelData"]:
        if parse_hex(pixel["ColorHex"]) is None:
            logger.debug(
                "malformed ColorHex %r at (%s, %s) read as black",
                pixel["ColorHex"], pixel["Position"]["x"], pixel["Position"]["y"],
            )
        r, g, b = hex_to_rgb(pixel["ColorHex"])
        cells.append(Cell(
            x=pixel["Position"]["x"],
            y=pixel["Position"]["y"],
            r=r,
            g=g,
            b=b,
            color_group=pixel["ColorGroup"],
            group_id=pixel["Group"],
            type_id=pixel["ColorType"],
        ))

    logger.debug("decoded %d cells, palette of %d", len(cells), len(palette))
    return DecodedDocument(
        cells=tuple(cells),
        palette=palette,
        size=int(artwork["Width"]),
        data_groups=_data_groups_from(cells),
        color_types=_color_types_from(cells),
    )


def from_json(text: str) -> DecodedDocument:
    """
    Parse and decode JSON text.

    Raises:
        DocumentValidationError: On unparseable JSON or a malformed document
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentValidationError(f"Failed to parse JSON: {e}") from e
    return decode(data)
