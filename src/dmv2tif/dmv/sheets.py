"""DMV sheet naming and tile geocoding helpers.

Sheets follow the TTN5 layout of the Slovene national grid. A section is
addressed by a letter (``A``-``L``, west to east) and a number (``19``-``30``,
south to north); its origin is the lower-left corner. Each section is split
into 50 sub-sections, ten across and five down, numbered from the upper-left
corner in row-major order.
"""

from __future__ import annotations

import logging
from pathlib import PurePath
from typing import Dict, Optional, Tuple

from dmv2tif.dmv.models import CELL_SIZE, INVALID_ORIGIN, TileGeometry, TileId

LOGGER = logging.getLogger(__name__)

LETTERS = "ABCDEFGHIJKL"
FIRST_SECTION = 19
SECTION_COUNT = 12
SUBSECTION_COLUMNS = 10
SUBSECTION_ROWS = 5
SUBSECTION_COUNT = SUBSECTION_COLUMNS * SUBSECTION_ROWS
XYZ_SUFFIX = ".xyz"

Origin = Optional[Tuple[float, float]]

# (easting, northing) of each section keyed by letter, indexed by section - 19.
# ``None`` marks a letter/section pair with no sheet coverage.
SECTION_ORIGINS: Dict[str, Tuple[Origin, ...]] = {
    "A": (
        None,
        None,
        None,
        None,
        (365000, 85000),
        (365000, 100000),
        (365000, 115000),
        (365000, 130000),
        None,
        None,
        None,
        None,
    ),
    "B": (
        (387500, 25000),
        (387500, 40000),
        (387500, 55000),
        (387500, 70000),
        (387500, 85000),
        (387500, 100000),
        (387500, 115000),
        (387500, 130000),
        (387500, 145000),
        None,
        None,
        None,
    ),
    "C": (
        (410000, 25000),
        (410000, 40000),
        (410000, 55000),
        (410000, 70000),
        (410000, 85000),
        (410000, 100000),
        (410000, 115000),
        (410000, 130000),
        (410000, 145000),
        None,
        None,
        None,
    ),
    "D": (
        (432500, 25000),
        (432500, 40000),
        (432500, 55000),
        (432500, 70000),
        (432500, 85000),
        (432500, 100000),
        (432500, 115000),
        (432500, 130000),
        (432500, 145000),
        None,
        None,
        None,
    ),
    "E": (
        None,
        (455000, 40000),
        (455000, 55000),
        (455000, 70000),
        (455000, 85000),
        (455000, 100000),
        (455000, 115000),
        (455000, 130000),
        (455000, 145000),
        None,
        None,
        None,
    ),
    "F": (
        (477500, 25000),
        (477500, 40000),
        (477500, 55000),
        (477500, 70000),
        (477500, 85000),
        (477500, 100000),
        (477500, 115000),
        (477500, 130000),
        (477500, 145000),
        (477500, 160000),
        None,
        None,
    ),
    "G": (
        (500000, 25000),
        (500000, 40000),
        (500000, 55000),
        (500000, 70000),
        (500000, 85000),
        (500000, 100000),
        (500000, 115000),
        (500000, 130000),
        (500000, 145000),
        (500000, 160000),
        None,
        None,
    ),
    "H": (
        (522500, 25000),
        (522500, 40000),
        (522500, 55000),
        (522500, 70000),
        (522500, 85000),
        (522500, 100000),
        (522500, 115000),
        (522500, 130000),
        (522500, 145000),
        (522500, 160000),
        None,
        None,
    ),
    "I": (
        None,
        None,
        None,
        (545000, 70000),
        (545000, 85000),
        (545000, 100000),
        (545000, 115000),
        (545000, 130000),
        (545000, 145000),
        (545000, 160000),
        (545000, 175000),
        None,
    ),
    "J": (
        None,
        None,
        None,
        None,
        None,
        None,
        (567500, 115000),
        (567500, 130000),
        (567500, 145000),
        (567500, 160000),
        (567500, 175000),
        (567500, 190000),
    ),
    "K": (
        None,
        None,
        None,
        None,
        None,
        None,
        None,
        (590000, 130000),
        (590000, 145000),
        (590000, 160000),
        (590000, 175000),
        (590000, 190000),
    ),
    "L": (
        None,
        None,
        None,
        None,
        None,
        None,
        None,
        None,
        (612500, 145000),
        (612500, 160000),
        None,
        None,
    ),
}

# (rows, cols) of each sub-section grid. Every sub-section currently has the
# same size; the table keeps room for border sub-sections that differ.
SUBSECTION_SIZES: Dict[int, Tuple[int, int]] = {
    number: (600, 450) for number in range(1, SUBSECTION_COUNT + 1)
}


def section_origin(letter: str, section: int) -> Tuple[float, float] | None:
    """Return the (northing, easting) base origin of a section, if covered."""
    row = SECTION_ORIGINS.get(letter)
    index = section - FIRST_SECTION
    if row is None or not 0 <= index < SECTION_COUNT:
        return None
    entry = row[index]
    if entry is None:
        return None
    easting, northing = entry
    return (float(northing), float(easting))


def subsection_size(subsection: int) -> Tuple[int, int]:
    """Return the (rows, cols) grid size for a sub-section number."""
    size = SUBSECTION_SIZES.get(subsection)
    if size is None:
        raise ValueError(f"Sub-section must be in 1..{SUBSECTION_COUNT}: {subsection}")
    return size


def _subsection_offset(subsection: int, rows: int, cols: int) -> Tuple[float, float]:
    """Return the (northing, easting) offset of a sub-section from the section origin."""
    sub_row, sub_col = divmod(subsection - 1, SUBSECTION_COLUMNS)
    # Numbering starts at the top edge while the origin sits at the bottom.
    northing = (SUBSECTION_ROWS - 1 - sub_row) * CELL_SIZE * rows
    easting = sub_col * CELL_SIZE * cols
    return (northing, easting)


def locate(letter: str, section: int, subsection: int) -> TileGeometry:
    """Resolve a sheet identifier into its absolute origin and grid size.

    Sections without coverage resolve to the ``(-1, -1)`` sentinel origin;
    callers must check ``TileGeometry.valid`` before using the result.
    """
    rows, cols = subsection_size(subsection)
    base = section_origin(letter, section)
    if base is None:
        LOGGER.debug("No sheet coverage for %s%02d", letter, section)
        return TileGeometry(INVALID_ORIGIN, INVALID_ORIGIN, width=cols, height=rows)
    northing, easting = base
    offset_northing, offset_easting = _subsection_offset(subsection, rows, cols)
    LOGGER.debug(
        "Letter: %s, section: %02d, sub-section: %02d",
        letter,
        section,
        subsection,
    )
    return TileGeometry(
        origin_easting=easting + offset_easting,
        origin_northing=northing + offset_northing,
        width=cols,
        height=rows,
    )


def locate_tile(tile: TileId) -> TileGeometry:
    """Resolve a parsed TileId into its geometry."""
    return locate(tile.letter, tile.section, tile.subsection)


def _stem(name: str | PurePath) -> str:
    path = PurePath(name)
    if path.suffix.lower() == XYZ_SUFFIX:
        return path.stem
    return path.name


def parse_tile_id(name: str | PurePath) -> TileId:
    """Extract the sheet identifier from a VT<letter><NN><NN> file name."""
    stem = _stem(name)
    digits = stem[3:7]
    if len(stem) < 7 or len(digits) != 4 or not digits.isdigit():
        raise ValueError(f"Invalid DMV tile name: {name}")
    return TileId(letter=stem[2], section=int(digits[:2]), subsection=int(digits[2:]))


def identify(path: str | PurePath) -> bool:
    """Return True when a path follows the DMV ``VT<letter><NN><NN>.xyz`` naming."""
    candidate = PurePath(path)
    if candidate.suffix.lower() != XYZ_SUFFIX:
        return False
    stem = candidate.stem
    if stem[:2].upper() != "VT":
        return False
    try:
        tile = parse_tile_id(candidate)
    except ValueError:
        return False
    return tile.letter in LETTERS and tile.section != 0 and tile.subsection != 0
