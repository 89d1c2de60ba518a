"""Dense elevation grid with neighbor-mean outlier rejection."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from dmv2tif.dmv.models import CELL_SIZE, NODATA, Sample, TileGeometry

DEFAULT_OUTLIER_THRESHOLD = 30.0

# 1 2 3
# 4 X 5
# 6 7 8
_NEIGHBOR_OFFSETS = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)


@dataclass(frozen=True)
class Placement:
    """Outcome of placing one sample into the grid."""

    row: int
    col: int
    status: str
    overshoot: bool = False

    @property
    def accepted(self) -> bool:
        return self.status == "accepted"


class ElevationGrid:
    """Row-major elevation buffer addressed by ``row * width + col``.

    Row 0 is the southernmost row of the tile; column 0 the westernmost.
    Cells holding ``NODATA`` were never written.
    """

    def __init__(self, height: int, width: int) -> None:
        if height <= 0 or width <= 0:
            raise ValueError(f"Invalid grid dimensions: {width} x {height}")
        self.height = height
        self.width = width
        self._buffer = np.full(height * width, NODATA, dtype=np.float64)

    @classmethod
    def for_geometry(cls, geometry: TileGeometry) -> ElevationGrid:
        return cls(geometry.height, geometry.width)

    @property
    def array(self) -> np.ndarray:
        """Return a (height, width) view of the buffer in storage order."""
        return self._buffer.reshape(self.height, self.width)

    def __getitem__(self, index: Tuple[int, int]) -> float:
        row, col = index
        return float(self._buffer[row * self.width + col])

    def __setitem__(self, index: Tuple[int, int], value: float) -> None:
        row, col = index
        self._buffer[row * self.width + col] = value

    @staticmethod
    def index_for(sample: Sample, geometry: TileGeometry) -> Tuple[int, int]:
        """Return the unclamped (row, col) cell of a sample."""
        row = math.floor((sample.northing - geometry.origin_northing) / CELL_SIZE)
        col = math.floor((sample.easting - geometry.origin_easting) / CELL_SIZE)
        return (row, col)

    def neighbor_mean(self, row: int, col: int) -> float | None:
        """Average the written cells around (row, col).

        Neighbors on row 0 or column 0 never count. Returns None when no
        neighbor has been written yet.
        """
        total = 0.0
        count = 0
        for d_row, d_col in _NEIGHBOR_OFFSETS:
            n_row = row + d_row
            n_col = col + d_col
            if not (0 < n_row < self.height and 0 < n_col < self.width):
                continue
            value = self._buffer[n_row * self.width + n_col]
            if value > NODATA:
                total += value
                count += 1
        if count == 0:
            return None
        return total / count

    def place(
        self,
        sample: Sample,
        geometry: TileGeometry,
        *,
        threshold: float = DEFAULT_OUTLIER_THRESHOLD,
    ) -> Placement:
        """Write a sample unless it disagrees with its written neighbors.

        Indices past the upper bound are clamped to the last row/column;
        negative indices and non-finite values are skipped. The result depends
        on insertion order.
        """
        if not all(math.isfinite(value) for value in sample):
            return Placement(-1, -1, "skipped")
        row, col = self.index_for(sample, geometry)
        overshoot = False
        if row >= self.height:
            row = self.height - 1
            overshoot = True
        if col >= self.width:
            col = self.width - 1
            overshoot = True
        if row < 0 or col < 0:
            return Placement(row, col, "skipped", overshoot)
        mean = self.neighbor_mean(row, col)
        if mean is not None and abs(sample.elevation - mean) > threshold:
            return Placement(row, col, "rejected", overshoot)
        self._buffer[row * self.width + col] = sample.elevation
        return Placement(row, col, "accepted", overshoot)

    def read_row(self, index: int) -> np.ndarray:
        """Return a north-up row as integers truncated toward zero."""
        if not 0 <= index < self.height:
            raise IndexError(f"Row {index} outside 0..{self.height - 1}")
        row = self.height - 1 - index
        start = row * self.width
        return self._buffer[start : start + self.width].astype(np.int32)

    def read(self) -> np.ndarray:
        """Return the full north-up grid as int32."""
        return self.array[::-1].astype(np.int32)

    def coverage(self) -> int:
        """Return the number of written cells."""
        return int(np.count_nonzero(self._buffer != NODATA))
