"""Raster dataset view over a DMV XYZ sheet."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import rasterio
from rasterio.crs import CRS as RasterioCRS
from rasterio.transform import Affine, from_origin

from dmv2tif.dmv.crs import bounds_to_wgs84, rasterio_crs
from dmv2tif.dmv.ingest import IngestResult, build_grid
from dmv2tif.dmv.models import CELL_SIZE, NODATA, Bounds, IngestOptions, IngestStats, TileId
from dmv2tif.dmv.sheets import identify

DTYPE = "int32"


class DmvDataset:
    """Single band, read-only raster built from one DMV sheet."""

    def __init__(self, path: Path, result: IngestResult) -> None:
        self.path = path
        self._result = result

    @classmethod
    def open(cls, path: Path | str, *, options: IngestOptions | None = None) -> DmvDataset:
        """Read a ``VT<letter><NN><NN>.xyz`` file into a dataset."""
        path = Path(path)
        if not identify(path):
            raise ValueError(f"Not a DMV sheet name: {path.name}")
        with path.open("rb") as handle:
            result = build_grid(path, handle, options=options)
        return cls(path, result)

    @property
    def tile(self) -> TileId:
        return self._result.tile

    @property
    def stats(self) -> IngestStats:
        return self._result.stats

    @property
    def width(self) -> int:
        return self._result.geometry.width

    @property
    def height(self) -> int:
        return self._result.geometry.height

    @property
    def nodata(self) -> float:
        return NODATA

    @property
    def crs(self) -> RasterioCRS:
        return rasterio_crs()

    @property
    def transform(self) -> Affine:
        """Return the north-up affine transform of the grid."""
        geometry = self._result.geometry
        return from_origin(
            geometry.origin_easting,
            geometry.max_northing,
            CELL_SIZE,
            CELL_SIZE,
        )

    @property
    def bounds(self) -> Bounds:
        return self._result.geometry.bounds

    def bounds_wgs84(self) -> Bounds:
        return bounds_to_wgs84(self.bounds)

    def coverage(self) -> float:
        """Return the written fraction of cells."""
        return self._result.grid.coverage() / float(self.width * self.height)

    def read_row(self, index: int) -> np.ndarray:
        """Return one north-up row of integer elevations."""
        return self._result.grid.read_row(index)

    def read(self) -> np.ndarray:
        """Return the full north-up integer grid."""
        return self._result.grid.read()

    def write_geotiff(self, output_path: Path) -> Path:
        """Write the grid as a single band GeoTIFF."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with rasterio.open(
            output_path,
            "w",
            driver="GTiff",
            height=self.height,
            width=self.width,
            count=1,
            dtype=DTYPE,
            crs=self.crs,
            transform=self.transform,
            nodata=self.nodata,
        ) as dest:
            dest.write(self.read(), 1)
            dest.update_tags(tile=self.tile.name, source=self.path.name)
        return output_path
