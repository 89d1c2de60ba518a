"""DMV sheet reading helpers and exports."""

from dmv2tif.dmv.crs import DMV_CRS, bounds_to_wgs84, dmv_crs, normalize_crs
from dmv2tif.dmv.dataset import DmvDataset
from dmv2tif.dmv.grid import ElevationGrid, Placement
from dmv2tif.dmv.ingest import IngestResult, build_grid, resolve_geometry
from dmv2tif.dmv.models import (
    IngestOptions,
    IngestStats,
    InvalidTileGeometryError,
    MalformedRecordError,
    Sample,
    TileGeometry,
    TileId,
)
from dmv2tif.dmv.records import iter_records, next_record, parse_record, read_line
from dmv2tif.dmv.sheets import (
    identify,
    locate,
    locate_tile,
    parse_tile_id,
    section_origin,
    subsection_size,
)

__all__ = [
    "DMV_CRS",
    "DmvDataset",
    "ElevationGrid",
    "IngestOptions",
    "IngestResult",
    "IngestStats",
    "InvalidTileGeometryError",
    "MalformedRecordError",
    "Placement",
    "Sample",
    "TileGeometry",
    "TileId",
    "bounds_to_wgs84",
    "build_grid",
    "dmv_crs",
    "identify",
    "iter_records",
    "locate",
    "locate_tile",
    "next_record",
    "normalize_crs",
    "parse_record",
    "parse_tile_id",
    "read_line",
    "resolve_geometry",
    "section_origin",
    "subsection_size",
]
