"""Ingestion pipeline turning a DMV point stream into an elevation grid."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import PurePath
from typing import BinaryIO

from dmv2tif.dmv.grid import ElevationGrid
from dmv2tif.dmv.models import (
    IngestOptions,
    IngestStats,
    InvalidTileGeometryError,
    TileGeometry,
    TileId,
)
from dmv2tif.dmv.records import next_record
from dmv2tif.dmv.sheets import locate_tile, parse_tile_id

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResult:
    """Grid, geometry and statistics produced by one ingestion pass."""

    tile: TileId
    geometry: TileGeometry
    grid: ElevationGrid
    stats: IngestStats


def resolve_geometry(tile: TileId) -> TileGeometry:
    """Return the tile geometry or raise when the sheet has no coverage."""
    geometry = locate_tile(tile)
    if not geometry.valid:
        raise InvalidTileGeometryError(
            f"No sheet origin for {tile.name}: {geometry.width} x {geometry.height} "
            f"at ({geometry.origin_easting}, {geometry.origin_northing})"
        )
    return geometry


def build_grid(
    tile: TileId | str | PurePath,
    source: BinaryIO,
    *,
    options: IngestOptions | None = None,
) -> IngestResult:
    """Read every record of ``source`` into a grid sized for ``tile``.

    An ``OSError`` while reading ends the pass early; the partially populated
    grid is returned and the error is kept on ``stats.io_error``.
    """
    options = options or IngestOptions()
    tile_id = tile if isinstance(tile, TileId) else parse_tile_id(tile)
    geometry = resolve_geometry(tile_id)
    grid = ElevationGrid.for_geometry(geometry)
    stats = IngestStats()
    log_extra = {"tile": tile_id.name}

    if source.seekable():
        source.seek(0)
    while True:
        try:
            sample = next_record(
                source,
                min_length=options.min_record_length,
                strict=options.strict,
            )
        except OSError as exc:
            stats.io_error = str(exc)
            LOGGER.warning(
                "Read failed after %s records; keeping partial grid: %s",
                stats.records,
                exc,
                extra=log_extra,
            )
            break
        if sample is None:
            break
        stats.observe(sample)
        placement = grid.place(sample, geometry, threshold=options.outlier_threshold)
        if placement.overshoot:
            stats.overshoots += 1
            LOGGER.debug(
                "Line %s overshoot clamped to row %s, col %s",
                stats.records,
                placement.row,
                placement.col,
                extra=log_extra,
            )
        if placement.status == "skipped":
            stats.skipped += 1
            LOGGER.debug(
                "Line %s outside tile origin (row %s, col %s); skipped",
                stats.records,
                placement.row,
                placement.col,
                extra=log_extra,
            )
        elif placement.accepted:
            stats.accepted += 1
        else:
            stats.rejected += 1

    if stats.records:
        LOGGER.info(
            "Read %s records: northing %.2f..%.2f, easting %.2f..%.2f",
            stats.records,
            stats.min_northing,
            stats.max_northing,
            stats.min_easting,
            stats.max_easting,
            extra=log_extra,
        )
    else:
        LOGGER.warning("No records read", extra=log_extra)
    LOGGER.info(
        "Accepted %s, rejected %s, skipped %s, overshoots %s",
        stats.accepted,
        stats.rejected,
        stats.skipped,
        stats.overshoots,
        extra=log_extra,
    )
    return IngestResult(tile=tile_id, geometry=geometry, grid=grid, stats=stats)
