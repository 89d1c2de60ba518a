from __future__ import annotations

import io
import logging

import pytest

from dmv2tif.dmv import ingest
from dmv2tif.dmv.ingest import build_grid, resolve_geometry
from dmv2tif.dmv.models import (
    NODATA,
    IngestOptions,
    InvalidTileGeometryError,
    MalformedRecordError,
    TileId,
)
from tests.utils import small_geometry, xyz_stream

# VTB1941 is the bottom-left sub-section of section B19.
TILE = "VTB1941.xyz"
BASE_N = 25000.0
BASE_E = 387500.0


class _UnreadableStream(io.BytesIO):
    def read(self, *_args, **_kwargs):
        raise AssertionError("source must not be read")


def test_resolve_geometry_rejects_uncovered_tile() -> None:
    with pytest.raises(InvalidTileGeometryError, match="VTA1901"):
        resolve_geometry(TileId("A", 19, 1))


def test_build_grid_aborts_before_reading_invalid_tile() -> None:
    with pytest.raises(InvalidTileGeometryError):
        build_grid("VTA1901.xyz", _UnreadableStream(b"1 2 3\n"))


def test_build_grid_rejects_unparseable_name() -> None:
    with pytest.raises(ValueError, match="Invalid DMV tile name"):
        build_grid("points.xyz", io.BytesIO(b""))


def test_build_grid_places_records_relative_to_tile_origin() -> None:
    stream = xyz_stream(
        [
            f"{BASE_N + 12} {BASE_E + 7} 300.4",
            f"{BASE_N + 17} {BASE_E + 7} 301.2",
        ]
    )
    result = build_grid(TILE, stream)

    assert result.tile == TileId("B", 19, 41)
    assert (result.geometry.origin_northing, result.geometry.origin_easting) == (BASE_N, BASE_E)
    assert result.grid[2, 1] == 300.4
    assert result.grid[3, 1] == 301.2
    assert result.stats.records == 2
    assert result.stats.accepted == 2
    assert result.grid.read_row(result.geometry.height - 1 - 2)[1] == 300


def test_build_grid_rewinds_source() -> None:
    stream = xyz_stream([f"{BASE_N + 12} {BASE_E + 7} 300"])
    stream.seek(0, io.SEEK_END)
    result = build_grid(TileId("B", 19, 41), stream)
    assert result.stats.records == 1


def test_build_grid_stops_at_short_line() -> None:
    stream = xyz_stream(
        [
            f"{BASE_N + 12} {BASE_E + 7} 300",
            "1 2",
            f"{BASE_N + 22} {BASE_E + 7} 300",
        ]
    )
    result = build_grid(TILE, stream)
    assert result.stats.records == 1
    assert result.grid[4, 1] == NODATA


def test_build_grid_collects_stats() -> None:
    stream = xyz_stream(
        [
            f"{BASE_N + 12} {BASE_E + 12} 300",
            f"{BASE_N + 12} {BASE_E + 17} 400",
            f"{BASE_N - 50} {BASE_E + 17} 300",
            f"{BASE_N + 99999} {BASE_E + 17} 300",
        ]
    )
    result = build_grid(TILE, stream)
    stats = result.stats
    assert stats.records == 4
    assert stats.accepted == 2
    assert stats.rejected == 1
    assert stats.skipped == 1
    assert stats.overshoots == 1
    assert stats.min_northing == BASE_N - 50
    assert stats.max_northing == BASE_N + 99999
    assert stats.min_easting == BASE_E + 12
    assert stats.max_easting == BASE_E + 17
    assert result.grid[result.geometry.height - 1, 3] == 300


def test_build_grid_strict_option_raises() -> None:
    stream = xyz_stream([f"{BASE_N + 12} {BASE_E + 7} n/a"])
    with pytest.raises(MalformedRecordError):
        build_grid(TILE, stream, options=IngestOptions(strict=True))


def test_build_grid_permissive_by_default() -> None:
    stream = xyz_stream([f"{BASE_N + 12} {BASE_E + 7} n/a"])
    result = build_grid(TILE, stream)
    assert result.stats.accepted == 1
    assert result.grid[2, 1] == 0.0


def test_build_grid_logs_summary(caplog) -> None:
    caplog.set_level(logging.INFO, logger="dmv2tif")
    build_grid(TILE, xyz_stream([f"{BASE_N + 12} {BASE_E + 7} 300"]))
    summaries = [record for record in caplog.records if "Read 1 records" in record.getMessage()]
    assert summaries
    assert summaries[0].tile == "VTB1941"


def test_build_grid_warns_on_empty_input(caplog) -> None:
    caplog.set_level(logging.INFO, logger="dmv2tif")
    result = build_grid(TILE, io.BytesIO(b""))
    assert result.stats.records == 0
    assert result.grid.coverage() == 0
    assert any(record.levelno == logging.WARNING for record in caplog.records)


def _scenario_lines() -> list[str]:
    return ["100000 400000 500", "100005 400000 502", "100000 400005 10000"]


def test_build_grid_end_to_end_interior(monkeypatch) -> None:
    # Origin 10 units south-west of the samples so all three land inside
    # the neighbor-eligible interior at rows 2-3, cols 2-3.
    geometry = small_geometry(399990.0, 99990.0, width=450, height=600)
    monkeypatch.setattr(ingest, "locate_tile", lambda _tile: geometry)

    result = build_grid(TILE, xyz_stream(_scenario_lines()))

    assert result.grid[2, 2] == 500.0
    assert result.grid[3, 2] == 502.0
    assert result.grid[2, 3] == NODATA
    assert result.stats.rejected == 1


def test_build_grid_end_to_end_threshold_option(monkeypatch) -> None:
    geometry = small_geometry(399990.0, 99990.0, width=450, height=600)
    monkeypatch.setattr(ingest, "locate_tile", lambda _tile: geometry)

    options = IngestOptions(outlier_threshold=20000.0)
    result = build_grid(TILE, xyz_stream(_scenario_lines()), options=options)
    assert result.grid[2, 3] == 10000.0


class _FailingStream(io.BytesIO):
    def __init__(self, payload: bytes, fail_after: int) -> None:
        super().__init__(payload)
        self._fail_after = fail_after

    def read(self, *args, **kwargs):
        if self.tell() >= self._fail_after:
            raise OSError("device error")
        return super().read(*args, **kwargs)


def test_build_grid_keeps_partial_grid_on_read_error(caplog) -> None:
    first = f"{BASE_N + 12} {BASE_E + 7} 300\n".encode()
    payload = first + f"{BASE_N + 22} {BASE_E + 7} 301\n".encode()
    caplog.set_level(logging.WARNING, logger="dmv2tif")

    result = build_grid(TILE, _FailingStream(payload, len(first) + 3))

    assert result.grid[2, 1] == 300
    assert result.grid[4, 1] == NODATA
    assert result.stats.records == 1
    assert result.stats.io_error == "device error"
    assert result.stats.as_dict()["io_error"] == "device error"
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert warnings and warnings[0].tile == "VTB1941"


def test_build_grid_overflowing_coordinate_is_not_fatal() -> None:
    stream = xyz_stream(["1e400 387507 300", f"{BASE_N + 12} {BASE_E + 7} 301"])
    result = build_grid(TILE, stream)
    assert result.stats.records == 2
    assert result.stats.skipped == 1
    assert result.grid[2, 1] == 301
