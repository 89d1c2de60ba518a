"""Coordinate reference system helpers for DMV sheets."""

from __future__ import annotations

import numpy as np
from pyproj import CRS, Transformer
from rasterio.crs import CRS as RasterioCRS

from dmv2tif.dmv.models import Bounds

# MGI 1901 / Slovene National Grid (D48/GK).
DMV_CRS = "EPSG:3912"
WGS84 = "EPSG:4326"


def normalize_crs(value: str | CRS) -> CRS:
    """Normalize CRS input into a pyproj CRS object."""
    return CRS.from_user_input(value)


def dmv_crs() -> CRS:
    """Return the fixed CRS every DMV sheet is expressed in."""
    return normalize_crs(DMV_CRS)


def rasterio_crs() -> RasterioCRS:
    """Return the DMV CRS as a rasterio CRS for dataset writes."""
    return RasterioCRS.from_user_input(dmv_crs())


def transformer(src: str | CRS, dst: str | CRS) -> Transformer:
    """Return a transformer that keeps easting/longitude first."""
    return Transformer.from_crs(normalize_crs(src), normalize_crs(dst), always_xy=True)


def bounds_to_wgs84(bounds: Bounds, *, densify_pts: int = 21) -> Bounds:
    """Project DMV (minx, miny, maxx, maxy) bounds to lon/lat bounds."""
    minx, miny, maxx, maxy = bounds
    steps = max(2, densify_pts + 2)
    edge_x = np.linspace(minx, maxx, steps)
    edge_y = np.linspace(miny, maxy, steps)
    xs = np.concatenate([edge_x, edge_x, np.full(steps, minx), np.full(steps, maxx)])
    ys = np.concatenate([np.full(steps, miny), np.full(steps, maxy), edge_y, edge_y])
    lons, lats = transformer(DMV_CRS, WGS84).transform(xs, ys)
    return (float(np.min(lons)), float(np.min(lats)), float(np.max(lons)), float(np.max(lats)))
