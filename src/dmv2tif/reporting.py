"""Conversion report construction helpers."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from dmv2tif.contracts import SCHEMA_VERSION
from dmv2tif.dmv.crs import DMV_CRS
from dmv2tif.dmv.dataset import DmvDataset
from dmv2tif.dmv.models import IngestOptions


def _utc_now() -> str:
    """Return the current UTC timestamp as ISO8601."""
    return datetime.now(timezone.utc).isoformat()


def conversion_report(
    dataset: DmvDataset,
    *,
    options: IngestOptions,
    output_path: Path | None = None,
    include_wgs84: bool = True,
) -> dict[str, Any]:
    """Summarize a converted sheet as a JSON-serializable dictionary."""
    tile = dataset.tile
    geometry: dict[str, Any] = {
        "origin_easting": dataset.bounds[0],
        "origin_northing": dataset.bounds[1],
        "width": dataset.width,
        "height": dataset.height,
        "bounds": list(dataset.bounds),
    }
    if include_wgs84:
        geometry["bounds_wgs84"] = list(dataset.bounds_wgs84())
    return {
        "schema_version": SCHEMA_VERSION,
        "created_at": _utc_now(),
        "source": str(dataset.path),
        "tile": {
            "name": tile.name,
            "letter": tile.letter,
            "section": tile.section,
            "subsection": tile.subsection,
        },
        "crs": DMV_CRS,
        "geometry": geometry,
        "stats": dataset.stats.as_dict(),
        "coverage": round(dataset.coverage(), 6),
        "options": asdict(options),
        "output": str(output_path) if output_path else None,
    }
