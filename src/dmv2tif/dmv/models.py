"""Data models used by the DMV reader."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import NamedTuple, Tuple

Bounds = Tuple[float, float, float, float]

CELL_SIZE = 5.0
NODATA = 0.0
INVALID_ORIGIN = -1.0
ENV_STRICT = "DMV2TIF_STRICT"


class InvalidTileGeometryError(ValueError):
    """Raised when a tile name does not resolve to a covered origin."""


class MalformedRecordError(ValueError):
    """Raised by strict parsing when a record field is not numeric."""

    def __init__(self, field_name: str, text: str) -> None:
        super().__init__(f"Malformed {field_name} field: {text!r}")
        self.field_name = field_name
        self.text = text


@dataclass(frozen=True)
class TileId:
    """Section letter, section number and sub-section of a DMV sheet."""

    letter: str
    section: int
    subsection: int

    @property
    def name(self) -> str:
        return f"VT{self.letter}{self.section:02d}{self.subsection:02d}"


@dataclass(frozen=True)
class TileGeometry:
    """Absolute lower-left origin and cell extent of a tile grid."""

    origin_easting: float
    origin_northing: float
    width: int
    height: int

    @property
    def valid(self) -> bool:
        return self.origin_easting > 0 and self.origin_northing > 0

    @property
    def max_easting(self) -> float:
        return self.origin_easting + CELL_SIZE * self.width

    @property
    def max_northing(self) -> float:
        return self.origin_northing + CELL_SIZE * self.height

    @property
    def bounds(self) -> Bounds:
        return (
            self.origin_easting,
            self.origin_northing,
            self.max_easting,
            self.max_northing,
        )


class Sample(NamedTuple):
    """One parsed point record."""

    northing: float
    easting: float
    elevation: float


@dataclass(frozen=True)
class IngestOptions:
    """Tunables for a single ingestion pass."""

    outlier_threshold: float = 30.0
    min_record_length: int = 5
    strict: bool = False

    @classmethod
    def from_env(
        cls,
        *,
        outlier_threshold: float | None = None,
        strict: bool | None = None,
    ) -> IngestOptions:
        """Build options, falling back to DMV2TIF_STRICT for strict parsing."""
        if strict is None:
            strict = os.environ.get(ENV_STRICT) == "1"
        if outlier_threshold is None:
            outlier_threshold = cls.outlier_threshold
        if outlier_threshold < 0:
            raise ValueError("outlier_threshold must be >= 0")
        return cls(outlier_threshold=outlier_threshold, strict=strict)


@dataclass
class IngestStats:
    """Counters and observed coordinate ranges for one ingestion pass."""

    records: int = 0
    accepted: int = 0
    rejected: int = 0
    skipped: int = 0
    overshoots: int = 0
    min_northing: float = math.inf
    max_northing: float = -math.inf
    min_easting: float = math.inf
    max_easting: float = -math.inf
    io_error: str | None = None

    def observe(self, sample: Sample) -> None:
        """Fold a sample's raw coordinates into the observed ranges."""
        self.records += 1
        self.min_northing = min(self.min_northing, sample.northing)
        self.max_northing = max(self.max_northing, sample.northing)
        self.min_easting = min(self.min_easting, sample.easting)
        self.max_easting = max(self.max_easting, sample.easting)

    def as_dict(self) -> dict[str, object]:
        observed = self.records > 0
        return {
            "records": self.records,
            "accepted": self.accepted,
            "rejected": self.rejected,
            "skipped": self.skipped,
            "overshoots": self.overshoots,
            "min_northing": self.min_northing if observed else None,
            "max_northing": self.max_northing if observed else None,
            "min_easting": self.min_easting if observed else None,
            "max_easting": self.max_easting if observed else None,
            "io_error": self.io_error,
        }
