from __future__ import annotations

import io
import os
from pathlib import Path
from typing import Iterable, Sequence

from dmv2tif.dmv.models import TileGeometry


def xyz_lines(points: Iterable[Sequence[float]]) -> list[str]:
    """Format (northing, easting, elevation) triples as DMV records."""
    return [" ".join(f"{value:.2f}" for value in point) for point in points]


def xyz_stream(lines: Iterable[str], *, newline: str = "\n") -> io.BytesIO:
    """Return an in-memory byte stream holding newline terminated records."""
    payload = "".join(f"{line}{newline}" for line in lines)
    return io.BytesIO(payload.encode("ascii"))


def write_xyz(path: Path, lines: Iterable[str], *, newline: str = "\n") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(xyz_stream(lines, newline=newline).getvalue())
    return path


def small_geometry(
    origin_easting: float = 400000.0,
    origin_northing: float = 100000.0,
    *,
    width: int = 5,
    height: int = 5,
) -> TileGeometry:
    return TileGeometry(origin_easting, origin_northing, width=width, height=height)


def with_src_env(base_env: dict[str, str] | None = None) -> dict[str, str]:
    """Return an environment with repo src/ on PYTHONPATH."""
    env = dict(base_env or os.environ)
    src_path = Path(__file__).resolve().parents[1] / "src"
    entries = [entry for entry in env.get("PYTHONPATH", "").split(os.pathsep) if entry]
    if str(src_path) not in entries:
        entries.insert(0, str(src_path))
    env["PYTHONPATH"] = os.pathsep.join(entries)
    return env
