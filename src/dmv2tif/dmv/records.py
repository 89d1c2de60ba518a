"""Line reading and record parsing for DMV XYZ point files."""

from __future__ import annotations

import math
import re
from typing import BinaryIO, Iterator

from dmv2tif.dmv.models import MalformedRecordError, Sample

FIELD_NAMES = ("northing", "easting", "elevation")
MIN_RECORD_LENGTH = 5

_NUMBER_PREFIX = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def read_line(stream: BinaryIO) -> bytes | None:
    """Read bytes up to the next newline, dropping carriage returns.

    Returns ``None`` only when the stream is exhausted before any byte of a
    new line was read.
    """
    buffer = bytearray()
    while True:
        char = stream.read(1)
        if not char:
            return bytes(buffer) if buffer else None
        if char == b"\n":
            return bytes(buffer)
        if char == b"\r":
            continue
        buffer += char


def parse_field(text: str, *, name: str = "value", strict: bool = False) -> float:
    """Parse the leading decimal number of a field.

    Text without a numeric prefix parses to 0.0 unless ``strict`` is set, in
    which case the whole field must be a number. Values that overflow to
    infinity are treated the same way.
    """
    match = _NUMBER_PREFIX.match(text)
    if strict:
        if match is None or match.end() != len(text.rstrip()):
            raise MalformedRecordError(name, text)
    if match is None:
        return 0.0
    value = float(match.group().strip())
    if math.isinf(value):
        if strict:
            raise MalformedRecordError(name, text)
        return 0.0
    return value


def parse_record(line: bytes | str, *, strict: bool = False) -> Sample:
    """Parse a space separated ``northing easting elevation`` record."""
    text = line.decode("ascii", errors="replace") if isinstance(line, bytes) else line
    fields = text.split(" ", 2)
    values = []
    for index, name in enumerate(FIELD_NAMES):
        field_text = fields[index] if index < len(fields) else ""
        values.append(parse_field(field_text, name=name, strict=strict))
    return Sample(*values)


def next_record(
    stream: BinaryIO,
    *,
    min_length: int = MIN_RECORD_LENGTH,
    strict: bool = False,
) -> Sample | None:
    """Return the next record, or None once input ends or a short line is read."""
    line = read_line(stream)
    if line is None or len(line) <= min_length:
        return None
    return parse_record(line, strict=strict)


def iter_records(
    stream: BinaryIO,
    *,
    min_length: int = MIN_RECORD_LENGTH,
    strict: bool = False,
) -> Iterator[Sample]:
    """Yield records until end of input or the first short line."""
    while True:
        sample = next_record(stream, min_length=min_length, strict=strict)
        if sample is None:
            return
        yield sample
