"""Command-line interface for dmv2tif."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path

from dmv2tif import __version__
from dmv2tif.contracts import validate_conversion_report
from dmv2tif.dmv.dataset import DmvDataset
from dmv2tif.dmv.models import IngestOptions
from dmv2tif.dmv.sheets import locate_tile, parse_tile_id
from dmv2tif.logging_utils import LogOptions, configure_logging
from dmv2tif.reporting import conversion_report

LOGGER = logging.getLogger("dmv2tif.cli")


def _add_ingest_arguments(parser: argparse.ArgumentParser) -> None:
    """Register options shared by commands that read a sheet."""
    parser.add_argument("path", help="Path to a VT<letter><NN><NN>.xyz sheet.")
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail on malformed numeric fields instead of reading them as 0.",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Maximum elevation difference from written neighbors (default: 30).",
    )


def _add_locate_parser(subparsers: argparse._SubParsersAction) -> None:
    locate = subparsers.add_parser("locate", help="Print the grid geometry of a sheet name.")
    locate.add_argument("name", help="Sheet name like VTB1901 or VTB1901.xyz.")


def _add_info_parser(subparsers: argparse._SubParsersAction) -> None:
    info = subparsers.add_parser("info", help="Read a sheet and print its conversion report.")
    _add_ingest_arguments(info)


def _add_convert_parser(subparsers: argparse._SubParsersAction) -> None:
    convert = subparsers.add_parser("convert", help="Convert a sheet to a GeoTIFF.")
    _add_ingest_arguments(convert)
    convert.add_argument("--output", required=True, help="Output GeoTIFF path.")
    convert.add_argument("--report", help="Optional path for a JSON conversion report.")


def _ingest_options(args: argparse.Namespace) -> IngestOptions:
    return IngestOptions.from_env(
        outlier_threshold=getattr(args, "threshold", None),
        strict=getattr(args, "strict", None),
    )


def _run_locate(args: argparse.Namespace) -> int:
    tile = parse_tile_id(args.name)
    geometry = locate_tile(tile)
    payload = {"tile": tile.name, "valid": geometry.valid, **asdict(geometry)}
    print(json.dumps(payload, indent=2))
    if not geometry.valid:
        LOGGER.error("No sheet coverage for %s", tile.name)
        return 1
    return 0


def _run_info(args: argparse.Namespace) -> int:
    options = _ingest_options(args)
    dataset = DmvDataset.open(Path(args.path), options=options)
    report = conversion_report(dataset, options=options)
    validate_conversion_report(report)
    print(json.dumps(report, indent=2))
    return 0


def _run_convert(args: argparse.Namespace) -> int:
    options = _ingest_options(args)
    dataset = DmvDataset.open(Path(args.path), options=options)
    output_path = dataset.write_geotiff(Path(args.output))
    LOGGER.info("Wrote %s", output_path, extra={"tile": dataset.tile.name})
    if args.report:
        report = conversion_report(dataset, options=options, output_path=output_path)
        validate_conversion_report(report)
        report_path = Path(args.report)
        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
        LOGGER.info("Conversion report written to %s", report_path)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Run the CLI entrypoint and return an exit code."""
    parser = argparse.ArgumentParser(
        prog="dmv2tif",
        description="DMV2TIF Slovenian DEM sheet converter",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (repeatable).",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Reduce log output to warnings and errors.",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit logs as JSON on stderr.",
    )
    parser.add_argument(
        "--log-file",
        help="Optional path for JSON log output.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_locate_parser(subparsers)
    _add_info_parser(subparsers)
    _add_convert_parser(subparsers)
    subparsers.add_parser("version", help="Print the dmv2tif version.")

    args = parser.parse_args(argv)
    log_file_value = getattr(args, "log_file", None)
    configure_logging(
        LogOptions(
            verbose=args.verbose or 0,
            quiet=bool(args.quiet),
            log_file=Path(log_file_value) if log_file_value else None,
            json_console=bool(args.log_json),
        )
    )

    if args.command == "version":
        print(__version__)
        return 0
    handlers = {
        "locate": _run_locate,
        "info": _run_info,
        "convert": _run_convert,
    }
    handler = handlers.get(args.command)
    if handler is None:
        parser.error("Unknown command")
        return 2
    try:
        return handler(args)
    except (OSError, ValueError) as exc:
        LOGGER.error("%s failed: %s", args.command, exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
