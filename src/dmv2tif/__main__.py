"""Module entrypoint for `python -m dmv2tif`."""

from __future__ import annotations

from dmv2tif.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
