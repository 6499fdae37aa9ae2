"""Module entry point: python -m fleet_analyze ..."""

from __future__ import annotations

from fleet_analyze.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
