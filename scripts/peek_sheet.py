#!/usr/bin/env python3
"""Print the first rows of an inventory export.

Handy when a new export fails to parse: shows which worksheet was picked
and where the header row really is.

Example
-------
    python scripts/peek_sheet.py ConteoSuc2.xml --rows 15
"""
from __future__ import annotations

import argparse
from pathlib import Path

import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

from remito_ingest import peek_rows
from remito_ingest.headers import locate_header


def main() -> None:
    ap = argparse.ArgumentParser(description="Show the first rows of an inventory spreadsheet export")
    ap.add_argument("sheet", type=Path, help="xlsx or SpreadsheetML file")
    ap.add_argument("--rows", type=int, default=10, help="Number of rows to show")
    args = ap.parse_args()

    name, rows = peek_rows(args.sheet.read_bytes(), args.rows)
    header_idx, columns = locate_header(rows)
    print(f"Sheet Name: {name}")
    print(f"Header row: {header_idx}  Columns: {columns}")
    for i, row in enumerate(rows):
        print(f"Row {i}: {row!r}")


if __name__ == "__main__":
    main()
